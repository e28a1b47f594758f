"""Parsing of the mapping export into a name to account mapping.

The export is a semicolon-delimited file in which every booking line carries
the payee name and IBAN at fixed column positions. Lines are processed in file
order, which is assumed to be chronological (oldest first): the last line for
a name decides its IBAN, and an entry is flagged as ``changed`` as soon as a
later line disagrees with an earlier one. The trailing date column some
exports carry is not used for ordering.
"""

import csv
import io
import logging
from dataclasses import replace
from typing import Iterable, Sequence

from creditsepa.domain.entities import Account, MappingEntry, MappingLayout
from creditsepa.utils.name_key import normalize_iban, normalize_name

logger = logging.getLogger(__name__)


def parse_mapping_source(content: str, layout: MappingLayout = MappingLayout()) -> list[list[str]]:
    """Split the stored mapping text into rows of fields."""
    reader = csv.reader(io.StringIO(content), delimiter=layout.delimiter)
    return [row for row in reader]


def _extract(row: Sequence[str], layout: MappingLayout) -> tuple[str, str] | None:
    """Return (name, iban) for a usable row, None for a row to skip."""
    if len(row) < layout.min_fields:
        return None
    name = row[layout.name_column].strip()
    iban = normalize_iban(row[layout.iban_column])
    if not name or not iban:
        return None
    return name, iban


def load_mapping(
    rows: Iterable[Sequence[str]], layout: MappingLayout = MappingLayout()
) -> dict[str, MappingEntry]:
    """Fold mapping rows into a mapping keyed by normalized name.

    Args:
        rows: Rows of fields in chronological order
        layout: Column layout of the rows

    Returns:
        Dict of name key to MappingEntry. Malformed rows are skipped.
    """
    mapping: dict[str, MappingEntry] = {}

    for row_num, row in enumerate(rows, start=1):
        extracted = _extract(row, layout)
        if extracted is None:
            logger.debug("Skipping mapping row %d: missing name or IBAN", row_num)
            continue
        name, iban = extracted
        key = normalize_name(name)

        entry = mapping.get(key)
        if entry is None:
            mapping[key] = MappingEntry(display_name=name, account=Account(iban=iban))
        elif entry.account.iban != iban:
            logger.debug("IBAN for '%s' changed in row %d", name, row_num)
            mapping[key] = replace(entry, display_name=name, account=Account(iban=iban), changed=True)
        else:
            mapping[key] = replace(entry, display_name=name)

    return mapping


def count_usable_rows(rows: Iterable[Sequence[str]], layout: MappingLayout = MappingLayout()) -> int:
    """Count rows that carry a name and an IBAN."""
    return sum(1 for row in rows if _extract(row, layout) is not None)
