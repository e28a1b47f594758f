"""Mapping upload domain service."""

import logging
from pathlib import Path
from typing import Any, Optional

from creditsepa.database.base import Database
from creditsepa.domain.entities import MappingEntry, MappingLayout, MappingSource
from creditsepa.domain.errors import NotFoundError, ValidationError, mapping_file_not_found
from creditsepa.domain.mapping_store import count_usable_rows, load_mapping, parse_mapping_source

logger = logging.getLogger(__name__)


class MappingService:
    """Service for storing and loading the name to IBAN mapping."""

    def __init__(self, db: Database, layout: MappingLayout = MappingLayout()):
        """Initialize mapping service.

        Args:
            db: Database instance
            layout: Column layout of the mapping export
        """
        self.db = db
        self.layout = layout

    def upload(self, csv_file_path: str, encoding: str = "utf-8-sig") -> dict[str, Any]:
        """Replace the stored mapping with the contents of a file.

        Args:
            csv_file_path: Path to the semicolon-delimited export
            encoding: Text encoding of the file

        Returns:
            Dict with upload statistics:
            - rows: number of rows in the file
            - skipped: rows without a name or IBAN
            - entries: distinct names in the resulting mapping
            - changed: names whose IBAN changed within the file

        Raises:
            NotFoundError: If the file doesn't exist
            ValidationError: If the file cannot be decoded
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise NotFoundError(mapping_file_not_found(csv_file_path))

        try:
            content = csv_path.read_text(encoding=encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise ValidationError(f"Could not read {csv_path.name} as {encoding}: {e}")

        rows = parse_mapping_source(content, self.layout)
        mapping = load_mapping(rows, self.layout)

        self.db.replace_mapping_source(filename=csv_path.name, content=content)
        logger.info("Stored mapping upload %s with %d rows", csv_path.name, len(rows))

        return {
            "rows": len(rows),
            "skipped": len(rows) - count_usable_rows(rows, self.layout),
            "entries": len(mapping),
            "changed": sum(1 for entry in mapping.values() if entry.changed),
        }

    def get_source(self) -> Optional[MappingSource]:
        """Get the stored upload, or None if nothing was uploaded yet."""
        return self.db.get_mapping_source()

    def has_source(self) -> bool:
        """Check whether a mapping file has been uploaded."""
        return self.get_source() is not None

    def load(self) -> dict[str, MappingEntry]:
        """Load the mapping from the stored upload.

        Returns:
            Dict of name key to MappingEntry; empty if nothing was uploaded
        """
        source = self.get_source()
        if source is None:
            logger.debug("No mapping upload stored; using an empty mapping")
            return {}
        return load_mapping(parse_mapping_source(source.content, self.layout), self.layout)
