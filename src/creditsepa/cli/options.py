"""Shared CLI option groups."""

import click

from creditsepa.domain.entities import MappingLayout


def _single_character(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if len(value) != 1:
        raise click.BadParameter(f"must be a single character, got {value!r}")
    return value


def mapping_layout_options(func):
    """Add the mapping export layout options to a command."""
    func = click.option(
        "--iban-column",
        type=click.IntRange(min=0),
        default=MappingLayout.iban_column,
        show_default=True,
        envvar="CREDITSEPA_MAPPING_IBAN_COLUMN",
        help="Zero-based column index of the IBAN",
    )(func)
    func = click.option(
        "--name-column",
        type=click.IntRange(min=0),
        default=MappingLayout.name_column,
        show_default=True,
        envvar="CREDITSEPA_MAPPING_NAME_COLUMN",
        help="Zero-based column index of the payee name",
    )(func)
    func = click.option(
        "--delimiter",
        default=MappingLayout.delimiter,
        show_default=True,
        callback=_single_character,
        envvar="CREDITSEPA_MAPPING_DELIMITER",
        help="Field delimiter of the mapping export (one character)",
    )(func)
    return func


def build_layout(delimiter: str, name_column: int, iban_column: int) -> MappingLayout:
    """Build a layout that requires every configured column to be present."""
    return MappingLayout(
        delimiter=delimiter,
        name_column=name_column,
        iban_column=iban_column,
        min_fields=max(name_column, iban_column) + 1,
    )
