"""Mapping upload and inspection commands."""

import click
from creditsepa.cli.error_handling import handle_domain_error
from creditsepa.cli.options import build_layout, mapping_layout_options
from creditsepa.domain.errors import DomainError
from creditsepa.domain.mapping import MappingService


@click.group()
def mapping_group():
    """Manage the name to IBAN mapping."""
    pass


@mapping_group.command("upload")
@click.argument("csv_file", type=click.Path())
@click.option("--encoding", default="utf-8-sig", show_default=True, help="Text encoding of the file")
@mapping_layout_options
@click.pass_context
def upload_mapping(
    ctx, csv_file: str, encoding: str, delimiter: str, name_column: int, iban_column: int
):
    """Upload a mapping export, replacing the previous one.

    The export is read row by row in file order; the last row for a name
    decides its IBAN.

    Examples:
        creditsepa mapping upload export.csv
        creditsepa mapping upload export.csv --encoding cp1252
    """
    service = MappingService(ctx.obj["db"], build_layout(delimiter, name_column, iban_column))

    try:
        result = service.upload(csv_file, encoding=encoding)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("Mapping uploaded:")
    click.echo(f"  Rows: {result['rows']}")
    click.echo(f"  Skipped: {result['skipped']} rows without name or IBAN")
    click.echo(f"  Names: {result['entries']}")
    if result["changed"]:
        click.echo(f"  IBAN changed: {result['changed']} names")


@mapping_group.command("show")
@click.option("--changed-only", is_flag=True, help="Only show names whose IBAN changed")
@mapping_layout_options
@click.pass_context
def show_mapping(ctx, changed_only: bool, delimiter: str, name_column: int, iban_column: int):
    """Show the current mapping."""
    service = MappingService(ctx.obj["db"], build_layout(delimiter, name_column, iban_column))

    source = service.get_source()
    if source is None:
        click.echo("No mapping file uploaded.")
        return

    entries = sorted(service.load().values(), key=lambda e: e.display_name.casefold())
    if changed_only:
        entries = [e for e in entries if e.changed]

    click.echo(f"\nMapping from {source.filename} (uploaded {source.uploaded_at:%Y-%m-%d %H:%M}):")
    click.echo("-" * 80)
    if not entries:
        click.echo("No entries found.")
        return
    for entry in entries:
        flag = "  IBAN changed" if entry.changed else ""
        click.echo(f"{entry.display_name:35s} | {entry.account.iban:34s}{flag}")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mapping_group, name="mapping")
