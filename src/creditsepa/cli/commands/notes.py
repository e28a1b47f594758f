"""Credit note listing command."""

import click
from creditsepa.cli.error_handling import handle_domain_error
from creditsepa.cli.options import build_layout, mapping_layout_options
from creditsepa.domain.errors import DomainError
from creditsepa.domain.mapping import MappingService
from creditsepa.domain.reconciliation import annotate


@click.command("notes")
@mapping_layout_options
@click.pass_context
def list_notes(ctx, delimiter: str, name_column: int, iban_column: int):
    """List open credit notes with their mapping status.

    Notes marked "no mapping" need an IBAN on the command line
    (see "generate --override") before they can be paid.
    """
    mapping_service = MappingService(ctx.obj["db"], build_layout(delimiter, name_column, iban_column))

    try:
        credit_notes = ctx.obj["accounting"].fetch_open_credit_notes()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not mapping_service.has_source():
        click.echo("Warning: no mapping file uploaded yet.", err=True)

    rows = annotate(credit_notes, mapping_service.load())
    if not rows:
        click.echo("No open credit notes found.")
        return

    click.echo(f"\nOpen credit notes: {len(rows)}")
    click.echo("-" * 110)
    click.echo(
        f"{'Number':15s} | {'Contact':30s} | {'Amount':>10s} | {'IBAN':27s} | {'BIC':11s} | Mapping"
    )
    click.echo("-" * 110)
    for row in rows:
        iban = row.account.iban if row.account else ""
        bic = row.account.bic if row.account else ""
        status = "OK" if row.has_mapping else "no mapping"
        if row.changed:
            status += " (IBAN changed)"
        click.echo(
            f"{row.note.voucher_number:15s} | {row.note.contact_name[:30]:30s} | "
            f"{row.note.amount:>10.2f} | {iban:27s} | {bic:11s} | {status}"
        )


def register_commands(cli):
    """Register notes command with main CLI."""
    cli.add_command(list_notes)
