"""Payment file history command."""

import click
from creditsepa.domain.payment_history import PaymentHistoryService


@click.command("history")
@click.pass_context
def show_history(ctx):
    """List generated payment files."""
    service = PaymentHistoryService(ctx.obj["db"])

    files = service.list_files()
    if not files:
        click.echo("No payment files generated yet.")
        return

    click.echo("\nPayment files:")
    click.echo("-" * 90)
    for record in files:
        click.echo(
            f"{record.created_at:%Y-%m-%d %H:%M:%S} | {record.message_id:20s} | "
            f"{record.number_of_transactions:4d} txs | {record.control_sum:>12.2f} | {record.filename}"
        )


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(show_history)
