"""Main CLI entry point."""

import logging

import click
from creditsepa.database.factories import create_sqlite_database
from creditsepa.integrations.accounting import AccountingClient, DEFAULT_BASE_URL

# Import and register all commands at module level
from creditsepa.cli.commands import (
    mapping,
    notes,
    generate,
    history,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CREDITSEPA_DB_PATH environment variable)",
    envvar="CREDITSEPA_DB_PATH",
)
@click.option(
    "--api-key",
    help="Accounting API key (overrides CREDITSEPA_API_KEY environment variable)",
    envvar="CREDITSEPA_API_KEY",
)
@click.option(
    "--api-url",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Accounting API base URL",
    envvar="CREDITSEPA_API_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, api_key: str | None, api_url: str, verbose: bool):
    """creditsepa - Pay open credit notes by SEPA transfer.

    Match open credit notes from the accounting system against an uploaded
    name to IBAN export and write a pain.001.001.03 payment file.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)
        ctx.obj["accounting"] = AccountingClient(api_key=api_key, base_url=api_url)


# Register all commands
mapping.register_commands(cli)
notes.register_commands(cli)
generate.register_commands(cli)
history.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
