"""Reporting of expected failures on the command line."""

import click

from creditsepa.domain.errors import DomainError


def fail(ctx: click.Context, message: str) -> None:
    """Print an error line on stderr and end the command with status 1."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Report a domain error raised before any output file was written."""
    fail(ctx, str(error))
