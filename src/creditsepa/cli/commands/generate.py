"""SEPA payment file generation command."""

from datetime import datetime
from pathlib import Path

import click
from creditsepa.cli.error_handling import fail, handle_domain_error
from creditsepa.cli.options import build_layout, mapping_layout_options
from creditsepa.domain.entities import DebtorConfig, ManualOverride, PaymentFileSettings
from creditsepa.domain.errors import DomainError, ValidationError
from creditsepa.domain.mapping import MappingService
from creditsepa.domain.payment_file import (
    PaymentFileBuilder,
    default_filename,
    message_id,
    summarize,
)
from creditsepa.domain.payment_history import PaymentHistoryService
from creditsepa.domain.reconciliation import resolve, unresolved
from creditsepa.utils.date_parser import days_until, parse_date
from creditsepa.utils.name_key import normalize_iban


def parse_overrides(values: tuple[str, ...]) -> dict[str, ManualOverride]:
    """Parse VOUCHER=IBAN[:BIC] pairs into overrides keyed by voucher number.

    Raises:
        ValidationError: If a value is not of the form VOUCHER=IBAN[:BIC]
    """
    overrides = {}
    for value in values:
        voucher, sep, account = value.partition("=")
        iban, _, bic = account.partition(":")
        if not sep or not voucher.strip() or not iban.strip():
            raise ValidationError(f"Invalid override '{value}'. Expected VOUCHER=IBAN[:BIC]")
        overrides[voucher.strip()] = ManualOverride(iban=iban.strip(), bic=bic.strip())
    return overrides


@click.command("generate")
@click.option("--voucher", "vouchers", multiple=True, help="Voucher number to pay (repeatable; default: all)")
@click.option(
    "--override",
    "override_values",
    multiple=True,
    metavar="VOUCHER=IBAN[:BIC]",
    help="Manual account for a credit note (repeatable)",
)
@click.option("--output", "-o", type=click.Path(), help="Output file (default: sepa_creditnotes_<timestamp>.xml)")
@click.option("--debtor-name", required=True, envvar="CREDITSEPA_DEBTOR_NAME", help="Name of the paying account holder")
@click.option("--debtor-iban", required=True, envvar="CREDITSEPA_DEBTOR_IBAN", help="IBAN of the paying account")
@click.option("--debtor-bic", default="", envvar="CREDITSEPA_DEBTOR_BIC", help="BIC of the paying bank")
@click.option("--currency", default="EUR", show_default=True, envvar="CREDITSEPA_CURRENCY", help="ISO currency code")
@click.option(
    "--remittance-label",
    default="Rechnungskorrektur",
    show_default=True,
    envvar="CREDITSEPA_REMITTANCE_LABEL",
    help="Text put before the voucher number in the remittance information",
)
@click.option(
    "--execution-offset",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    envvar="CREDITSEPA_EXECUTION_OFFSET_DAYS",
    help="Days from today until the requested execution date",
)
@click.option("--execution-date", help="Requested execution date (e.g. 2024-01-15, tomorrow); overrides --execution-offset")
@mapping_layout_options
@click.pass_context
def generate_file(
    ctx,
    vouchers: tuple[str, ...],
    override_values: tuple[str, ...],
    output: str | None,
    debtor_name: str,
    debtor_iban: str,
    debtor_bic: str,
    currency: str,
    remittance_label: str,
    execution_offset: int,
    execution_date: str | None,
    delimiter: str,
    name_column: int,
    iban_column: int,
):
    """Generate a SEPA credit transfer file for open credit notes.

    Each selected note is paid to the IBAN given with --override or, failing
    that, to the IBAN of its contact in the uploaded mapping. Notes without
    either are left out and listed.

    Examples:
        creditsepa generate
        creditsepa generate --voucher GS-1001 --voucher GS-1002
        creditsepa generate --override "GS-1003=DE89370400440532013000:COBADEFFXXX"
    """
    db = ctx.obj["db"]
    mapping_service = MappingService(db, build_layout(delimiter, name_column, iban_column))
    history_service = PaymentHistoryService(db)

    try:
        overrides = parse_overrides(override_values)
        if execution_date:
            try:
                execution_offset = days_until(parse_date(execution_date))
            except ValueError as e:
                raise ValidationError(str(e))

        credit_notes = ctx.obj["accounting"].fetch_open_credit_notes()
        if vouchers:
            known = {note.voucher_number for note in credit_notes}
            missing = [v for v in vouchers if v not in known]
            if missing:
                raise ValidationError(f"Unknown or not open credit notes: {', '.join(missing)}")
            credit_notes = [note for note in credit_notes if note.voucher_number in vouchers]

        mapping = mapping_service.load()
        candidates = resolve(credit_notes, mapping, overrides)
        excluded = unresolved(credit_notes, mapping, overrides)

        now = datetime.now().astimezone()
        builder = PaymentFileBuilder(
            PaymentFileSettings(currency=currency.upper(), remittance_label=remittance_label)
        )
        debtor = DebtorConfig(
            name=debtor_name, iban=normalize_iban(debtor_iban), bic=debtor_bic.strip().upper()
        )
        document = builder.build(candidates, debtor, execution_offset, now=now)

        output_path = Path(output) if output else Path(default_filename(now))
        count, control_sum = summarize(candidates)
        # The unique message id is claimed before anything touches the disk
        history_service.record(
            message_id=message_id(now),
            filename=output_path.name,
            number_of_transactions=count,
            control_sum=control_sum,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    try:
        output_path.write_bytes(document)
    except OSError as e:
        history_service.forget(message_id(now))
        fail(ctx, f"Could not write {output_path}: {e}")
        return

    click.echo(f"Wrote {output_path}")
    click.echo(f"  Transactions: {count}")
    click.echo(f"  Control sum: {control_sum:.2f} {currency.upper()}")
    if excluded:
        click.echo(f"  Excluded (no IBAN): {len(excluded)}")
        for note in excluded:
            click.echo(f"    {note.voucher_number} {note.contact_name}", err=True)


def register_commands(cli):
    """Register generate command with main CLI."""
    cli.add_command(generate_file)
