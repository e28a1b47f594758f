"""Reconciliation of open credit notes against the account mapping."""

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from creditsepa.domain.entities import (
    Account,
    AnnotatedNote,
    CreditNote,
    ManualOverride,
    MappingEntry,
    PaymentCandidate,
)
from creditsepa.utils.name_key import normalize_iban, normalize_name

logger = logging.getLogger(__name__)

OPEN_STATUS = "open"


def payable_amount(note: CreditNote) -> Optional[Decimal]:
    """Return the amount to transfer, or None if the note is not payable.

    A note is payable when it is open, carries an id and has a positive
    amount. Listing and payment both go through this check.
    """
    if note.status != OPEN_STATUS or not note.id:
        return None
    amount = note.amount
    if amount is None or amount <= 0:
        return None
    return amount


def annotate(
    notes: Sequence[CreditNote], mapping: Mapping[str, MappingEntry]
) -> list[AnnotatedNote]:
    """Attach mapping status to every payable credit note.

    Notes that payable_amount() rejects are left out; every other note is
    listed, mapped or not, so that missing accounts can be entered by hand.
    """
    annotated = []
    for note in notes:
        if payable_amount(note) is None:
            continue
        entry = mapping.get(normalize_name(note.contact_name))
        if entry is None:
            annotated.append(AnnotatedNote(note=note, account=None, changed=False, has_mapping=False))
        else:
            annotated.append(
                AnnotatedNote(note=note, account=entry.account, changed=entry.changed, has_mapping=True)
            )
    return annotated


def _resolve_account(
    note: CreditNote,
    mapping: Mapping[str, MappingEntry],
    overrides: Mapping[str, Optional[ManualOverride]],
) -> Optional[Account]:
    override = overrides.get(note.voucher_number)
    if override is not None and override.iban.strip():
        return Account(
            iban=normalize_iban(override.iban), bic=override.bic.strip().upper()
        ).with_bic_fallback()

    entry = mapping.get(normalize_name(note.contact_name))
    if entry is None:
        return None
    return entry.account.with_bic_fallback()


def resolve(
    notes: Sequence[CreditNote],
    mapping: Mapping[str, MappingEntry],
    overrides: Optional[Mapping[str, Optional[ManualOverride]]] = None,
) -> list[PaymentCandidate]:
    """Turn credit notes into payment candidates.

    A manual override (keyed by voucher number) wins over the mapping.
    Notes that payable_amount() rejects, that have no contact name or that
    cannot be given an IBAN are dropped.

    Args:
        notes: Credit notes in display order
        mapping: Name key to mapping entry
        overrides: Optional manual accounts by voucher number

    Returns:
        List of fully resolved candidates in input order
    """
    overrides = overrides or {}
    candidates = []

    for note in notes:
        amount = payable_amount(note)
        if amount is None:
            continue
        if not note.contact_name.strip():
            logger.debug("Skipping credit note %s: no contact name", note.voucher_number)
            continue

        account = _resolve_account(note, mapping, overrides)
        if account is None or not account.iban:
            logger.debug(
                "Credit note %s for '%s' has no account", note.voucher_number, note.contact_name
            )
            continue

        candidates.append(
            PaymentCandidate(
                voucher_number=note.voucher_number,
                contact_name=note.contact_name,
                amount=amount,
                account=account,
            )
        )

    return candidates


def unresolved(
    notes: Sequence[CreditNote],
    mapping: Mapping[str, MappingEntry],
    overrides: Optional[Mapping[str, Optional[ManualOverride]]] = None,
) -> list[CreditNote]:
    """Return payable credit notes that resolve() cannot turn into candidates."""
    resolved = {c.voucher_number for c in resolve(notes, mapping, overrides)}
    return [
        note
        for note in notes
        if payable_amount(note) is not None and note.voucher_number not in resolved
    ]
