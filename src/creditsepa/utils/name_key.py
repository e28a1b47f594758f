"""Normalization of payee names and IBANs for matching."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Normalize a contact name into a comparison key.

    Case folding is Unicode-aware, surrounding whitespace is stripped and
    inner whitespace runs collapse to a single space, so "  ACME  Corp "
    and "acme corp" share a key.
    """
    return _WHITESPACE.sub(" ", name.casefold().strip())


def normalize_iban(iban: str) -> str:
    """Upper-case an IBAN and drop all whitespace."""
    return _WHITESPACE.sub("", iban.strip().upper())
