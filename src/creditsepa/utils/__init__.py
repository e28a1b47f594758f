"""Utility functions for creditsepa."""

from creditsepa.utils.name_key import normalize_name, normalize_iban
from creditsepa.utils.amount_parser import parse_amount
from creditsepa.utils.date_parser import parse_date, days_until

__all__ = ["normalize_name", "normalize_iban", "parse_amount", "parse_date", "days_until"]
