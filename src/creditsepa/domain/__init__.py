"""Domain layer for creditsepa application.

Only the pure reconciliation core is re-exported here; the database-backed
services live in ``creditsepa.domain.mapping`` and
``creditsepa.domain.payment_history``.
"""

from creditsepa.domain.mapping_store import load_mapping, parse_mapping_source
from creditsepa.domain.reconciliation import annotate, resolve, unresolved
from creditsepa.domain.payment_file import PaymentFileBuilder

__all__ = [
    "load_mapping",
    "parse_mapping_source",
    "annotate",
    "resolve",
    "unresolved",
    "PaymentFileBuilder",
]
