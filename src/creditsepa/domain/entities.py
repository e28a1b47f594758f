"""Domain model entities for creditsepa.

These are pure data classes representing the business concepts of the
reconciliation run, independent of the database schema and of the accounting
API's JSON layout.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

BIC_NOT_PROVIDED = "NOTPROVIDED"


@dataclass(frozen=True)
class Account:
    """Resolved bank account of a payee."""

    iban: str
    bic: str = ""

    def with_bic_fallback(self) -> "Account":
        """Return the account with an empty BIC replaced by the sentinel."""
        if self.bic:
            return self
        return Account(iban=self.iban, bic=BIC_NOT_PROVIDED)


@dataclass(frozen=True)
class MappingEntry:
    """One reconciled row of the name to account mapping."""

    display_name: str
    account: Account
    changed: bool = False


@dataclass(frozen=True)
class CreditNote:
    """Open credit note as listed by the accounting system."""

    id: str
    voucher_number: str
    contact_name: str
    status: str
    open_amount: Optional[Decimal]
    total_amount: Optional[Decimal]
    voucher_type: str = ""

    @property
    def amount(self) -> Optional[Decimal]:
        """Open amount, falling back to the total amount."""
        if self.open_amount is not None:
            return self.open_amount
        return self.total_amount


@dataclass(frozen=True)
class ManualOverride:
    """Account entered by hand for a credit note without a usable mapping."""

    iban: str
    bic: str = ""


@dataclass(frozen=True)
class AnnotatedNote:
    """Credit note with its mapping status, used for the review listing."""

    note: CreditNote
    account: Optional[Account]
    changed: bool
    has_mapping: bool


@dataclass(frozen=True)
class PaymentCandidate:
    """Fully resolved transfer, ready to be written to a payment file."""

    voucher_number: str
    contact_name: str
    amount: Decimal
    account: Account


@dataclass(frozen=True)
class DebtorConfig:
    """Identity of the paying account holder."""

    name: str
    iban: str
    bic: str = ""


@dataclass(frozen=True)
class MappingLayout:
    """Column layout of the semicolon-delimited mapping export."""

    delimiter: str = ";"
    name_column: int = 7
    iban_column: int = 10
    min_fields: int = 11


@dataclass(frozen=True)
class PaymentFileSettings:
    """Static settings of generated payment files."""

    currency: str
    remittance_label: str = "Rechnungskorrektur"


@dataclass(frozen=True)
class MappingSource:
    """Currently stored mapping upload."""

    filename: str
    content: str
    uploaded_at: datetime


@dataclass(frozen=True)
class PaymentFileRecord:
    """History entry for a generated payment file."""

    id: int
    message_id: str
    filename: str
    number_of_transactions: int
    control_sum: Decimal
    created_at: datetime
