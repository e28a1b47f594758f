"""Shared pytest fixtures for creditsepa tests."""

import tempfile
import os
from decimal import Decimal
from pathlib import Path
import pytest

from creditsepa.database.factories import create_sqlite_database
from creditsepa.domain.entities import CreditNote
from creditsepa.domain.mapping import MappingService
from creditsepa.domain.payment_history import PaymentHistoryService
from creditsepa.integrations.accounting import AccountingClient


def mapping_row(name: str, iban: str, booked: str = "2024-01-15") -> list[str]:
    """Build an export row with the name at index 7 and the IBAN at index 10."""
    return [booked, "GS-1", "1200", "70000", "10,00", "S", "Gutschrift", name, "Berlin", "DE", iban]


def credit_note(
    voucher_number: str,
    contact_name: str,
    open_amount: str | None = "100.00",
    total_amount: str | None = None,
    status: str = "open",
    note_id: str | None = None,
) -> CreditNote:
    """Build a credit note as the accounting client would return it."""
    return CreditNote(
        id=note_id if note_id is not None else f"id-{voucher_number}",
        voucher_number=voucher_number,
        contact_name=contact_name,
        status=status,
        open_amount=Decimal(open_amount) if open_amount is not None else None,
        total_amount=Decimal(total_amount) if total_amount is not None else None,
        voucher_type="creditnote",
    )


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class StubSession:
    """Records GET requests and answers with a fixed response or error."""

    def __init__(self, response: StubResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def mapping_service(temp_db):
    """Create a MappingService with a temporary database."""
    return MappingService(temp_db)


@pytest.fixture
def history_service(temp_db):
    """Create a PaymentHistoryService with a temporary database."""
    return PaymentHistoryService(temp_db)


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def uploaded_mapping(mapping_service, fixtures_dir):
    """Upload the sample mapping export."""
    mapping_service.upload(str(fixtures_dir / "mapping_export.csv"))
    return mapping_service


@pytest.fixture
def open_notes():
    """Credit notes for a mapped, an unmapped and a draft contact."""
    return [
        credit_note("GS-1001", "Acme Corp", open_amount="123.45"),
        credit_note("GS-1002", "Unknown Ltd", open_amount="50.00"),
        credit_note("GS-1003", "Müller GmbH", open_amount="10.00", status="draft"),
    ]


@pytest.fixture
def stub_accounting(monkeypatch, open_notes):
    """Make the CLI's accounting client return open_notes without network access."""
    monkeypatch.setattr(AccountingClient, "fetch_open_credit_notes", lambda self: open_notes)
    return open_notes


@pytest.fixture
def debtor_env(monkeypatch):
    """Configure the paying account through environment variables."""
    monkeypatch.setenv("CREDITSEPA_DEBTOR_NAME", "Beispiel GmbH")
    monkeypatch.setenv("CREDITSEPA_DEBTOR_IBAN", "DE02 1203 0000 0000 2020 51")
    monkeypatch.setenv("CREDITSEPA_DEBTOR_BIC", "byladem1001")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
