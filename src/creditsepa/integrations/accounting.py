"""Accounting API client for open credit notes (Lexware/lexoffice voucher list)."""

import logging
from decimal import Decimal
from typing import Any, Optional

import requests

from creditsepa.domain.entities import CreditNote
from creditsepa.domain.errors import UpstreamError, upstream_status
from creditsepa.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.lexware.io"
PLACEHOLDER_API_KEYS = {"", "PASTE_YOUR_API_KEY_HERE", "your-key-here"}
CREDIT_NOTE_TYPES = "creditnote,salescreditnote"
PAGE_SIZE = 250


def _amount(value: Any) -> Optional[Decimal]:
    """Parse an amount field. Absent is None; unparsable is zero, which is never paid."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError:
        logger.warning("Unparsable amount %r, treating the note as not payable", value)
        return Decimal("0")


def credit_note_from_json(row: dict[str, Any]) -> CreditNote:
    """Convert one voucher list entry into a CreditNote."""
    return CreditNote(
        id=str(row.get("id") or ""),
        voucher_number=str(row.get("voucherNumber") or ""),
        contact_name=str(row.get("contactName") or ""),
        status=str(row.get("voucherStatus") or ""),
        open_amount=_amount(row.get("openAmount")),
        total_amount=_amount(row.get("totalAmount")),
        voucher_type=str(row.get("voucherType") or ""),
    )


class AccountingClient:
    """Client for the accounting API's voucher list."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize accounting client.

        Args:
            api_key: Bearer token for the API
            base_url: API gateway URL
            timeout: Request timeout in seconds
            session: Optional requests session (a new one is created if omitted)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def voucherlist_url(self) -> str:
        return f"{self.base_url}/v1/voucherlist"

    def fetch_open_credit_notes(self) -> list[CreditNote]:
        """Fetch open, non-archived credit notes.

        Returns:
            List of credit notes in API order

        Raises:
            UpstreamError: If no API key is configured, the request fails,
                the API answers with a non-200 status or the body is not JSON
        """
        if self.api_key is None or self.api_key.strip() in PLACEHOLDER_API_KEYS:
            raise UpstreamError("No accounting API key configured (set CREDITSEPA_API_KEY)")

        params = {
            "voucherType": CREDIT_NOTE_TYPES,
            "voucherStatus": "open",
            "archived": "false",
            "size": PAGE_SIZE,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

        logger.debug("Requesting %s", self.voucherlist_url)
        try:
            response = self.session.get(
                self.voucherlist_url, params=params, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Accounting API request failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(upstream_status(response.status_code, self.voucherlist_url))

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Accounting API response is not valid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamError("Accounting API response is not valid JSON")

        content = data.get("content") or []
        notes = [credit_note_from_json(row) for row in content if isinstance(row, dict)]
        logger.info("Fetched %d credit notes from the accounting API", len(notes))
        return notes
