"""Clients for external systems."""

from creditsepa.integrations.accounting import AccountingClient

__all__ = ["AccountingClient"]
