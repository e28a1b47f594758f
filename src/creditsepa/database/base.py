"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from creditsepa.domain.entities import MappingSource, PaymentFileRecord


class Database(ABC):
    """Abstract database interface for creditsepa."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Mapping source operations
    @abstractmethod
    def replace_mapping_source(self, filename: str, content: str) -> None:
        """Store a mapping upload, discarding any previous one."""
        pass

    @abstractmethod
    def get_mapping_source(self) -> Optional[MappingSource]:
        """Get the current mapping upload, or None if nothing was uploaded."""
        pass

    # Payment file operations
    @abstractmethod
    def create_payment_file(
        self,
        message_id: str,
        filename: str,
        number_of_transactions: int,
        control_sum: Decimal,
    ) -> int:
        """Record a generated payment file. Returns record ID.

        Raises ConflictError if the message id is already recorded.
        """
        pass

    @abstractmethod
    def delete_payment_file(self, message_id: str) -> None:
        """Remove the record of a payment file."""
        pass

    @abstractmethod
    def payment_file_exists(self, message_id: str) -> bool:
        """Check whether a payment file with this message id was recorded."""
        pass

    @abstractmethod
    def list_payment_files(self) -> list[PaymentFileRecord]:
        """List recorded payment files, newest first."""
        pass
