"""Payment file history domain service."""

from decimal import Decimal

from creditsepa.database.base import Database
from creditsepa.domain.entities import PaymentFileRecord
from creditsepa.domain.errors import ConflictError, duplicate_message_id


class PaymentHistoryService:
    """Service for recording generated payment files."""

    def __init__(self, db: Database):
        """Initialize payment history service.

        Args:
            db: Database instance
        """
        self.db = db

    def ensure_unused(self, message_id: str) -> None:
        """Raise ConflictError if a file with this message id was already issued."""
        if self.db.payment_file_exists(message_id):
            raise ConflictError(duplicate_message_id(message_id))

    def record(
        self,
        message_id: str,
        filename: str,
        number_of_transactions: int,
        control_sum: Decimal,
    ) -> int:
        """Record a payment file, reserving its message id.

        Called before the file is written, so that two runs within the same
        second cannot both produce a file with the same id.

        Args:
            message_id: MsgId of the file
            filename: Name the file is written under
            number_of_transactions: NbOfTxs of the file
            control_sum: CtrlSum of the file

        Returns:
            Record ID

        Raises:
            ConflictError: If the message id was already recorded
        """
        self.ensure_unused(message_id)
        return self.db.create_payment_file(
            message_id=message_id,
            filename=filename,
            number_of_transactions=number_of_transactions,
            control_sum=control_sum,
        )

    def forget(self, message_id: str) -> None:
        """Release a reserved message id whose file could not be written."""
        self.db.delete_payment_file(message_id)

    def list_files(self) -> list[PaymentFileRecord]:
        """List generated payment files, newest first."""
        return self.db.list_payment_files()
