"""Mapper functions to convert between domain models and SQLAlchemy models."""

from creditsepa.domain import entities as domain
from creditsepa.database.models import (
    MappingSourceRow as ORMMappingSource,
    PaymentFile as ORMPaymentFile,
)


def mapping_source_to_domain(orm_source: ORMMappingSource) -> domain.MappingSource:
    """Convert SQLAlchemy MappingSourceRow model to domain MappingSource entity."""
    return domain.MappingSource(
        filename=orm_source.filename,
        content=orm_source.content,
        uploaded_at=orm_source.uploaded_at,
    )


def payment_file_to_domain(orm_file: ORMPaymentFile) -> domain.PaymentFileRecord:
    """Convert SQLAlchemy PaymentFile model to domain PaymentFileRecord entity."""
    return domain.PaymentFileRecord(
        id=orm_file.id,
        message_id=orm_file.message_id,
        filename=orm_file.filename,
        number_of_transactions=orm_file.number_of_transactions,
        control_sum=orm_file.control_sum,
        created_at=orm_file.created_at,
    )
