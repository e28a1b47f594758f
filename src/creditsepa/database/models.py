"""SQLAlchemy models for the creditsepa database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class MappingSourceRow(Base):
    """Uploaded mapping export. At most one row exists; uploads replace it."""

    __tablename__ = "mapping_sources"

    id = Column(Integer, primary_key=True)
    filename = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    uploaded_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class PaymentFile(Base):
    """Generated SEPA payment file."""

    __tablename__ = "payment_files"

    id = Column(Integer, primary_key=True)
    message_id = Column(String, unique=True, nullable=False)
    filename = Column(String, nullable=False)
    number_of_transactions = Column(Integer, nullable=False)
    control_sum = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
