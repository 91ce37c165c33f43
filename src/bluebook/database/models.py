"""SQLAlchemy models for the bluebook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Chart-of-accounts model. The four-digit code is the identity."""

    __tablename__ = "accounts"

    code = Column(String(4), primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    default_tax_category = Column(String, nullable=True)
    business_ratio_enabled = Column(Boolean, default=False, nullable=False)
    default_business_ratio = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class JournalEntry(Base):
    """Journal entry model."""

    __tablename__ = "journal_entries"

    id = Column(String, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    vendor = Column(String, default="", nullable=False)
    description = Column(String, default="", nullable=False)
    evidence_status = Column(String, default="none", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.position",
    )
    attachments = relationship(
        "Attachment",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="Attachment.created_at",
    )


class JournalLine(Base):
    """Journal line model.

    ``account_code`` is deliberately not a foreign key: entries may reference
    codes missing from the chart of accounts.
    """

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    line_id = Column(String, nullable=False)
    entry_id = Column(String, ForeignKey("journal_entries.id"), nullable=False)
    position = Column(Integer, nullable=False)
    side = Column(String, nullable=False)
    account_code = Column(String, nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    tax_category = Column(String, nullable=True)
    memo = Column(String, nullable=True)
    apportionment_kind = Column(String, default="none", nullable=False)
    original_amount = Column(Integer, nullable=True)
    business_ratio = Column(Integer, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")


class Attachment(Base):
    """Evidence attachment metadata model."""

    __tablename__ = "attachments"

    id = Column(String, primary_key=True)
    entry_id = Column(String, ForeignKey("journal_entries.id"), nullable=False)
    original_name = Column(String, nullable=False)
    generated_name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    document_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    entry = relationship("JournalEntry", back_populates="attachments")


class Vendor(Base):
    """Vendor name registry model."""

    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class FixedAsset(Base):
    """Fixed asset register model."""

    __tablename__ = "fixed_assets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    acquisition_date = Column(Date, nullable=False)
    acquisition_cost = Column(Integer, nullable=False)
    useful_life = Column(Integer, nullable=False)
    depreciation_method = Column(String, nullable=False)
    depreciation_rate = Column(Numeric(6, 5), nullable=True)
    business_ratio = Column(Integer, default=100, nullable=False)
    status = Column(String, default="active", nullable=False)
    disposal_date = Column(Date, nullable=True)
    memo = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
