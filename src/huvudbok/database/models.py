"""SQLAlchemy models for huvudbok database."""

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
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    account_number = Column(String(6), nullable=False)
    name = Column(String, nullable=False)
    name_en = Column(String, nullable=True)
    account_class = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("organization_id", "account_number", name="uq_org_account_number"),
    )

    # Relationships
    lines = relationship("JournalLine", back_populates="account")


class FiscalYear(Base):
    """Fiscal year (räkenskapsår) model."""

    __tablename__ = "fiscal_years"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    closed_at = Column(DateTime, nullable=True)

    # Relationships
    journal_entries = relationship("JournalEntry", back_populates="fiscal_year")


class JournalEntry(Base):
    """Journal entry (verifikation) model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    fiscal_year_id = Column(Integer, ForeignKey("fiscal_years.id"), nullable=True)
    entry_date = Column(Date, nullable=True)
    description = Column(String, nullable=False, default="")
    verification_number = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default="draft")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    posted_at = Column(DateTime, nullable=True)
    voided_at = Column(DateTime, nullable=True)
    void_reason = Column(String, nullable=True)

    # Drafts have no number; NULLs never collide
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "verification_number", name="uq_org_verification_number"
        ),
    )

    # Relationships
    fiscal_year = relationship("FiscalYear", back_populates="journal_entries")
    lines = relationship(
        "JournalLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_order",
    )


class JournalLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    debit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    description = Column(String, nullable=True)
    line_order = Column(Integer, nullable=False, default=0)
    vat_rate = Column(Numeric(5, 2), nullable=True)
    vat_base = Column(Numeric(14, 2), nullable=True)
    vat_amount = Column(Numeric(14, 2), nullable=True)
    vat_direction = Column(String, nullable=True)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class JournalTemplate(Base):
    """Journal entry template model."""

    __tablename__ = "journal_templates"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    default_description = Column(String, nullable=True)
    use_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_org_template_name"),
    )

    # Relationships
    lines = relationship(
        "JournalTemplateLine",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="JournalTemplateLine.line_order",
    )


class JournalTemplateLine(Base):
    """Journal entry template line model."""

    __tablename__ = "journal_template_lines"

    id = Column(Integer, primary_key=True)
    template_id = Column(Integer, ForeignKey("journal_templates.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    description = Column(String, nullable=True)
    line_order = Column(Integer, nullable=False, default=0)
    vat_rate = Column(Numeric(5, 2), nullable=True)
    vat_base = Column(Numeric(14, 2), nullable=True)
    vat_amount = Column(Numeric(14, 2), nullable=True)
    vat_direction = Column(String, nullable=True)

    # Relationships
    template = relationship("JournalTemplate", back_populates="lines")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
