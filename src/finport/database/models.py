"""SQLAlchemy models for finport database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    LargeBinary,
    JSON,
    Text,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from finport.utils.clock import utc_now

Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=False)
    opening_balance = Column(Numeric(12, 2), default=0, nullable=False)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")
    import_batches = relationship("ImportBatch", back_populates="account", cascade="all, delete-orphan")


class ImportBatch(Base):
    """Import history record, one per committed file."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    batch_id = Column(String(32), unique=True, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    filename = Column(String, nullable=True)
    row_count = Column(Integer, default=0, nullable=False)
    imported_count = Column(Integer, default=0, nullable=False)
    duplicate_count = Column(Integer, default=0, nullable=False)
    error_count = Column(Integer, default=0, nullable=False)
    imported_at = Column(DateTime, default=utc_now, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="import_batches")


class Transaction(Base):
    """Transaction model.

    dedup_key is derived from date, normalized description and both amounts;
    the unique constraint on (account_id, dedup_key) stops two concurrent
    imports from both inserting the same statement line.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    original_description = Column(String, nullable=False)
    debit_amount = Column(Numeric(12, 2), default=0, nullable=False)
    credit_amount = Column(Numeric(12, 2), default=0, nullable=False)
    balance_after = Column(Numeric(12, 2), nullable=True)
    dedup_key = Column(String, nullable=False)
    import_batch_id = Column(String(32), ForeignKey("import_batches.batch_id"), nullable=True)
    imported_at = Column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "dedup_key", name="uq_account_dedup_key"),
        Index("ix_transactions_account_date", "account_id", "transaction_date"),
    )

    # Relationships
    account = relationship("Account", back_populates="transactions")


class ImportSession(Base):
    """Upload held between the preview and commit calls."""

    __tablename__ = "import_sessions"

    id = Column(Integer, primary_key=True)
    session_id = Column(String(32), unique=True, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    filename = Column(String, nullable=True)
    content = Column(LargeBinary, nullable=False)
    delimiter = Column(String(1), nullable=True)
    state = Column(String(16), nullable=False)
    mapping = Column(JSON, nullable=True)
    batch_id = Column(String(32), nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    expires_at = Column(DateTime, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
