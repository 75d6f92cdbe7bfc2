"""SQLAlchemy database models for the crowdfunding ledger."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from crowdfunding.constants import ALLOWED_STATUSES, NOT_SENT, SYMBOL_BEFORE


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TransactionModel(Base):
    """
    Funding transactions table.

    One row per payment-gateway event tied to a project, an investor and a
    receiver. ``service_data`` only ever holds encrypted bytes.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    txn_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    txn_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2, asdecimal=True), nullable=False, default=Decimal("0.00")
    )
    txn_currency: Mapped[str] = mapped_column(String(8), nullable=False, default="")
    txn_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", index=True
    )
    txn_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    parent_txn_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    extra_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    status_reason: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    reward_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    investor_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    receiver_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    service_provider: Mapped[str | None] = mapped_column(String(32), nullable=True)
    service_alias: Mapped[str | None] = mapped_column(String(32), nullable=True)
    service_data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    reward_state: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=NOT_SENT)
    fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2, asdecimal=True), nullable=False, default=Decimal("0.00")
    )

    __table_args__ = (
        CheckConstraint(
            "txn_status IN ({})".format(", ".join(f"'{s}'" for s in ALLOWED_STATUSES)),
            name="valid_txn_status",
        ),
        CheckConstraint("reward_state IN (0, 1)", name="valid_reward_state"),
        Index("idx_transactions_txn_id", "txn_id"),
        Index("idx_transactions_receiver", "id", "receiver_id"),
    )

    def __repr__(self) -> str:
        """String representation of TransactionModel."""
        return (
            f"<TransactionModel(id={self.id}, amount={self.txn_amount}, "
            f"currency={self.txn_currency}, status={self.txn_status})>"
        )


class CurrencyModel(Base):
    """Currencies table."""

    __tablename__ = "currencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(64), nullable=False)
    code: Mapped[str] = mapped_column(String(8), nullable=False, unique=True)
    symbol: Mapped[str | None] = mapped_column(String(8), nullable=True)
    position: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=SYMBOL_BEFORE)

    def __repr__(self) -> str:
        """String representation of CurrencyModel."""
        return f"<CurrencyModel(id={self.id}, code={self.code})>"


class UserModel(Base):
    """Users table (minimal columns the ledger reads)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    def __repr__(self) -> str:
        """String representation of UserModel."""
        return f"<UserModel(id={self.id}, name={self.name})>"
