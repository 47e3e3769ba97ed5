"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from clubhouse.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaySession(Base):
    __tablename__ = "play_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    status = Column(String(20), nullable=False, default="draft")  # draft, published, locked, closed
    day_label = Column(String(50))
    session_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time)
    end_time = Column(Time)
    max_players = Column(Integer, nullable=False)
    payment_amount = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    published_at = Column(DateTime(timezone=True))
    locked_at = Column(DateTime(timezone=True))
    closed_at = Column(DateTime(timezone=True), index=True)

    registrations = relationship(
        "Registration",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Registration.position",
    )


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_registrations_session_position"),
        UniqueConstraint("session_id", "name", name="uq_registrations_session_name"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    session_id = Column(String(36), ForeignKey("play_sessions.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    user_id = Column(String(64), nullable=True, index=True)
    position = Column(Integer, nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    clicked_payment_link = Column(Boolean, nullable=False, default=False)
    is_guest = Column(Boolean, nullable=False, default=False)
    is_regular = Column(Boolean, nullable=False, default=False)
    registered_by = Column(String(64), nullable=False, index=True)
    registered_at = Column(DateTime(timezone=True), default=utcnow)

    session = relationship("PlaySession", back_populates="registrations")


class RegularPlayer(Base):
    """A player added to every draft session held on one weekday."""

    __tablename__ = "regular_players"
    __table_args__ = (
        UniqueConstraint("weekday", "name", name="uq_regular_players_weekday_name"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    weekday = Column(Integer, nullable=False, index=True)  # ISO weekday, 1 = Monday
    name = Column(String(150), nullable=False)
    user_id = Column(String(64), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Wallet(Base):
    __tablename__ = "wallets"

    user_id = Column(String(64), primary_key=True)
    balance = Column(Integer, nullable=False, default=0)
    overdraft_limit = Column(Integer, nullable=False, default=0)
    last_sequence = Column(Integer, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="THB")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    transactions = relationship("WalletTransaction", back_populates="wallet")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"
    __table_args__ = (
        UniqueConstraint("user_id", "sequence", name="uq_wallet_transactions_user_sequence"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(64), ForeignKey("wallets.user_id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)
    # topUp, sessionCharge, cancellationRefund, peerTransferOut, peerTransferIn, adjustment
    type = Column(String(30), nullable=False)
    session_id = Column(String(36), ForeignKey("play_sessions.id"), nullable=True, index=True)
    counterparty_id = Column(String(64), nullable=True)
    transfer_id = Column(String(36), nullable=True, index=True)
    description = Column(String(255))
    balance_after = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    wallet = relationship("Wallet", back_populates="transactions")


class WeeklyBalanceReport(Base):
    __tablename__ = "weekly_balance_reports"
    __table_args__ = (
        UniqueConstraint("week_id", "revision", name="uq_weekly_balance_reports_week_revision"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    week_id = Column(String(20), nullable=False, index=True)
    revision = Column(Integer, nullable=False, default=1)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    session_count = Column(Integer, nullable=False)
    total_players = Column(Integer, nullable=False)
    total_income = Column(Integer, nullable=False)
    total_refunds = Column(Integer, nullable=False, default=0)
    court_cost = Column(Integer, nullable=False)
    shuttlecock_cost = Column(Integer, nullable=False)
    total_expenses = Column(Integer, nullable=False)
    gross_profit = Column(Integer, nullable=False)
    weekly_cost = Column(Integer, nullable=False)
    base_price = Column(Integer, nullable=False)
    current_balance = Column(Integer, nullable=False)
    weeks_to_distribute = Column(Integer, nullable=False)
    players_per_week = Column(Integer, nullable=False)
    balance_to_distribute = Column(Integer, nullable=False)
    price_adjustment = Column(Integer, nullable=False)
    recommended_price = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    superseded_at = Column(DateTime(timezone=True))
