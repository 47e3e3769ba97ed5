"""Pydantic schemas used across the project."""
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clubhouse.domain.sessions.models import SessionStatus
from clubhouse.domain.wallets.models import TransactionType


class SessionCreateRequest(BaseModel):
    session_date: date
    session_id: Optional[str] = Field(default=None, max_length=36)
    day_label: Optional[str] = Field(default=None, max_length=50)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    max_players: Optional[int] = Field(default=None, gt=0)
    payment_amount: Optional[int] = Field(default=None, ge=0)


class SessionUpdateRequest(BaseModel):
    day_label: Optional[str] = Field(default=None, max_length=50)
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    max_players: Optional[int] = Field(default=None, gt=0)
    payment_amount: Optional[int] = Field(default=None, ge=0)


class SessionResponse(BaseModel):
    id: str
    status: SessionStatus
    day_label: Optional[str] = None
    session_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    time_label: str
    max_players: int
    payment_amount: int
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    locked_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionListResponse(BaseModel):
    total: int
    sessions: list[SessionResponse]


class LockDueRequest(BaseModel):
    now: Optional[datetime] = None


class RegistrationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    guest_name: Optional[str] = Field(default=None, max_length=100, description="Registers a guest hosted by `name`")


class RegistrationResponse(BaseModel):
    id: str
    session_id: str
    name: str
    position: int
    paid: bool
    clicked_payment_link: bool
    is_guest: bool
    is_regular: bool = False
    registered_by: str
    user_id: Optional[str] = None
    registered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CancellationResponse(BaseModel):
    cancelled: list[RegistrationResponse]


class RegistrationListResponse(BaseModel):
    registrations: list[RegistrationResponse]


class RegularPlayerItem(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    user_id: str = Field(..., min_length=1, max_length=64)


class RegularPlayersUpdateRequest(BaseModel):
    players: list[RegularPlayerItem] = Field(default_factory=list)


class RegularPlayerResponse(BaseModel):
    weekday: int
    name: str
    user_id: str
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class RegularPlayerListResponse(BaseModel):
    players: list[RegularPlayerResponse]


class OccupancyResponse(BaseModel):
    current: int
    maximum: int
    available: int

    model_config = ConfigDict(from_attributes=True)


class RosterResponse(BaseModel):
    session_id: str
    max_players: int
    occupancy: OccupancyResponse
    active: list[RegistrationResponse]
    waitlist: list[RegistrationResponse]

    model_config = ConfigDict(from_attributes=True)


class WalletSnapshotResponse(BaseModel):
    user_id: str
    balance: int
    overdraft_limit: int
    last_sequence: int
    currency: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionResponse(BaseModel):
    id: str
    user_id: str
    sequence: int
    amount: int
    type: TransactionType
    session_id: Optional[str] = None
    counterparty_id: Optional[str] = None
    transfer_id: Optional[str] = None
    description: Optional[str] = None
    balance_after: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionListResponse(BaseModel):
    items: list[WalletTransactionResponse]
    limit: int
    offset: int


class WalletAmountRequest(BaseModel):
    amount: int
    description: Optional[str] = Field(default=None, max_length=255)


class WalletOverdraftRequest(BaseModel):
    overdraft_limit: int = Field(..., ge=0)


class WalletTransferRequest(BaseModel):
    to_user_id: str = Field(..., min_length=1, max_length=64)
    amount: int = Field(..., gt=0)
    description: Optional[str] = Field(default=None, max_length=255)


class WalletTransferResponse(BaseModel):
    transfer_id: str
    debit: WalletTransactionResponse
    credit: WalletTransactionResponse

    model_config = ConfigDict(from_attributes=True)


class LedgerReconciliationResponse(BaseModel):
    user_id: str
    cached_balance: int
    ledger_sum: int
    last_balance_after: int
    transaction_count: int
    consistent: bool

    model_config = ConfigDict(from_attributes=True)


class SettlementRunRequest(BaseModel):
    start_date: date
    end_date: date
    court_cost: Optional[int] = Field(default=None, ge=0)
    shuttlecock_cost: Optional[int] = Field(default=None, ge=0)
    weeks_to_distribute: Optional[int] = Field(default=None, gt=0)
    players_per_week: Optional[int] = Field(default=None, gt=0)
    wallet_pool_balance: Optional[int] = None


class PriceCalculationResponse(BaseModel):
    weekly_cost: int
    base_price: int
    current_balance: int
    weeks_to_distribute: int
    players_per_week: int
    balance_to_distribute: int
    price_adjustment: int
    recommended_price: int

    model_config = ConfigDict(from_attributes=True)


class WeeklyReportResponse(BaseModel):
    id: str
    week_id: str
    revision: int
    start_date: date
    end_date: date
    session_count: int
    total_players: int
    total_income: int
    total_refunds: int
    court_cost: int
    shuttlecock_cost: int
    total_expenses: int
    gross_profit: int
    price: PriceCalculationResponse
    created_at: Optional[datetime] = None
    superseded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WeeklyReportListResponse(BaseModel):
    week_id: str
    reports: list[WeeklyReportResponse]


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
