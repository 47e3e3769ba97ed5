"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./clubhouse.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class RegistrationSettings(BaseModel):
    allow_draft_registration: bool = True
    guest_separator: str = " venn: "


class WalletSettings(BaseModel):
    balance_floor: int = 0
    currency: str = "THB"


class ConcurrencySettings(BaseModel):
    lock_timeout: float = Field(default=5.0, gt=0)


class SessionSettings(BaseModel):
    lock_hours_before_start: int = Field(default=2, ge=0)
    utc_offset_hours: int = Field(default=7, ge=-12, le=14)
    default_max_players: int = Field(default=12, gt=0)
    default_payment_amount: int = Field(default=0, ge=0)


class SettlementSettings(BaseModel):
    """Operator supplied inputs for the weekly price recommendation.

    Every value may be left unset here and passed to an individual settlement run instead.
    """

    court_cost: Optional[int] = None
    shuttlecock_cost: Optional[int] = None
    weeks_to_distribute: Optional[int] = None
    players_per_week: Optional[int] = None
    wallet_pool_balance: Optional[int] = None


class LoggingSettings(BaseModel):
    level: str = "INFO"
    directory: Optional[Path] = None


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Badminton Club Server"
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]

    database: DatabaseSettings = DatabaseSettings()
    registration: RegistrationSettings = RegistrationSettings()
    wallet: WalletSettings = WalletSettings()
    concurrency: ConcurrencySettings = ConcurrencySettings()
    sessions: SessionSettings = SessionSettings()
    settlement: SettlementSettings = SettlementSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def lock_timeout(self) -> float:
        return self.concurrency.lock_timeout

    @property
    def balance_floor(self) -> int:
        return self.wallet.balance_floor


@lru_cache()
def get_settings() -> Settings:
    return Settings()
