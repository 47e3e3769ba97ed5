"""Reusable FastAPI dependencies."""

from .services import (
    get_acting_user,
    get_app_container,
    get_registration_service,
    get_session_service,
    get_settlement_service,
    get_wallet_service,
    is_admin,
)

__all__ = [
    "get_acting_user",
    "get_app_container",
    "get_registration_service",
    "get_session_service",
    "get_settlement_service",
    "get_wallet_service",
    "is_admin",
]
