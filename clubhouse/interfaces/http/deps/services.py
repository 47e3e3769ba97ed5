"""Service providers and the acting user of a request.

Identity is taken from request headers as given; verifying it is left to
whatever sits in front of this server.
"""

from fastapi import Depends, Header, Request

from clubhouse.core.container import ApplicationContainer
from clubhouse.domain.registrations.service import RegistrationService
from clubhouse.domain.sessions.service import SessionService
from clubhouse.domain.settlements.service import SettlementService
from clubhouse.domain.wallets.service import WalletService


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_acting_user(x_acting_user: str = Header(..., min_length=1, max_length=64)) -> str:
    return x_acting_user


def is_admin(x_acting_role: str = Header(default="player")) -> bool:
    return x_acting_role.lower() == "admin"


def get_session_service(container: ApplicationContainer = Depends(get_app_container)) -> SessionService:
    return container.sessions


def get_registration_service(container: ApplicationContainer = Depends(get_app_container)) -> RegistrationService:
    return container.registrations


def get_wallet_service(container: ApplicationContainer = Depends(get_app_container)) -> WalletService:
    return container.wallets


def get_settlement_service(container: ApplicationContainer = Depends(get_app_container)) -> SettlementService:
    return container.settlements
