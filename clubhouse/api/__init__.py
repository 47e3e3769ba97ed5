from fastapi import APIRouter

from clubhouse.interfaces.http.routers import registrations, regular_players, sessions, settlements, wallets


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
    router.include_router(registrations.router, prefix="/sessions", tags=["registrations"])
    router.include_router(regular_players.router, prefix="/regular-players", tags=["registrations"])
    router.include_router(wallets.router, prefix="/wallets", tags=["wallets"])
    router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
    return router


__all__ = [
    "create_api_router",
]
