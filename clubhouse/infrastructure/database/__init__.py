"""Database infrastructure helpers (engine, sessions, units of work)."""

from .base import Base
from .session import (
    build_engine,
    build_session_factory,
    create_tables,
    get_engine,
    get_session_factory,
    init_db,
)
from .unit_of_work import UnitOfWork

__all__ = [
    "Base",
    "UnitOfWork",
    "build_engine",
    "build_session_factory",
    "create_tables",
    "get_engine",
    "get_session_factory",
    "init_db",
]
