"""Database connection package."""

from newsbrief.db.database import (
    async_session,
    engine,
    get_session,
    init_db,
    make_engine,
    make_session_factory,
)

__all__ = [
    "get_session",
    "init_db",
    "engine",
    "async_session",
    "make_engine",
    "make_session_factory",
]
