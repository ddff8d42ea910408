"""Database package: engine, session and models."""
from database.base import Base, async_session_maker, get_engine, close_db

__all__ = [
    "Base",
    "async_session_maker",
    "get_engine",
    "close_db",
]
