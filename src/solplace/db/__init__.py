"""Registry persistence: engine, sessions and table management."""

from .session import Base, SessionLocal, create_tables, drop_tables, get_db, session_scope

__all__ = [
    "Base",
    "SessionLocal",
    "create_tables",
    "drop_tables",
    "get_db",
    "session_scope",
]
