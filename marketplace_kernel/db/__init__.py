"""Database layer - engine, base classes, types, and immutability."""

from marketplace_kernel.db.base import Base, TrackedBase, UTCDateTime, UUIDString
from marketplace_kernel.db.engine import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
    drop_tables,
    session_scope,
)
from marketplace_kernel.db.types import MONEY_DECIMAL_PLACES, money_from_value

__all__ = [
    "create_engine_from_url",
    "create_session_factory",
    "create_tables",
    "drop_tables",
    "session_scope",
    "Base",
    "TrackedBase",
    "UTCDateTime",
    "UUIDString",
    "MONEY_DECIMAL_PLACES",
    "money_from_value",
]
