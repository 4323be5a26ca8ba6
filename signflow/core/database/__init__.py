"""
Centralized database layer for SignFlow.

Structure:
- entities/: Database entity models organized by table/business logic
- repositories/: Data access layer for the lookups shared by several services
- session.py: Global engine and session factory management
- utils.py: Engine/session helpers and dialect-portable SQL constructs
"""

from .base import Base, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    month_trunc,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "month_trunc",
    "utc_now",
]
