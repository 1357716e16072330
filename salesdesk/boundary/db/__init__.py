"""
Database boundary.

SQLAlchemy async ORM models, connection management and CRUD helpers.
"""

from salesdesk.boundary.db.base import Base
from salesdesk.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = ["Base", "get_async_db", "get_async_engine", "get_async_session_factory"]
