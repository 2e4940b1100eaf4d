"""
Database package: async engine/session factory, declarative base,
unit of work and transaction handler.
"""

from app.database.async_db import create_async_database_engine, create_session_factory, create_tables
from app.database.base import Base, TimestampMixin, UTCDateTime
from app.database.transaction_handler import TransactionHandler
from app.database.unit_of_work import SQLAlchemyUnitOfWork, TransactionContext

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "create_async_database_engine",
    "create_session_factory",
    "create_tables",
    "SQLAlchemyUnitOfWork",
    "TransactionContext",
    "TransactionHandler",
]
