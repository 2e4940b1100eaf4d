"""
Core Interfaces Module

This module provides the abstract interfaces (ports) for persistence and
transaction control. Following the Dependency Inversion Principle, services
depend on these abstractions rather than on SQLAlchemy directly.
"""

from app.core.interfaces.repository import IRepository, ITransactionContext
from app.core.interfaces.unit_of_work import ITransactionHandler, IUnitOfWork

__all__ = [
    "IRepository",
    "ITransactionContext",
    "IUnitOfWork",
    "ITransactionHandler",
]
