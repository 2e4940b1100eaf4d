"""
Base SQLAlchemy Repository

Shared plumbing for repositories bound to a unit of work's transaction
context. Repositories flush so later queries in the same transaction see
their writes; commit and rollback belong to the unit of work.
"""

import logging
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import BusinessRuleViolationException, Err, Result, errors_of
from app.core.interfaces import ITransactionContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLAlchemyRepository:
    """Repository reading its session from the transaction context on every call."""

    def __init__(self, context: ITransactionContext):
        """
        Initialize repository.

        Args:
            context: Transaction context of the owning unit of work
        """
        self.context = context

    @property
    def session(self) -> AsyncSession:
        return self.context.session

    async def _paginate(self, statement: Select, page: int, page_size: int) -> tuple[list[Any], int]:
        """Run one page of `statement` and count every matching row."""
        page = max(page, 1)
        page_size = max(page_size, 1)
        total = await self.session.scalar(select(func.count()).select_from(statement.order_by(None).subquery()))
        result = await self.session.execute(statement.offset((page - 1) * page_size).limit(page_size))
        return list(result.scalars().all()), int(total or 0)


def rehydrate(result: Result[T], entity_type: str, entity_id: Any) -> T:
    """Unwrap a `from_` result; stored data that breaks an invariant is a fault, not a business outcome."""
    if isinstance(result, Err):
        details = ", ".join(f"{e.code}: {e.description}" for e in errors_of(result))
        logger.error(f"Stored {entity_type} {entity_id} is invalid: {details}")
        raise BusinessRuleViolationException(
            f"valid_stored_{entity_type}",
            f"Stored {entity_type} {entity_id} is invalid: {details}",
        )
    return result.value
