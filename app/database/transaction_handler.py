"""
Transaction Handler

Wraps a cross-aggregate use case (payment -> order -> discount) in one
externally controlled transaction of a unit of work. Inner services keep
calling `uow.commit()`; those calls are deferred until the operation's
Result is known.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.core.domain.result import Ok, Result, errors_of
from app.core.interfaces.unit_of_work import ITransactionHandler, IUnitOfWork
from app.core.shared.logger import get_logger

logger = get_logger(__name__, {"component": "transaction_handler"})

T = TypeVar("T")


class TransactionHandler(ITransactionHandler):
    """
    Commit on Ok, roll back on Err, roll back and re-raise on exception.

    Cancellation (asyncio.CancelledError) takes the exception path.
    """

    def __init__(self, unit_of_work: IUnitOfWork):
        self._unit_of_work = unit_of_work

    async def execute_in_transaction(
        self,
        operation: Callable[[], Awaitable[Result[T]]],
        operation_name: str = "operation",
    ) -> Result[T]:
        log = logger.with_context(operation=operation_name)
        self._unit_of_work.set_transaction_controlled_externally(True)
        try:
            result = await operation()

            if isinstance(result, Ok):
                await self._unit_of_work.commit(allow_external_commit=True)
                log.info("Transaction committed")
            else:
                await self._unit_of_work.rollback()
                log.warning(
                    "Transaction rolled back: operation returned errors",
                    errors=[f"{e.code}: {e.description}" for e in errors_of(result)],
                )
            return result

        except (Exception, asyncio.CancelledError):
            log.exception("Transaction rolled back: operation raised")
            await self._rollback_preserving_original(log)
            raise

        finally:
            self._unit_of_work.set_transaction_controlled_externally(False)

    async def _rollback_preserving_original(self, log) -> None:
        # A failing rollback is logged so it never masks the original exception
        try:
            await self._unit_of_work.rollback()
        except Exception as rollback_error:
            log.error(f"Rollback failed: {rollback_error}")
