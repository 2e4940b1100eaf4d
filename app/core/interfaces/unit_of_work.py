"""
Unit of Work and Transaction Handler interfaces.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar, runtime_checkable

from app.core.domain.result import Result

TRepository = TypeVar("TRepository")
T = TypeVar("T")


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Owns one connection+transaction per logical operation.

    Repositories obtained through `get_repository` share the same
    transaction context for the lifetime of the unit of work.
    """

    def get_repository(self, repository_type: type[TRepository]) -> TRepository:
        """Return the repository registered for the given port, bound to the current transaction."""
        ...

    async def commit(self, allow_external_commit: bool = False) -> None:
        """
        Commit the active transaction and open a fresh one.

        No-op while the transaction is controlled externally, unless
        `allow_external_commit` is True (the external controller's own commit).
        """
        ...

    async def rollback(self) -> None:
        """Roll back the active transaction and open a fresh one. Safe to call repeatedly."""
        ...

    def set_transaction_controlled_externally(self, controlled: bool) -> None:
        """Defer commits to an outer controller while True."""
        ...

    @property
    def is_transaction_controlled_externally(self) -> bool:
        ...

    async def close(self) -> None:
        """Release the connection, discarding any uncommitted work."""
        ...


@runtime_checkable
class ITransactionHandler(Protocol):
    """Runs a Result-returning operation as one externally controlled transaction."""

    async def execute_in_transaction(
        self,
        operation: Callable[[], Awaitable[Result[T]]],
        operation_name: str = "operation",
    ) -> Result[T]:
        """Commit when the operation returns Ok, roll back when it returns Err or raises."""
        ...
