"""
Base interfaces for repositories (Data Access Layer)

Repositories are handed out by a unit of work and never own a transaction:
they read the active session from a shared ITransactionContext, so a commit
or rollback that opens a fresh transaction is seen by every repository at
once without rebinding them one by one.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ITransactionContext(Protocol):
    """Mutable cell holding the current session and transaction of a unit of work."""

    @property
    def session(self) -> Any:
        """Session bound to the active transaction."""
        ...

    @property
    def is_active(self) -> bool:
        """Whether a transaction is currently open."""
        ...


@runtime_checkable
class IRepository(Protocol):
    """
    Base interface for every repository.

    Implementations are constructed with the unit of work's transaction
    context and perform all I/O through `context.session`.

    Example:
        ```python
        class SQLAlchemyCartRepository(ICartRepository):
            def __init__(self, context: ITransactionContext):
                self.context = context

            async def get_cart(self, user_id: str) -> Cart | None:
                result = await self.context.session.execute(...)
        ```
    """

    context: ITransactionContext
