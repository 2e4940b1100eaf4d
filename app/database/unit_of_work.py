"""
SQLAlchemy Unit of Work

One AsyncSession (one connection+transaction) per logical operation.
Repositories receive the shared TransactionContext instead of the session
itself, so a commit or rollback that opens a fresh transaction is visible to
every repository already handed out.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction, async_sessionmaker

from app.core.domain.exceptions import ConfigurationException, InvalidOperationException
from app.core.interfaces.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)

TRepository = TypeVar("TRepository")
RepositoryFactory = Callable[["TransactionContext"], Any]


class TransactionContext:
    """Mutable cell holding the unit of work's session and active transaction."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._transaction: AsyncSessionTransaction | None = None

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._transaction is not None and self._transaction.is_active

    async def begin(self) -> None:
        """Open a fresh transaction on the session."""
        self._transaction = await self._session.begin()

    async def commit(self) -> None:
        await self._session.commit()
        self._transaction = None

    async def rollback(self) -> None:
        # Session.rollback is a pass-through when nothing is in progress
        await self._session.rollback()
        self._transaction = None


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    Unit of Work over an AsyncSession.

    Usage:
        ```python
        async with SQLAlchemyUnitOfWork(session_factory, registry) as uow:
            carts = uow.get_repository(ICartRepository)
            ...
            await uow.commit()
        ```

    Leaving the context rolls back anything not committed and releases the
    connection.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        repository_registry: Mapping[type, RepositoryFactory],
    ):
        """
        Initialize the unit of work.

        Args:
            session_factory: Factory producing AsyncSession instances
            repository_registry: Port type -> factory building the repository from a TransactionContext
        """
        self._session_factory = session_factory
        self._registry = dict(repository_registry)
        self._context: TransactionContext | None = None
        self._repositories: dict[type, Any] = {}
        self._externally_controlled = False

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Create the session and open the first transaction."""
        if self._context is not None:
            return
        self._context = TransactionContext(self._session_factory())
        await self._context.begin()

    @property
    def context(self) -> TransactionContext:
        if self._context is None:
            raise InvalidOperationException("use_unit_of_work", "not started", "Unit of work has not been started")
        return self._context

    @property
    def is_transaction_controlled_externally(self) -> bool:
        return self._externally_controlled

    def set_transaction_controlled_externally(self, controlled: bool) -> None:
        self._externally_controlled = controlled

    def get_repository(self, repository_type: type[TRepository]) -> TRepository:
        """Return the repository registered for `repository_type`, created once per unit of work."""
        repository = self._repositories.get(repository_type)
        if repository is None:
            factory = self._registry.get(repository_type)
            if factory is None:
                raise ConfigurationException(
                    "unit_of_work",
                    f"No repository registered for {repository_type.__name__}",
                )
            repository = factory(self.context)
            self._repositories[repository_type] = repository
        return repository

    async def commit(self, allow_external_commit: bool = False) -> None:
        """Commit and immediately open a fresh transaction."""
        if self._externally_controlled and not allow_external_commit:
            logger.debug("Commit deferred: transaction is controlled externally")
            return

        context = self.context
        try:
            await context.commit()
        except Exception as e:
            logger.error(f"Commit failed, rolling back: {e}")
            await self._rollback_quietly(context)
            raise
        finally:
            await context.begin()

    async def rollback(self) -> None:
        """Roll back and immediately open a fresh transaction."""
        context = self.context
        try:
            await context.rollback()
        finally:
            await context.begin()

    async def close(self) -> None:
        """Discard uncommitted work and release the connection."""
        if self._context is None:
            return
        context, self._context = self._context, None
        self._repositories.clear()
        try:
            await context.rollback()
        except Exception as e:
            logger.warning(f"Rollback on close failed: {e}")
        finally:
            await context.session.close()

    @staticmethod
    async def _rollback_quietly(context: TransactionContext) -> None:
        try:
            await context.rollback()
        except Exception as rollback_error:
            logger.error(f"Rollback after failed commit also failed: {rollback_error}")
