"""
Transactional helpers shared by the orchestration services.

Services that write follow one policy: an Err result or an exception rolls
the unit of work back; exceptions are then re-raised.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from app.core.domain import Err
from app.core.interfaces import IUnitOfWork

logger = logging.getLogger(__name__)


async def rollback_quietly(unit_of_work: IUnitOfWork) -> None:
    """Roll back without letting a rollback failure hide the original error."""
    try:
        await unit_of_work.rollback()
    except Exception as e:
        logger.error(f"Rollback failed: {e}")


@asynccontextmanager
async def rollback_on_error(unit_of_work: IUnitOfWork, operation: str) -> AsyncIterator[None]:
    """Roll back when the wrapped block raises or is cancelled, then re-raise."""
    try:
        yield
    except (Exception, asyncio.CancelledError):
        logger.exception(f"{operation} failed, rolling back")
        await rollback_quietly(unit_of_work)
        raise


async def abort(unit_of_work: IUnitOfWork, result: Err) -> Err:
    """Roll back the work done so far and hand the Err back to the caller."""
    await unit_of_work.rollback()
    return result
