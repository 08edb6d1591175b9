from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from catsocial.application.errors import AppError, InfrastructureError
from catsocial.application.interfaces.unit_of_work import UnitOfWork


@asynccontextmanager
async def guarded_operation(
    uow: UnitOfWork,
    *,
    operation: str,
    timeout_seconds: float | None,
    logger: logging.Logger,
) -> AsyncIterator[None]:
    """Run one service operation under a deadline.

    Any failure rolls the unit of work back before propagating. Errors that are
    not part of the application taxonomy surface as `InfrastructureError`.
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            yield
    except AppError:
        await uow.rollback()
        raise
    except TimeoutError as exc:
        await uow.rollback()
        logger.error("%s timed out after %ss", operation, timeout_seconds)
        raise InfrastructureError(f"{operation} timed out") from exc
    except Exception as exc:
        await uow.rollback()
        logger.error("%s failed", operation, exc_info=True)
        raise InfrastructureError(f"{operation} failed") from exc
