from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.economy.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def translate_store_errors(operation: str) -> AsyncIterator[None]:
    """Re-raises connectivity failures of the database as StoreUnavailableError.

    Constraint violations are left untouched; callers map those to domain errors.
    """
    try:
        yield
    except (OperationalError, PoolTimeoutError, TimeoutError, OSError) as exc:
        logger.warning("store_unavailable", operation=operation, error=type(exc).__name__)
        raise StoreUnavailableError(operation) from exc
    except DBAPIError as exc:
        if not exc.connection_invalidated:
            raise
        logger.warning("store_connection_invalidated", operation=operation)
        raise StoreUnavailableError(operation) from exc
