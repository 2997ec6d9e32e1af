from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import structlog

from app.db.session import dispose_engine

T = TypeVar("T")


async def _run_job(job: Coroutine[Any, Any, T]) -> T:
    # Each Celery invocation gets its own event loop, so pooled asyncpg
    # connections from a previous loop must not be reused.
    await dispose_engine()
    try:
        return await job
    finally:
        structlog.contextvars.clear_contextvars()
        await dispose_engine()


def run_async_job(job: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(_run_job(job))
