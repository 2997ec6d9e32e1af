from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from app.db.session import SessionLocal
from app.economy.points import PointsService
from tests.integration.ledger_fixtures import UTC, _balance, _create_user, _history_total


@pytest.mark.asyncio
async def test_parallel_credits_to_one_user_all_land() -> None:
    now_utc = datetime(2026, 10, 19, 13, 0, tzinfo=UTC)
    await _create_user("9100")
    deltas = [100, 300, 25, 50, 10, 5]
    barrier = asyncio.Event()

    async def _credit(points: int) -> None:
        await barrier.wait()
        async with SessionLocal.begin() as session:
            await PointsService.credit(
                session,
                user_external_id="9100",
                points=points,
                activity="parallel",
                now_utc=now_utc,
            )

    tasks = [asyncio.create_task(_credit(points)) for points in deltas]
    barrier.set()
    await asyncio.gather(*tasks)

    assert await _balance("9100") == sum(deltas)
    assert await _history_total("9100") == sum(deltas)


@pytest.mark.asyncio
async def test_points_history_rejects_updates_and_deletes() -> None:
    now_utc = datetime(2026, 10, 19, 13, 10, tzinfo=UTC)
    await _create_user("9110")
    async with SessionLocal.begin() as session:
        await PointsService.credit(
            session,
            user_external_id="9110",
            points=100,
            activity="referral",
            now_utc=now_utc,
        )

    for statement in (
        "UPDATE points_history SET points = points + 1 WHERE user_external_id = '9110'",
        "DELETE FROM points_history WHERE user_external_id = '9110'",
    ):
        with pytest.raises(DBAPIError) as exc_info:
            async with SessionLocal.begin() as session:
                await session.execute(text(statement))
        assert "append-only" in str(exc_info.value).lower()

    assert await _history_total("9110") == 100
