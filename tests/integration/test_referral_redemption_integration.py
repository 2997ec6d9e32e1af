from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from sqlalchemy import func, select

from app.db.models.referrals import Referral
from app.db.session import SessionLocal
from app.economy.errors import ReferralAlreadyUsedError, SelfReferralNotAllowedError
from app.economy.referrals import ReferralService
from tests.integration.ledger_fixtures import UTC, _balance, _create_user, _history_total


async def _redeem(*, referee: str, code: str, now_utc: datetime) -> None:
    async with SessionLocal.begin() as session:
        await ReferralService.redeem_referral(
            session,
            referee_external_id=referee,
            referral_code=code,
            now_utc=now_utc,
            bonus_points=100,
        )


@pytest.mark.asyncio
async def test_redeem_once_then_conflict() -> None:
    now_utc = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    referrer = await _create_user("9001")
    other = await _create_user("9002")
    await _create_user("9003")

    await _redeem(referee="9003", code=referrer.referral_code, now_utc=now_utc)
    with pytest.raises(ReferralAlreadyUsedError):
        await _redeem(referee="9003", code=other.referral_code, now_utc=now_utc)

    assert await _balance("9001") == 100
    assert await _balance("9002") == 0
    assert await _history_total("9001") == 100


@pytest.mark.asyncio
async def test_self_referral_writes_nothing() -> None:
    now_utc = datetime(2026, 10, 19, 12, 5, tzinfo=UTC)
    user = await _create_user("9010")

    with pytest.raises(SelfReferralNotAllowedError):
        await _redeem(referee="9010", code=user.referral_code, now_utc=now_utc)

    async with SessionLocal.begin() as session:
        assert (await session.scalar(select(func.count(Referral.id)))) == 0
    assert await _balance("9010") == 0


@pytest.mark.asyncio
async def test_parallel_redemptions_by_one_referee_allow_single_bonus() -> None:
    now_utc = datetime(2026, 10, 19, 12, 10, tzinfo=UTC)
    first_referrer = await _create_user("9020")
    second_referrer = await _create_user("9021")
    await _create_user("9022")
    barrier = asyncio.Event()

    async def _attempt(code: str) -> str:
        await barrier.wait()
        try:
            await _redeem(referee="9022", code=code, now_utc=now_utc)
            return "accepted"
        except ReferralAlreadyUsedError:
            return "already_used"

    task_1 = asyncio.create_task(_attempt(first_referrer.referral_code))
    task_2 = asyncio.create_task(_attempt(second_referrer.referral_code))
    barrier.set()
    outcomes = await asyncio.gather(task_1, task_2)

    assert sorted(outcomes) == ["accepted", "already_used"]
    async with SessionLocal.begin() as session:
        stmt = select(func.count(Referral.id)).where(Referral.referee_external_id == "9022")
        assert (await session.scalar(stmt)) == 1
    assert await _balance("9020") + await _balance("9021") == 100
    assert await _history_total("9020") + await _history_total("9021") == 100
