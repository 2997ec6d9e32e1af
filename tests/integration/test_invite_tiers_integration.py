from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import select

from app.db.models.quest_completions import QuestCompletion
from app.db.session import SessionLocal
from app.economy.quests.constants import (
    INVITE_TIER_STATUS_COMPLETED,
    INVITE_TIER_STATUS_NO_TIER,
    INVITE_TIER_STATUS_NOT_REACHED,
)
from app.services.user_onboarding import UserOnboardingService
from tests.integration.ledger_fixtures import UTC, _balance, _create_quest, _create_user


@pytest.mark.asyncio
async def test_invite_tiers_credit_on_first_third_and_fifth_referral() -> None:
    now_utc = datetime(2026, 10, 19, 14, 0, tzinfo=UTC)
    for target, points in (("1", 50), ("3", 150), ("5", 400)):
        await _create_quest(
            platform="PAY3",
            action="INVITE",
            target=target,
            points=points,
            message=f"Invited {target} friends",
        )
    referrer = await _create_user("9200")

    statuses = []
    for index in range(1, 7):
        async with SessionLocal.begin() as session:
            result = await UserOnboardingService.register_user(
                session,
                external_id=f"92{index:02d}",
                now_utc=now_utc,
                referral_code=referrer.referral_code,
            )
        statuses.append(result.invite_tier.status)

    assert statuses == [
        INVITE_TIER_STATUS_COMPLETED,
        INVITE_TIER_STATUS_NOT_REACHED,
        INVITE_TIER_STATUS_COMPLETED,
        INVITE_TIER_STATUS_NOT_REACHED,
        INVITE_TIER_STATUS_COMPLETED,
        INVITE_TIER_STATUS_NO_TIER,
    ]
    # six referral bonuses plus the three tiers
    assert await _balance("9200") == 6 * 100 + 50 + 150 + 400

    async with SessionLocal.begin() as session:
        rows = (
            await session.execute(
                select(QuestCompletion.fully_completed)
                .where(QuestCompletion.user_external_id == "9200")
                .order_by(QuestCompletion.id)
            )
        ).scalars().all()
    assert rows == [True, False, True, False, True]
