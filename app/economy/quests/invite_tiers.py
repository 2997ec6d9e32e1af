from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quest_completions import QuestCompletion
from app.db.models.quests import Quest
from app.db.repo.quest_completions_repo import QuestCompletionsRepo
from app.db.repo.quests_repo import QuestsRepo
from app.db.repo.referrals_repo import ReferralsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import UserNotFoundError
from app.economy.points.service import PointsService
from app.economy.quests.checkers import InviteThresholdChecker, QuestChecker, parse_quest_target
from app.economy.quests.constants import (
    ACTION_INVITE,
    INVITE_TIER_STATUS_COMPLETED,
    INVITE_TIER_STATUS_NO_TIER,
    INVITE_TIER_STATUS_NOT_REACHED,
    INVITE_TIER_STATUS_NOTHING_TO_PROCESS,
)
from app.economy.quests.service import quest_activity_label
from app.economy.quests.types import InviteTierResult
from app.economy.store_errors import translate_store_errors

logger = structlog.get_logger(__name__)


def select_current_tier(tiers: list[Quest], *, confirmed_count: int) -> Quest | None:
    """Picks the smallest tier whose target is above ``confirmed_count``.

    ``tiers`` must be sorted ascending by numeric target.
    """
    if not tiers or confirmed_count > parse_quest_target(tiers[-1]):
        return None
    return next(
        (tier for tier in tiers if parse_quest_target(tier) > confirmed_count),
        None,
    )


async def advance_invite_tier(
    session: AsyncSession,
    *,
    referrer_external_id: str,
    now_utc: datetime,
    checker: QuestChecker | None = None,
) -> InviteTierResult:
    tier_checker = checker or InviteThresholdChecker()
    async with translate_store_errors("advance_invite_tier"):
        # Serializes progression per referrer; concurrent calls queue on the row lock.
        referrer = await UsersRepo.get_by_external_id_for_update(session, referrer_external_id)
        if referrer is None:
            raise UserNotFoundError(referrer_external_id)

        referrals_total = await ReferralsRepo.count_for_referrer(
            session,
            referrer_external_id=referrer_external_id,
        )
        confirmed_count = await QuestCompletionsRepo.count_invite_records(
            session,
            user_external_id=referrer_external_id,
        )
        if confirmed_count >= referrals_total:
            return InviteTierResult(status=INVITE_TIER_STATUS_NOTHING_TO_PROCESS)

        tiers = sorted(
            await QuestsRepo.list_by_action(session, action=ACTION_INVITE),
            key=parse_quest_target,
        )
        tier = select_current_tier(tiers, confirmed_count=confirmed_count)
        if tier is None:
            logger.info(
                "invite_tier_exhausted",
                referrer_external_id=referrer_external_id,
                confirmed_count=confirmed_count,
            )
            return InviteTierResult(status=INVITE_TIER_STATUS_NO_TIER)

        completed = await tier_checker.is_completed(
            session,
            quest=tier,
            user_external_id=referrer_external_id,
        )
        await QuestCompletionsRepo.create(
            session,
            completion=QuestCompletion(
                user_external_id=referrer_external_id,
                quest_id=tier.id,
                fully_completed=completed,
                created_at=now_utc,
            ),
        )
        if completed:
            await PointsService.credit(
                session,
                user_external_id=referrer_external_id,
                points=tier.points,
                activity=quest_activity_label(tier),
                now_utc=now_utc,
            )

    logger.info(
        "invite_tier_advanced",
        referrer_external_id=referrer_external_id,
        quest_id=tier.id,
        completed=completed,
    )
    return InviteTierResult(
        status=INVITE_TIER_STATUS_COMPLETED if completed else INVITE_TIER_STATUS_NOT_REACHED,
        quest_id=tier.id,
        completed=completed,
        points_awarded=tier.points if completed else 0,
    )
