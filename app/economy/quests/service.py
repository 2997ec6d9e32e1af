from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quest_completions import QuestCompletion
from app.db.models.quests import Quest
from app.db.repo.quest_completions_repo import QuestCompletionsRepo
from app.db.repo.quests_repo import QuestsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import (
    QuestAlreadyCompletedError,
    QuestExpiredError,
    QuestNotCompletedError,
    QuestNotFoundError,
    UnsupportedActionError,
    UserNotFoundError,
)
from app.economy.points.service import PointsService
from app.economy.quests.checkers import QuestCheckerRegistry, build_quest_checker_registry
from app.economy.quests.constants import ACTION_INVITE
from app.economy.quests.types import ActiveQuest, QuestCompletionResult
from app.economy.store_errors import translate_store_errors

logger = structlog.get_logger(__name__)


def quest_activity_label(quest: Quest) -> str:
    return (quest.message or "").strip() or quest.title


def is_quest_expired(quest: Quest, *, now_utc: datetime) -> bool:
    return quest.expires_at is not None and quest.expires_at <= now_utc


async def complete_quest(
    session: AsyncSession,
    *,
    user_external_id: str,
    quest_id: int,
    now_utc: datetime,
    registry: QuestCheckerRegistry | None = None,
) -> QuestCompletionResult:
    checkers = registry or build_quest_checker_registry()
    async with translate_store_errors("complete_quest"):
        quest = await QuestsRepo.get_by_id(session, quest_id)
        if quest is None:
            raise QuestNotFoundError(quest_id)
        if quest.action == ACTION_INVITE:
            raise UnsupportedActionError("invite tiers advance through referrals only")
        if is_quest_expired(quest, now_utc=now_utc):
            raise QuestExpiredError(quest_id)

        user = await UsersRepo.get_by_external_id(session, user_external_id)
        if user is None:
            raise UserNotFoundError(user_external_id)

        if await QuestCompletionsRepo.has_fully_completed(
            session,
            user_external_id=user_external_id,
            quest_id=quest.id,
        ):
            raise QuestAlreadyCompletedError(quest_id)

        completed = await checkers.evaluate(session, quest=quest, user_external_id=user_external_id)
        if not completed:
            logger.info(
                "quest_not_completed",
                user_external_id=user_external_id,
                quest_id=quest.id,
            )
            raise QuestNotCompletedError(quest_id)

        try:
            await QuestCompletionsRepo.create(
                session,
                completion=QuestCompletion(
                    user_external_id=user_external_id,
                    quest_id=quest.id,
                    fully_completed=True,
                    created_at=now_utc,
                ),
            )
        except IntegrityError as exc:
            raise QuestAlreadyCompletedError(quest_id) from exc

        credit = await PointsService.credit(
            session,
            user_external_id=user_external_id,
            points=quest.points,
            activity=quest_activity_label(quest),
            now_utc=now_utc,
        )

    logger.info(
        "quest_completed",
        user_external_id=user_external_id,
        quest_id=quest.id,
        points=quest.points,
    )
    return QuestCompletionResult(
        quest_id=quest.id,
        user_external_id=user_external_id,
        points_awarded=quest.points,
        balance_after=credit.balance_after,
    )


async def list_active_quests(
    session: AsyncSession,
    *,
    now_utc: datetime,
    user_external_id: str | None = None,
) -> list[ActiveQuest]:
    async with translate_store_errors("list_active_quests"):
        quests = await QuestsRepo.list_active(session, now_utc=now_utc)
        completed_ids: set[int] = set()
        invite_progress = 0
        if user_external_id is not None:
            completed_ids = await QuestCompletionsRepo.list_fully_completed_quest_ids(
                session,
                user_external_id=user_external_id,
            )
            invite_progress = await QuestCompletionsRepo.count_invite_records(
                session,
                user_external_id=user_external_id,
            )

    return [
        ActiveQuest(
            id=quest.id,
            title=quest.title,
            description=quest.description,
            platform=quest.platform,
            action=quest.action,
            target=quest.target,
            points=quest.points,
            message=quest.message,
            expires_at=quest.expires_at,
            completed=invite_progress if quest.action == ACTION_INVITE else 0,
        )
        for quest in quests
        if quest.id not in completed_ids
    ]
