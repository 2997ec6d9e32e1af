from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quest_completions import QuestCompletion
from app.db.models.quests import Quest


class QuestCompletionsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        completion: QuestCompletion,
    ) -> QuestCompletion:
        session.add(completion)
        await session.flush()
        return completion

    @staticmethod
    async def has_fully_completed(
        session: AsyncSession,
        *,
        user_external_id: str,
        quest_id: int,
    ) -> bool:
        stmt = select(func.count(QuestCompletion.id)).where(
            QuestCompletion.user_external_id == user_external_id,
            QuestCompletion.quest_id == quest_id,
            QuestCompletion.fully_completed.is_(True),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0) > 0

    @staticmethod
    async def list_fully_completed_quest_ids(
        session: AsyncSession,
        *,
        user_external_id: str,
    ) -> set[int]:
        stmt = select(QuestCompletion.quest_id).where(
            QuestCompletion.user_external_id == user_external_id,
            QuestCompletion.fully_completed.is_(True),
        )
        result = await session.execute(stmt)
        return {int(quest_id) for quest_id in result.scalars().all()}

    @staticmethod
    async def count_invite_records(session: AsyncSession, *, user_external_id: str) -> int:
        stmt = (
            select(func.count(QuestCompletion.id))
            .join(Quest, Quest.id == QuestCompletion.quest_id)
            .where(
                QuestCompletion.user_external_id == user_external_id,
                Quest.action == "INVITE",
            )
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
