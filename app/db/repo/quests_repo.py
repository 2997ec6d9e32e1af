from __future__ import annotations

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quests import Quest


class QuestsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, quest_id: int) -> Quest | None:
        return await session.get(Quest, quest_id)

    @staticmethod
    async def list_active(session: AsyncSession, *, now_utc: datetime) -> list[Quest]:
        stmt = (
            select(Quest)
            .where(or_(Quest.expires_at.is_(None), Quest.expires_at > now_utc))
            .order_by(Quest.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_action(session: AsyncSession, *, action: str) -> list[Quest]:
        stmt = select(Quest).where(Quest.action == action).order_by(Quest.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, quest: Quest) -> Quest:
        session.add(quest)
        await session.flush()
        return quest
