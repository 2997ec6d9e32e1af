from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.points_history import PointsHistoryEntry


class PointsRepo:
    @staticmethod
    async def append(session: AsyncSession, *, entry: PointsHistoryEntry) -> PointsHistoryEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_external_id: str,
    ) -> list[PointsHistoryEntry]:
        stmt = (
            select(PointsHistoryEntry)
            .where(PointsHistoryEntry.user_external_id == user_external_id)
            .order_by(PointsHistoryEntry.created_at.desc(), PointsHistoryEntry.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
