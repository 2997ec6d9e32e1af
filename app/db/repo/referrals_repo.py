from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.referrals import Referral


class ReferralsRepo:
    @staticmethod
    async def get_by_referee(
        session: AsyncSession,
        *,
        referee_external_id: str,
    ) -> Referral | None:
        stmt = select(Referral).where(Referral.referee_external_id == referee_external_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_referee_for_update(
        session: AsyncSession,
        *,
        referee_external_id: str,
    ) -> Referral | None:
        stmt = (
            select(Referral)
            .where(Referral.referee_external_id == referee_external_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, referral: Referral) -> Referral:
        session.add(referral)
        await session.flush()
        return referral

    @staticmethod
    async def count_for_referrer(session: AsyncSession, *, referrer_external_id: str) -> int:
        stmt = select(func.count(Referral.id)).where(
            Referral.referrer_external_id == referrer_external_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_for_referrer(
        session: AsyncSession,
        *,
        referrer_external_id: str,
    ) -> list[Referral]:
        stmt = (
            select(Referral)
            .where(Referral.referrer_external_id == referrer_external_id)
            .order_by(Referral.created_at.asc(), Referral.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
