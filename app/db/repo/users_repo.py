from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_external_id(session: AsyncSession, external_id: str) -> User | None:
        stmt = select(User).where(User.external_id == external_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_external_id_for_update(
        session: AsyncSession,
        external_id: str,
    ) -> User | None:
        stmt = select(User).where(User.external_id == external_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_referral_code(session: AsyncSession, referral_code: str) -> User | None:
        stmt = select(User).where(User.referral_code == referral_code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        external_id: str,
        referral_code: str,
        email: str | None = None,
        telegram_username: str | None = None,
    ) -> User:
        user = User(
            external_id=external_id,
            referral_code=referral_code,
            points=0,
            email=email,
            telegram_username=telegram_username,
            whitelisted=False,
        )
        session.add(user)
        await session.flush()
        return user

    @staticmethod
    async def mark_whitelisted(
        session: AsyncSession,
        *,
        external_id: str,
        email: str,
        now_utc: datetime,
    ) -> int:
        stmt = (
            update(User)
            .where(User.external_id == external_id)
            .values(whitelisted=True, email=email, updated_at=now_utc)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def add_points(
        session: AsyncSession,
        *,
        external_id: str,
        delta: int,
        now_utc: datetime,
    ) -> int | None:
        stmt = (
            update(User)
            .where(User.external_id == external_id)
            .values(points=User.points + delta, updated_at=now_utc)
            .returning(User.points)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
