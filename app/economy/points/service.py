from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.points_history import PointsHistoryEntry
from app.db.repo.points_repo import PointsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import UserNotFoundError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PointsCreditResult:
    user_external_id: str
    points: int
    balance_after: int


class PointsService:
    @staticmethod
    async def credit(
        session: AsyncSession,
        *,
        user_external_id: str,
        points: int,
        activity: str,
        now_utc: datetime,
    ) -> PointsCreditResult:
        """Appends a history entry and moves the balance by ``points``.

        Both writes join the caller's transaction. The balance is changed with a
        relative ``points = points + delta`` update, never by writing back a value
        read earlier, so concurrent credits to one user cannot overwrite each other.
        """
        if points == 0:
            raise ValueError("points delta must be non-zero")

        balance_after = await UsersRepo.add_points(
            session,
            external_id=user_external_id,
            delta=points,
            now_utc=now_utc,
        )
        if balance_after is None:
            raise UserNotFoundError(user_external_id)

        await PointsRepo.append(
            session,
            entry=PointsHistoryEntry(
                user_external_id=user_external_id,
                points=points,
                activity=activity,
                created_at=now_utc,
            ),
        )
        logger.info(
            "points_credited",
            user_external_id=user_external_id,
            points=points,
            activity=activity,
            balance_after=balance_after,
        )
        return PointsCreditResult(
            user_external_id=user_external_id,
            points=points,
            balance_after=balance_after,
        )
