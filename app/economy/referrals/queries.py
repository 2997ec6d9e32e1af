from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.points_repo import PointsRepo
from app.db.repo.referrals_repo import ReferralsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import UserNotFoundError
from app.economy.store_errors import translate_store_errors

from .models import PointsHistoryItem, RefereeSummary, ReferrerSummary


async def get_referrer_summary(
    session: AsyncSession,
    *,
    user_external_id: str,
) -> ReferrerSummary:
    async with translate_store_errors("get_referrer_summary"):
        user = await UsersRepo.get_by_external_id(session, user_external_id)
        if user is None:
            raise UserNotFoundError(user_external_id)
        referrals = await ReferralsRepo.list_for_referrer(
            session,
            referrer_external_id=user_external_id,
        )
        history = await PointsRepo.list_for_user(session, user_external_id=user_external_id)

    return ReferrerSummary(
        referral_code=user.referral_code,
        points=user.points,
        referees=[
            RefereeSummary(external_id=referral.referee_external_id, created_at=referral.created_at)
            for referral in referrals
        ],
        points_history=[
            PointsHistoryItem(points=entry.points, activity=entry.activity, created_at=entry.created_at)
            for entry in history
        ],
    )
