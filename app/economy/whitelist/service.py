from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.repo.referrals_repo import ReferralsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import UserNotFoundError
from app.economy.points.service import PointsService
from app.economy.store_errors import translate_store_errors

logger = structlog.get_logger(__name__)

WHITELIST_BONUS_ACTIVITY = "Your friend signed up for the whitelist"

_WHITELIST_STATUS_AWARDED = "AWARDED"
_WHITELIST_STATUS_ALREADY_AWARDED = "ALREADY_AWARDED"
_WHITELIST_STATUS_NO_REFERRER = "NO_REFERRER"


@dataclass(frozen=True, slots=True)
class WhitelistResult:
    status: str
    referrer_external_id: str | None = None
    points_awarded: int = 0


async def whitelist_user(
    session: AsyncSession,
    *,
    user_external_id: str,
    email: str,
    now_utc: datetime,
    bonus_points: int | None = None,
) -> WhitelistResult:
    points = get_settings().whitelist_bonus_points if bonus_points is None else bonus_points

    async with translate_store_errors("whitelist_user"):
        updated = await UsersRepo.mark_whitelisted(
            session,
            external_id=user_external_id,
            email=email.strip(),
            now_utc=now_utc,
        )
        if updated == 0:
            raise UserNotFoundError(user_external_id)

        referral = await ReferralsRepo.get_by_referee_for_update(
            session,
            referee_external_id=user_external_id,
        )
        if referral is None:
            return WhitelistResult(status=_WHITELIST_STATUS_NO_REFERRER)
        if referral.whitelist_bonus_awarded_at is not None:
            return WhitelistResult(
                status=_WHITELIST_STATUS_ALREADY_AWARDED,
                referrer_external_id=referral.referrer_external_id,
            )

        referral.whitelist_bonus_awarded_at = now_utc
        await PointsService.credit(
            session,
            user_external_id=referral.referrer_external_id,
            points=points,
            activity=WHITELIST_BONUS_ACTIVITY,
            now_utc=now_utc,
        )
        await session.flush()

    logger.info(
        "whitelist_bonus_awarded",
        user_external_id=user_external_id,
        referrer_external_id=referral.referrer_external_id,
        points=points,
    )
    return WhitelistResult(
        status=_WHITELIST_STATUS_AWARDED,
        referrer_external_id=referral.referrer_external_id,
        points_awarded=points,
    )


class WhitelistService:
    STATUS_AWARDED = _WHITELIST_STATUS_AWARDED
    STATUS_ALREADY_AWARDED = _WHITELIST_STATUS_ALREADY_AWARDED
    STATUS_NO_REFERRER = _WHITELIST_STATUS_NO_REFERRER

    whitelist_user = staticmethod(whitelist_user)
