from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.referral_codes import normalize_referral_code
from app.db.models.referrals import Referral
from app.db.repo.referrals_repo import ReferralsRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.errors import (
    ReferralAlreadyUsedError,
    SelfReferralNotAllowedError,
    UnknownReferralCodeError,
    UserNotFoundError,
)
from app.economy.points.service import PointsService
from app.economy.referrals.constants import REFERRAL_ACTIVITY
from app.economy.store_errors import translate_store_errors

from .models import ReferralRedemptionResult

logger = structlog.get_logger(__name__)


async def redeem_referral(
    session: AsyncSession,
    *,
    referee_external_id: str,
    referral_code: str,
    now_utc: datetime,
    bonus_points: int | None = None,
) -> ReferralRedemptionResult:
    normalized_code = normalize_referral_code(referral_code)
    if not normalized_code:
        raise UnknownReferralCodeError(referral_code)
    points = get_settings().referral_bonus_points if bonus_points is None else bonus_points

    async with translate_store_errors("redeem_referral"):
        referee = await UsersRepo.get_by_external_id(session, referee_external_id)
        if referee is None:
            raise UserNotFoundError(referee_external_id)
        if referee.referral_code == normalized_code:
            raise SelfReferralNotAllowedError(referee_external_id)

        existing = await ReferralsRepo.get_by_referee(
            session,
            referee_external_id=referee_external_id,
        )
        if existing is not None:
            raise ReferralAlreadyUsedError(referee_external_id)

        referrer = await UsersRepo.get_by_referral_code(session, normalized_code)
        if referrer is None:
            raise UnknownReferralCodeError(normalized_code)

        # The unique index on referee_external_id is what settles concurrent redemptions.
        try:
            await ReferralsRepo.create(
                session,
                referral=Referral(
                    referrer_external_id=referrer.external_id,
                    referee_external_id=referee_external_id,
                    whitelist_bonus_awarded_at=None,
                    created_at=now_utc,
                ),
            )
        except IntegrityError as exc:
            raise ReferralAlreadyUsedError(referee_external_id) from exc

        credit = await PointsService.credit(
            session,
            user_external_id=referrer.external_id,
            points=points,
            activity=REFERRAL_ACTIVITY,
            now_utc=now_utc,
        )

    logger.info(
        "referral_redeemed",
        referrer_external_id=referrer.external_id,
        referee_external_id=referee_external_id,
        points=points,
    )
    return ReferralRedemptionResult(
        referrer_external_id=referrer.external_id,
        referee_external_id=referee_external_id,
        points_awarded=points,
        referrer_balance_after=credit.balance_after,
    )
