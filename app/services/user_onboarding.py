from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.referral_codes import generate_referral_code
from app.db.repo.users_repo import UsersRepo
from app.economy.quests import QuestService
from app.economy.quests.types import InviteTierResult
from app.economy.referrals import ReferralRedemptionResult, ReferralService
from app.economy.store_errors import translate_store_errors

logger = structlog.get_logger(__name__)

REFERRAL_CODE_ATTEMPTS = 10


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    external_id: str
    referral_code: str
    created: bool
    referral: ReferralRedemptionResult | None = None
    invite_tier: InviteTierResult | None = None


class UserOnboardingService:
    @staticmethod
    async def _generate_unique_referral_code(session: AsyncSession) -> str:
        for _ in range(REFERRAL_CODE_ATTEMPTS):
            referral_code = generate_referral_code()
            existing = await UsersRepo.get_by_referral_code(session, referral_code)
            if existing is None:
                return referral_code
        raise RuntimeError("unable to generate unique referral code")

    @staticmethod
    async def register_user(
        session: AsyncSession,
        *,
        external_id: str,
        now_utc: datetime,
        email: str | None = None,
        telegram_username: str | None = None,
        referral_code: str | None = None,
    ) -> RegistrationResult:
        """Creates the user once; a supplied referral code is redeemed in the same transaction.

        A repeated registration for an existing external id returns the stored user and
        leaves referral state untouched.
        """
        async with translate_store_errors("register_user"):
            user = await UsersRepo.get_by_external_id(session, external_id)
            if user is not None:
                return RegistrationResult(
                    external_id=user.external_id,
                    referral_code=user.referral_code,
                    created=False,
                )

            user = await UsersRepo.create(
                session,
                external_id=external_id,
                referral_code=await UserOnboardingService._generate_unique_referral_code(session),
                email=email,
                telegram_username=telegram_username,
            )
        logger.info("user_registered", external_id=external_id)

        if not referral_code or not referral_code.strip():
            return RegistrationResult(
                external_id=user.external_id,
                referral_code=user.referral_code,
                created=True,
            )

        redemption = await ReferralService.redeem_referral(
            session,
            referee_external_id=external_id,
            referral_code=referral_code,
            now_utc=now_utc,
        )
        invite_tier = await QuestService.advance_invite_tier(
            session,
            referrer_external_id=redemption.referrer_external_id,
            now_utc=now_utc,
        )
        return RegistrationResult(
            external_id=user.external_id,
            referral_code=user.referral_code,
            created=True,
            referral=redemption,
            invite_tier=invite_tier,
        )
