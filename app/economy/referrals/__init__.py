from __future__ import annotations

from .models import PointsHistoryItem, RefereeSummary, ReferralRedemptionResult, ReferrerSummary
from .queries import get_referrer_summary
from .redemption import redeem_referral


class ReferralService:
    redeem_referral = staticmethod(redeem_referral)
    get_referrer_summary = staticmethod(get_referrer_summary)


__all__ = [
    "PointsHistoryItem",
    "RefereeSummary",
    "ReferralRedemptionResult",
    "ReferralService",
    "ReferrerSummary",
]
