from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ReferralRedemptionResult:
    referrer_external_id: str
    referee_external_id: str
    points_awarded: int
    referrer_balance_after: int


@dataclass(frozen=True, slots=True)
class RefereeSummary:
    external_id: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class PointsHistoryItem:
    points: int
    activity: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ReferrerSummary:
    referral_code: str
    points: int
    referees: list[RefereeSummary]
    points_history: list[PointsHistoryItem]
