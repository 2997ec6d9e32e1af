from app.economy.points import PointsService
from app.economy.quests import QuestService
from app.economy.referrals import ReferralService
from app.economy.whitelist import WhitelistService

__all__ = [
    "PointsService",
    "QuestService",
    "ReferralService",
    "WhitelistService",
]
