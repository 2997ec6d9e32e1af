from app.db.models.points_history import PointsHistoryEntry
from app.db.models.quest_completions import QuestCompletion
from app.db.models.quests import Quest
from app.db.models.referrals import Referral
from app.db.models.users import User

__all__ = [
    "PointsHistoryEntry",
    "Quest",
    "QuestCompletion",
    "Referral",
    "User",
]
