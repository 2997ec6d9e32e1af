from app.db.repo.points_repo import PointsRepo
from app.db.repo.quest_completions_repo import QuestCompletionsRepo
from app.db.repo.quests_repo import QuestsRepo
from app.db.repo.referrals_repo import ReferralsRepo
from app.db.repo.users_repo import UsersRepo

__all__ = [
    "PointsRepo",
    "QuestCompletionsRepo",
    "QuestsRepo",
    "ReferralsRepo",
    "UsersRepo",
]
