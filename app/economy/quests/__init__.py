from __future__ import annotations

from .checkers import QuestCheckerRegistry, build_quest_checker_registry
from .invite_tiers import advance_invite_tier, select_current_tier
from .service import complete_quest, list_active_quests
from .types import ActiveQuest, InviteTierResult, QuestCompletionResult


class QuestService:
    complete_quest = staticmethod(complete_quest)
    list_active_quests = staticmethod(list_active_quests)
    advance_invite_tier = staticmethod(advance_invite_tier)
    select_current_tier = staticmethod(select_current_tier)


__all__ = [
    "ActiveQuest",
    "InviteTierResult",
    "QuestCheckerRegistry",
    "QuestCompletionResult",
    "QuestService",
    "build_quest_checker_registry",
]
