from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quests import Quest
from app.db.repo.quest_completions_repo import QuestCompletionsRepo
from app.economy.errors import MalformedQuestTargetError


def parse_quest_target(quest: Quest) -> int:
    raw_target = (quest.target or "").strip()
    try:
        return int(raw_target)
    except ValueError as exc:
        raise MalformedQuestTargetError(f"quest {quest.id}: {quest.target!r}") from exc


class InviteThresholdChecker:
    """An invite tier is reached when it is the very next one after the recorded progress.

    Progress is the number of INVITE completion records the user already has, one
    per processed referral, so the check is ``progress + 1 == target`` rather than
    ``progress >= target``.
    """

    async def is_completed(
        self,
        session: AsyncSession,
        *,
        quest: Quest,
        user_external_id: str,
    ) -> bool:
        invites = await QuestCompletionsRepo.count_invite_records(
            session,
            user_external_id=user_external_id,
        )
        target = parse_quest_target(quest)
        return invites + 1 == target
