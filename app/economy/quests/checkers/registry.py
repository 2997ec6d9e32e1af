from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quests import Quest
from app.economy.errors import UnsupportedActionError, UnsupportedPlatformError


class QuestChecker(Protocol):
    async def is_completed(
        self,
        session: AsyncSession,
        *,
        quest: Quest,
        user_external_id: str,
    ) -> bool: ...


class QuestCheckerRegistry:
    """Dispatches a quest to the checker bound to its (platform, action) pair."""

    def __init__(self) -> None:
        self._checkers: dict[tuple[str, str], QuestChecker] = {}

    @staticmethod
    def _key(platform: str, action: str) -> tuple[str, str]:
        return platform.strip().upper(), action.strip().upper()

    def register(self, platform: str, action: str, checker: QuestChecker) -> None:
        key = self._key(platform, action)
        if key in self._checkers:
            raise ValueError(f"checker already registered for {key[0]}/{key[1]}")
        self._checkers[key] = checker

    def resolve(self, quest: Quest) -> QuestChecker:
        platform, action = self._key(quest.platform, quest.action)
        checker = self._checkers.get((platform, action))
        if checker is not None:
            return checker
        if any(registered_platform == platform for registered_platform, _ in self._checkers):
            raise UnsupportedActionError(f"{platform}/{action}")
        raise UnsupportedPlatformError(platform)

    async def evaluate(
        self,
        session: AsyncSession,
        *,
        quest: Quest,
        user_external_id: str,
    ) -> bool:
        checker = self.resolve(quest)
        return await checker.is_completed(
            session,
            quest=quest,
            user_external_id=user_external_id,
        )
