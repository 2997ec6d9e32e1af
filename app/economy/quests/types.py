from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ActiveQuest:
    id: int
    title: str
    description: str | None
    platform: str
    action: str
    target: str | None
    points: int
    message: str | None
    expires_at: datetime | None
    completed: int


@dataclass(frozen=True, slots=True)
class QuestCompletionResult:
    quest_id: int
    user_external_id: str
    points_awarded: int
    balance_after: int


@dataclass(frozen=True, slots=True)
class InviteTierResult:
    status: str
    quest_id: int | None = None
    completed: bool = False
    points_awarded: int = 0
