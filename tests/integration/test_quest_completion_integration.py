from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from sqlalchemy import func, select

from app.db.models.quest_completions import QuestCompletion
from app.db.session import SessionLocal
from app.economy.errors import QuestAlreadyCompletedError, QuestNotCompletedError
from app.economy.quests import QuestService
from app.economy.quests.checkers import QuestCheckerRegistry
from tests.integration.ledger_fixtures import (
    UTC,
    _balance,
    _create_quest,
    _create_user,
    _history_total,
)


class _StaticChecker:
    def __init__(self, answer: bool) -> None:
        self.answer = answer

    async def is_completed(self, session, *, quest, user_external_id: str) -> bool:
        del session, quest, user_external_id
        return self.answer


def _registry(answer: bool) -> QuestCheckerRegistry:
    registry = QuestCheckerRegistry()
    registry.register("TELEGRAM", "GROUP", _StaticChecker(answer))
    return registry


async def _complete(*, user: str, quest_id: int, answer: bool, now_utc: datetime) -> None:
    async with SessionLocal.begin() as session:
        await QuestService.complete_quest(
            session,
            user_external_id=user,
            quest_id=quest_id,
            now_utc=now_utc,
            registry=_registry(answer),
        )


@pytest.mark.asyncio
async def test_failed_check_leaves_balance_unchanged() -> None:
    now_utc = datetime(2026, 10, 19, 15, 0, tzinfo=UTC)
    quest = await _create_quest(platform="TELEGRAM", action="GROUP", points=25)
    await _create_user("9300")

    with pytest.raises(QuestNotCompletedError):
        await _complete(user="9300", quest_id=quest.id, answer=False, now_utc=now_utc)

    assert await _balance("9300") == 0
    async with SessionLocal.begin() as session:
        assert (await session.scalar(select(func.count(QuestCompletion.id)))) == 0


@pytest.mark.asyncio
async def test_parallel_completions_credit_once() -> None:
    now_utc = datetime(2026, 10, 19, 15, 10, tzinfo=UTC)
    quest = await _create_quest(
        platform="TELEGRAM",
        action="GROUP",
        points=25,
        message="Joined the group",
    )
    await _create_user("9310")
    barrier = asyncio.Event()

    async def _attempt() -> str:
        await barrier.wait()
        try:
            await _complete(user="9310", quest_id=quest.id, answer=True, now_utc=now_utc)
            return "completed"
        except QuestAlreadyCompletedError:
            return "already_completed"

    task_1 = asyncio.create_task(_attempt())
    task_2 = asyncio.create_task(_attempt())
    barrier.set()
    outcomes = await asyncio.gather(task_1, task_2)

    assert sorted(outcomes) == ["already_completed", "completed"]
    assert await _balance("9310") == 25
    assert await _history_total("9310") == 25
