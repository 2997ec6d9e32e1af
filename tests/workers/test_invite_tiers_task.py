import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace

import structlog

from app.economy.quests.types import InviteTierResult
from app.workers import asyncio_runner
from app.workers.tasks import invite_tiers


def test_advance_invite_tier_task_wrapper(monkeypatch) -> None:
    async def fake_async(*, referrer_external_id: str) -> dict[str, object]:
        return {
            "status": "COMPLETED",
            "quest_id": 3,
            "completed": True,
            "points_awarded": 50,
            "referrer": referrer_external_id,
        }

    monkeypatch.setattr(invite_tiers, "advance_invite_tier_async", fake_async)
    monkeypatch.setattr(invite_tiers, "run_async_job", asyncio.run)

    result = invite_tiers.advance_invite_tier("8001")
    assert result["referrer"] == "8001"
    assert result["points_awarded"] == 50


def test_advance_invite_tier_async_runs_in_one_transaction(monkeypatch) -> None:
    sessions: list[object] = []

    @asynccontextmanager
    async def fake_begin():
        session = SimpleNamespace(name="tx")
        sessions.append(session)
        yield session

    async def fake_advance(session, *, referrer_external_id: str, now_utc):
        assert session is sessions[0]
        assert referrer_external_id == "8002"
        assert now_utc.tzinfo is not None
        assert structlog.contextvars.get_contextvars() == {"referrer_external_id": "8002"}
        return InviteTierResult(status="NOT_REACHED", quest_id=4, completed=False)

    monkeypatch.setattr(invite_tiers, "SessionLocal", SimpleNamespace(begin=fake_begin))
    monkeypatch.setattr(invite_tiers.QuestService, "advance_invite_tier", fake_advance)

    result = asyncio.run(invite_tiers.advance_invite_tier_async(referrer_external_id="8002"))

    assert result == {
        "status": "NOT_REACHED",
        "quest_id": 4,
        "completed": False,
        "points_awarded": 0,
    }
    assert len(sessions) == 1


def test_advance_invite_tier_task_retries_on_upstream_outage() -> None:
    task = invite_tiers.advance_invite_tier

    assert task.name == "app.workers.tasks.invite_tiers.advance_invite_tier"
    assert task.max_retries == 5
    assert any(
        issubclass(error, invite_tiers.UpstreamUnavailableError)
        for error in task.autoretry_for
    )


def test_run_async_job_clears_log_context(monkeypatch) -> None:
    disposals: list[bool] = []

    async def fake_dispose() -> None:
        disposals.append(True)

    async def job() -> str:
        structlog.contextvars.bind_contextvars(job="invite_tiers")
        return "done"

    monkeypatch.setattr(asyncio_runner, "dispose_engine", fake_dispose)

    assert asyncio_runner.run_async_job(job()) == "done"
    assert disposals == [True, True]
    assert structlog.contextvars.get_contextvars() == {}
