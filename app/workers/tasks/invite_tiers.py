from __future__ import annotations

from datetime import datetime, timezone

import structlog

from app.core.logging import bind_request_context
from app.db.session import SessionLocal
from app.economy.errors import UpstreamUnavailableError
from app.economy.quests import QuestService
from app.workers.asyncio_runner import run_async_job
from app.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


async def advance_invite_tier_async(*, referrer_external_id: str) -> dict[str, object]:
    bind_request_context(referrer_external_id=referrer_external_id)
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        result = await QuestService.advance_invite_tier(
            session,
            referrer_external_id=referrer_external_id,
            now_utc=now_utc,
        )

    payload: dict[str, object] = {
        "status": result.status,
        "quest_id": result.quest_id,
        "completed": result.completed,
        "points_awarded": result.points_awarded,
    }
    logger.info("invite_tier_task_finished", **payload)
    return payload


@celery_app.task(
    name="app.workers.tasks.invite_tiers.advance_invite_tier",
    autoretry_for=(UpstreamUnavailableError,),
    retry_backoff=True,
    max_retries=5,
)
def advance_invite_tier(referrer_external_id: str) -> dict[str, object]:
    return run_async_job(advance_invite_tier_async(referrer_external_id=referrer_external_id))
