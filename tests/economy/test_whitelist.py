from __future__ import annotations

import pytest

from app.economy.errors import UserNotFoundError
from app.economy.whitelist import WhitelistService
from app.economy.whitelist.service import WHITELIST_BONUS_ACTIVITY
from tests.economy.ledger_fixtures import NOW_UTC


@pytest.mark.asyncio
async def test_whitelist_credits_referrer_exactly_once(ledger, session) -> None:
    ledger.add_user("6000", referral_code="NOVEMBER12")
    ledger.add_user("6001", referral_code="OSCAR12345")
    referral = ledger.add_referral(referrer="6000", referee="6001")

    first = await WhitelistService.whitelist_user(
        session,
        user_external_id="6001",
        email=" friend@example.com ",
        now_utc=NOW_UTC,
        bonus_points=300,
    )
    second = await WhitelistService.whitelist_user(
        session,
        user_external_id="6001",
        email="friend@example.com",
        now_utc=NOW_UTC,
        bonus_points=300,
    )

    assert first.status == WhitelistService.STATUS_AWARDED
    assert first.referrer_external_id == "6000"
    assert first.points_awarded == 300
    assert second.status == WhitelistService.STATUS_ALREADY_AWARDED
    assert second.points_awarded == 0
    assert ledger.balance("6000") == 300
    assert [e.activity for e in ledger.history] == [WHITELIST_BONUS_ACTIVITY]
    assert referral.whitelist_bonus_awarded_at == NOW_UTC
    assert ledger.users["6001"].whitelisted is True
    assert ledger.users["6001"].email == "friend@example.com"
    assert session.flushes == 1


@pytest.mark.asyncio
async def test_whitelist_without_referrer_only_marks_user(ledger, session) -> None:
    ledger.add_user("6010", referral_code="PAPA123456")

    result = await WhitelistService.whitelist_user(
        session,
        user_external_id="6010",
        email="solo@example.com",
        now_utc=NOW_UTC,
        bonus_points=300,
    )

    assert result.status == WhitelistService.STATUS_NO_REFERRER
    assert result.referrer_external_id is None
    assert ledger.users["6010"].whitelisted is True
    assert ledger.history == []


@pytest.mark.asyncio
async def test_whitelist_unknown_user_is_not_found(ledger, session) -> None:
    with pytest.raises(UserNotFoundError):
        await WhitelistService.whitelist_user(
            session,
            user_external_id="6020",
            email="ghost@example.com",
            now_utc=NOW_UTC,
            bonus_points=300,
        )
