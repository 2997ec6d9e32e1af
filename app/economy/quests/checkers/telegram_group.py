from __future__ import annotations

import structlog
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.token import TokenValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quests import Quest
from app.economy.errors import CheckerUnavailableError, InvalidExternalIdError
from app.economy.quests.constants import GROUP_MEMBER_STATUSES

logger = structlog.get_logger(__name__)


def resolve_chat_target(raw_chat_value: str) -> int | str | None:
    value = raw_chat_value.strip()
    for prefix in ("https://", "http://"):
        value = value.removeprefix(prefix)
    value = value.removeprefix("t.me/").strip("/")
    value = value.split("?", maxsplit=1)[0].split("/", maxsplit=1)[0].strip()
    if not value:
        return None
    if value.lstrip("-").isdigit():
        return int(value)
    username = value.removeprefix("@").strip()
    if not username:
        return None
    return f"@{username}"


class TelegramGroupChecker:
    """Checks that the user is a member of the configured group chat.

    The quest row does not choose the chat; every GROUP quest points at the one
    group configured for the deployment.
    """

    def __init__(
        self,
        *,
        chat_id: str,
        bot: Bot | None = None,
        bot_token: str = "",
    ) -> None:
        self._chat_target = resolve_chat_target(chat_id)
        self._bot = bot
        self._bot_token = bot_token.strip()

    async def is_completed(
        self,
        session: AsyncSession,
        *,
        quest: Quest,
        user_external_id: str,
    ) -> bool:
        del session
        if self._chat_target is None:
            logger.warning("group_membership_chat_not_configured", quest_id=quest.id)
            raise CheckerUnavailableError("group chat is not configured")
        try:
            telegram_user_id = int(user_external_id)
        except ValueError as exc:
            raise InvalidExternalIdError(user_external_id) from exc

        status = await self._fetch_member_status(telegram_user_id)
        return status in GROUP_MEMBER_STATUSES

    async def _fetch_member_status(self, telegram_user_id: int) -> str:
        active_bot = self._bot
        owned_bot: Bot | None = None
        if active_bot is None:
            try:
                owned_bot = Bot(token=self._bot_token)
            except TokenValidationError as exc:
                logger.warning("group_membership_bot_invalid_token")
                raise CheckerUnavailableError("telegram bot token is invalid") from exc
            active_bot = owned_bot

        try:
            member = await active_bot.get_chat_member(
                chat_id=self._chat_target,
                user_id=telegram_user_id,
            )
        except (TelegramAPIError, TimeoutError, OSError) as exc:
            logger.warning(
                "group_membership_check_failed",
                telegram_user_id=telegram_user_id,
                error=type(exc).__name__,
            )
            raise CheckerUnavailableError("telegram getChatMember failed") from exc
        finally:
            if owned_bot is not None:
                await owned_bot.session.close()

        return str(getattr(member, "status", "")).lower().strip()
