from __future__ import annotations

from aiogram import Bot

from app.core.config import Settings, get_settings
from app.economy.quests.constants import (
    ACTION_GROUP,
    ACTION_INVITE,
    PLATFORM_PAY3,
    PLATFORM_TELEGRAM,
)

from .invite import InviteThresholdChecker, parse_quest_target
from .registry import QuestChecker, QuestCheckerRegistry
from .telegram_group import TelegramGroupChecker, resolve_chat_target


def build_quest_checker_registry(
    *,
    settings: Settings | None = None,
    bot: Bot | None = None,
) -> QuestCheckerRegistry:
    resolved_settings = settings or get_settings()
    registry = QuestCheckerRegistry()
    registry.register(PLATFORM_PAY3, ACTION_INVITE, InviteThresholdChecker())
    registry.register(
        PLATFORM_TELEGRAM,
        ACTION_GROUP,
        TelegramGroupChecker(
            chat_id=resolved_settings.quest_group_chat_id,
            bot=bot,
            bot_token=resolved_settings.telegram_bot_token,
        ),
    )
    return registry


__all__ = [
    "InviteThresholdChecker",
    "QuestChecker",
    "QuestCheckerRegistry",
    "TelegramGroupChecker",
    "build_quest_checker_registry",
    "parse_quest_target",
    "resolve_chat_target",
]
