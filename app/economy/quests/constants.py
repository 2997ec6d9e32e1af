from __future__ import annotations

PLATFORM_PAY3 = "PAY3"
PLATFORM_TELEGRAM = "TELEGRAM"

ACTION_GROUP = "GROUP"
ACTION_INVITE = "INVITE"
ACTION_FOLLOW = "FOLLOW"
ACTION_VISIT = "VISIT"
QUEST_ACTIONS = frozenset({ACTION_GROUP, ACTION_INVITE, ACTION_FOLLOW, ACTION_VISIT})

GROUP_MEMBER_STATUSES = frozenset({"member", "administrator", "creator"})

INVITE_TIER_STATUS_COMPLETED = "COMPLETED"
INVITE_TIER_STATUS_NOT_REACHED = "NOT_REACHED"
INVITE_TIER_STATUS_NO_TIER = "NO_TIER"
INVITE_TIER_STATUS_NOTHING_TO_PROCESS = "NOTHING_TO_PROCESS"
