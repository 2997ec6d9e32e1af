from __future__ import annotations

REFERRAL_ACTIVITY = "referral"
