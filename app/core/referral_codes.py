from __future__ import annotations

import secrets

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_CODE_LENGTH = 10


def generate_referral_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Generates a short uppercase referral code with low typo ambiguity."""
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def normalize_referral_code(raw_code: str) -> str:
    return raw_code.strip().upper()
