from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Referral(Base):
    __tablename__ = "referrals"
    __table_args__ = (
        CheckConstraint(
            "referrer_external_id <> referee_external_id",
            name="ck_referrals_no_self_referral",
        ),
        Index("idx_referrals_referrer_created", "referrer_external_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    referrer_external_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.external_id"),
        nullable=False,
    )
    referee_external_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.external_id"),
        unique=True,
        nullable=False,
    )
    whitelist_bonus_awarded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
