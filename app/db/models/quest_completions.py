from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class QuestCompletion(Base):
    __tablename__ = "quest_completions"
    __table_args__ = (
        Index("idx_quest_completions_user_created", "user_external_id", "created_at"),
        Index(
            "uq_quest_completions_user_quest_completed",
            "user_external_id",
            "quest_id",
            unique=True,
            postgresql_where=text("fully_completed"),
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_external_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.external_id"),
        nullable=False,
    )
    quest_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("quests.id"), nullable=False)
    fully_completed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
