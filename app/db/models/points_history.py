from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class PointsHistoryEntry(Base):
    __tablename__ = "points_history"
    __table_args__ = (
        CheckConstraint("points <> 0", name="ck_points_history_points_non_zero"),
        Index("idx_points_history_user_created", "user_external_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_external_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.external_id"),
        nullable=False,
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    activity: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
