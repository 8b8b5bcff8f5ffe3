"""
User Progress Model

Per-user, per-video watch and quiz state.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base

if TYPE_CHECKING:
    from credtube.models.video import Video


class UserProgress(Base):
    """
    Progress record, one row per (user, video).

    Written with read-modify-write against the unique constraint; never
    deleted by the quiz workflow.

    Attributes:
        is_video_completed: Video watched (>= 90% or explicitly completed).
        video_watch_time: Cumulative seconds watched.
        is_quiz_completed: Last quiz score met the passing threshold.
        quiz_score: Last quiz score percentage.
        quiz_attempts: Number of submitted attempts.
        token_issued: A learning token was minted for this video.
        completed_at: Time of the last passing submission.
    """

    __tablename__ = "user_progress"

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_progress_user_video"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
    )
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_video_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    video_watch_time: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    is_quiz_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    quiz_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    quiz_attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    token_issued: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    video: Mapped["Video"] = relationship("Video")

    def __repr__(self) -> str:
        return f"<UserProgress(user_id={self.user_id}, video_id={self.video_id})>"
