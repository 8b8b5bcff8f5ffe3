"""
Enrollment Model

User-course enrollment with completion tracking.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base

if TYPE_CHECKING:
    from credtube.models.playlist import Playlist
    from credtube.models.user import User


class PlaylistEnrollment(Base):
    """
    Enrollment model representing a user taking a course.

    Unique constraint ensures a user can only enroll once per course.

    Attributes:
        id: UUID primary key.
        user_id: Foreign key to users table.
        playlist_id: Foreign key to playlists table.
        enrolled_at: When the user enrolled.
        completed_at: When every active video in the playlist was completed.
        progress_percentage: Share of the playlist's active videos completed.
    """

    __tablename__ = "playlist_enrollments"

    __table_args__ = (
        UniqueConstraint("user_id", "playlist_id", name="uq_enrollment_user_playlist"),
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
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    progress_percentage: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="enrollments",
    )
    playlist: Mapped["Playlist"] = relationship(
        "Playlist",
        back_populates="enrollments",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<PlaylistEnrollment(user_id={self.user_id}, playlist_id={self.playlist_id})>"
