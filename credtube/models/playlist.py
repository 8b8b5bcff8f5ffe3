"""
Playlist Model

Course container imported from a YouTube playlist or a single video.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base

if TYPE_CHECKING:
    from credtube.models.enrollment import PlaylistEnrollment
    from credtube.models.video import Video


class Playlist(Base):
    """
    Playlist model representing a course.

    Attributes:
        id: UUID primary key.
        youtube_playlist_id: YouTube playlist ID (or video ID for single-video courses).
        title: Course title, interpolated into credential skills.
        description: Course description.
        thumbnail_url: Cover image.
        difficulty_level: Optional 1-5 rating.
        estimated_duration: Optional total length in seconds.
        is_active: Whether the course is listed.
        created_by: Admin who created or imported it.
    """

    __tablename__ = "playlists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    youtube_playlist_id: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    thumbnail_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    difficulty_level: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    estimated_duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
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

    # Relationships
    videos: Mapped[list["Video"]] = relationship(
        "Video",
        back_populates="playlist",
        lazy="selectin",
        order_by="Video.order_index",
        cascade="all, delete-orphan",
    )
    enrollments: Mapped[list["PlaylistEnrollment"]] = relationship(
        "PlaylistEnrollment",
        back_populates="playlist",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, title={self.title[:30]}...)>"
