"""
Video Model

Individual YouTube video within a playlist/course.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base

if TYPE_CHECKING:
    from credtube.models.playlist import Playlist
    from credtube.models.quiz import Quiz


class Video(Base):
    """
    Video model.

    Attributes:
        id: UUID primary key.
        playlist_id: Foreign key to playlists table.
        youtube_video_id: 11-character YouTube video ID.
        title: Video title.
        description: Video description.
        thumbnail_url: Thumbnail image.
        duration: Length in seconds.
        order_index: Position within the playlist.
        is_active: Whether the video is shown to learners.
    """

    __tablename__ = "videos"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    youtube_video_id: Mapped[str] = mapped_column(
        String(50),
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
    duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    order_index: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
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
    playlist: Mapped["Playlist"] = relationship(
        "Playlist",
        back_populates="videos",
    )
    quizzes: Mapped[list["Quiz"]] = relationship(
        "Quiz",
        back_populates="video",
        cascade="all, delete-orphan",
    )

    @property
    def youtube_url(self) -> str:
        return f"https://youtube.com/watch?v={self.youtube_video_id}"

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, youtube_id={self.youtube_video_id})>"
