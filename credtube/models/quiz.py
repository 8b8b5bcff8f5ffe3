"""
Quiz Model

Assessment attached to a video; questions and the answer key live in JSON.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base, JSONType
from credtube.models.enums import QuizType, enum_values

if TYPE_CHECKING:
    from credtube.models.video import Video


class Quiz(Base):
    """
    Quiz model.

    One active quiz per video in practice; the foreign key allows more.

    Attributes:
        id: UUID primary key.
        video_id: Foreign key to videos table.
        title: Quiz title (embedded in issued credentials).
        questions: List of {"question", "options", "correct", "explanation"?, "type"?}.
        passing_score: Percentage needed to pass; NULL means the platform default.
        time_limit: Seconds allowed; NULL or 0 means unlimited.
        quiz_type: multiple_choice, coding or true_false.
        is_active: Only active quizzes are served.
    """

    __tablename__ = "quizzes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("videos.id", ondelete="CASCADE"),
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
    questions: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
    )
    passing_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    time_limit: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    quiz_type: Mapped[QuizType] = mapped_column(
        Enum(QuizType, name="quiz_type", values_callable=enum_values),
        default=QuizType.MULTIPLE_CHOICE,
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

    video: Mapped["Video"] = relationship(
        "Video",
        back_populates="quizzes",
    )

    def __repr__(self) -> str:
        return f"<Quiz(id={self.id}, video_id={self.video_id})>"
