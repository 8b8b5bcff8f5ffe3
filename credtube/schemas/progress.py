"""
Progress Schemas

Pydantic models for watch tracking, quiz submissions and enrollments.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from credtube.schemas.course import PlaylistResponse


class ProgressStart(BaseModel):
    """Schema for starting video playback."""

    video_id: uuid.UUID = Field(..., description="Video ID to start watching")


class ProgressUpdate(BaseModel):
    """Schema for updating watch time (heartbeat)."""

    video_id: uuid.UUID = Field(..., description="Video ID being watched")
    seconds_watched: int = Field(..., ge=0, description="Total seconds watched")


class ProgressComplete(BaseModel):
    """Schema for marking video as complete."""

    video_id: uuid.UUID = Field(..., description="Video ID to mark as complete")
    watch_time: int = Field(
        default=0,
        ge=0,
        description="Cumulative seconds watched; the stored total never decreases",
    )


class QuizSubmission(BaseModel):
    """Schema for quiz answer submission."""

    video_id: uuid.UUID = Field(..., description="Video ID for the quiz")
    answers: Dict[int, int] = Field(
        ...,
        description="Question index to selected option index (e.g., {0: 2}); may be partial",
    )


class ProgressResponse(BaseModel):
    """Schema for progress response."""

    video_id: uuid.UUID
    playlist_id: uuid.UUID
    is_video_completed: bool
    video_watch_time: int
    is_quiz_completed: bool
    quiz_score: Optional[int] = None
    quiz_attempts: int
    token_issued: bool
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QuizResult(BaseModel):
    """
    Schema for quiz submission result.

    The score is always present. progress_error and credential_error are set
    when the corresponding store write failed after scoring.
    """

    video_id: uuid.UUID
    score: int  # Percentage
    passed: bool
    correct_count: int
    total_questions: int
    passing_score: int
    message: str
    token_id: Optional[uuid.UUID] = None
    progress_error: Optional[str] = None
    credential_error: Optional[str] = None


class EnrollmentCreate(BaseModel):
    """Schema for enrolling in a playlist."""

    playlist_id: uuid.UUID


class EnrollmentResponse(BaseModel):
    """Schema for enrollment response."""

    id: uuid.UUID
    playlist_id: uuid.UUID
    enrolled_at: datetime
    completed_at: Optional[datetime] = None
    progress_percentage: int
    playlist: Optional[PlaylistResponse] = None

    model_config = {"from_attributes": True}


class DashboardStats(BaseModel):
    """Per-learner counts shown on the dashboard."""

    videos_completed: int
    quizzes_passed: int
    tokens_earned: int
    enrolled_playlists: int
