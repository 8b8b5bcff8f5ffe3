"""
Course Schemas

Pydantic models for playlist, video and quiz request/response validation.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from credtube.models.enums import QuizType


# ============== Video Schemas ==============

class VideoBase(BaseModel):
    """Base schema for video data."""

    title: str = Field(..., min_length=1, max_length=500, description="Video title")
    youtube_video_id: str = Field(..., min_length=1, max_length=50, description="YouTube video ID")
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0, description="Video duration in seconds")


class VideoCreate(VideoBase):
    """Schema for adding a video to a playlist."""

    playlist_id: uuid.UUID
    order_index: int = Field(default=0, ge=0)


class VideoResponse(VideoBase):
    """Schema for video response."""

    id: uuid.UUID
    playlist_id: uuid.UUID
    order_index: int
    is_active: bool

    model_config = {"from_attributes": True}


# ============== Playlist Schemas ==============

class PlaylistCreate(BaseModel):
    """Schema for creating a new playlist/course."""

    youtube_playlist_id: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    difficulty_level: Optional[int] = Field(default=None, ge=1, le=5)
    estimated_duration: Optional[int] = Field(default=None, ge=0)


class PlaylistImport(BaseModel):
    """Schema for importing a course from a YouTube URL."""

    youtube_url: str = Field(..., description="YouTube playlist or video URL")


class PlaylistResponse(BaseModel):
    """Schema for playlist response."""

    id: uuid.UUID
    youtube_playlist_id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    difficulty_level: Optional[int] = None
    estimated_duration: Optional[int] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PlaylistDetailResponse(PlaylistResponse):
    """Schema for playlist response with nested videos."""

    videos: List[VideoResponse] = []


# ============== Quiz Schemas ==============

class QuizQuestion(BaseModel):
    """One multiple-choice question including its answer key."""

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct: int = Field(..., ge=0)
    explanation: Optional[str] = None
    type: Optional[str] = None

    @model_validator(mode="after")
    def correct_in_range(self) -> "QuizQuestion":
        if self.correct >= len(self.options):
            raise ValueError("correct must index one of the options")
        return self


class QuizCreate(BaseModel):
    """Schema for authoring a quiz."""

    video_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    questions: List[QuizQuestion] = Field(..., min_length=1)
    passing_score: Optional[int] = Field(default=None, ge=0, le=100)
    time_limit: Optional[int] = Field(default=None, ge=0, description="Seconds; 0 or null is unlimited")
    quiz_type: QuizType = QuizType.MULTIPLE_CHOICE


class LearnerQuestion(BaseModel):
    """A question as shown to learners: no answer key, no explanation."""

    question: str
    options: List[str]
    type: Optional[str] = None


class QuizResponse(BaseModel):
    """
    Schema for a quiz served to a learner.

    Built from stored quiz rows; the questions are filtered to well-formed
    entries and stripped of their answer key.
    """

    id: uuid.UUID
    video_id: uuid.UUID
    title: str
    description: Optional[str] = None
    questions: List[LearnerQuestion]
    passing_score: int
    time_limit: Optional[int] = None
    quiz_type: QuizType

    model_config = {"from_attributes": True}


class QuizAdminResponse(BaseModel):
    """Schema for a quiz as seen by its author."""

    id: uuid.UUID
    video_id: uuid.UUID
    title: str
    description: Optional[str] = None
    questions: List[Dict[str, Any]]
    passing_score: Optional[int] = None
    time_limit: Optional[int] = None
    quiz_type: QuizType
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ============== Admin ==============

class ImportResponse(BaseModel):
    """Result of importing a YouTube URL."""

    playlist: PlaylistResponse
    video: Optional[VideoResponse] = None


class GenerateQuizRequest(BaseModel):
    """Optional hints for quiz generation."""

    difficulty: str = "intermediate"
    subject: str = ""
    topic: str = ""

    @field_validator("difficulty")
    @classmethod
    def normalize_difficulty(cls, v: str) -> str:
        return v.strip().lower() or "intermediate"


class AdminStats(BaseModel):
    """Platform-wide counts for the admin dashboard."""

    total_playlists: int
    total_videos: int
    total_users: int
    total_enrollments: int


class ReconcileResponse(BaseModel):
    repaired: int
