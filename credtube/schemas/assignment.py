"""
Assignment Schemas

Request models for assignment generation and guest quiz scoring.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateAssignmentRequest(BaseModel):
    """Accepts the camelCase keys sent by the web client."""

    model_config = ConfigDict(populate_by_name=True)

    video_title: Optional[str] = Field(default=None, alias="videoTitle")
    video_description: Optional[str] = Field(default=None, alias="videoDescription")
    difficulty: str = "intermediate"
    guest_mode: bool = Field(default=False, alias="guestMode")
    subject: Optional[str] = None
    topic: Optional[str] = None


class GuestQuizSubmission(BaseModel):
    """A generated quiz scored without an account."""

    model_config = ConfigDict(populate_by_name=True)

    video_title: str = Field(..., min_length=1, alias="videoTitle")
    questions: List[Dict[str, Any]]
    answers: Dict[int, int]
    passing_score: Optional[int] = Field(default=None, ge=0, le=100, alias="passingScore")


class GuestQuizResult(BaseModel):
    score: int
    passed: bool
    correct_count: int
    total_questions: int
    passing_score: int
    credential: Optional[Dict[str, Any]] = None
