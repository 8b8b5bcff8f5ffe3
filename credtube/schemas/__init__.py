"""
CredTube Backend - Schemas Module

Pydantic models for request/response validation.
"""

from credtube.schemas.user import UserCreate, UserResponse, UserUpdate
from credtube.schemas.token import Token
from credtube.schemas.course import (
    VideoCreate,
    VideoResponse,
    PlaylistCreate,
    PlaylistResponse,
    PlaylistDetailResponse,
    QuizCreate,
    QuizResponse,
)
from credtube.schemas.progress import QuizSubmission, QuizResult
from credtube.schemas.credential import (
    CredentialDocument,
    LearningTokenResponse,
    ShareLinks,
    VerificationResult,
)

__all__ = [
    # User
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    # Token
    "Token",
    # Course
    "VideoCreate",
    "VideoResponse",
    "PlaylistCreate",
    "PlaylistResponse",
    "PlaylistDetailResponse",
    "QuizCreate",
    "QuizResponse",
    # Progress
    "QuizSubmission",
    "QuizResult",
    # Credentials
    "CredentialDocument",
    "LearningTokenResponse",
    "ShareLinks",
    "VerificationResult",
]
