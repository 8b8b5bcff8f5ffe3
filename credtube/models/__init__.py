"""
CredTube Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from credtube.core.database import Base

# Enums
from credtube.models.enums import (
    AppRole,
    CredentialStatus,
    QuizType,
)

# Models
from credtube.models.user import User, UserRole
from credtube.models.playlist import Playlist
from credtube.models.video import Video
from credtube.models.quiz import Quiz
from credtube.models.enrollment import PlaylistEnrollment
from credtube.models.user_progress import UserProgress
from credtube.models.learning_token import LearningToken

__all__ = [
    # Base
    "Base",
    # Enums
    "AppRole",
    "CredentialStatus",
    "QuizType",
    # Models
    "User",
    "UserRole",
    "Playlist",
    "Video",
    "Quiz",
    "PlaylistEnrollment",
    "UserProgress",
    "LearningToken",
]
