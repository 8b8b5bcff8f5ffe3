"""
CredTube Backend - Services Module

Business logic layer.
"""

from credtube.services import scoring
from credtube.services import credential_service
from credtube.services import token_service
from credtube.services import progress_service
from credtube.services import course_service
from credtube.services import youtube_service
from credtube.services import assignment_service

__all__ = [
    "scoring",
    "credential_service",
    "token_service",
    "progress_service",
    "course_service",
    "youtube_service",
    "assignment_service",
]
