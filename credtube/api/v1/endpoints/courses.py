"""
Course Routes

Public catalogue: playlists, their videos, and the quiz for a video.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.core.database import get_db
from credtube.schemas.course import (
    PlaylistDetailResponse,
    PlaylistResponse,
    QuizResponse,
    VideoResponse,
)
from credtube.services import course_service


router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get(
    "",
    response_model=List[PlaylistResponse],
    summary="List active courses",
)
async def list_courses(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[PlaylistResponse]:
    """All active playlists, newest first."""
    playlists = await course_service.list_playlists(db)
    return [PlaylistResponse.model_validate(p) for p in playlists]


@router.get(
    "/{playlist_id}",
    response_model=PlaylistDetailResponse,
    summary="Get course with its videos",
)
async def get_course(
    playlist_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlaylistDetailResponse:
    """
    Get a course and its active videos in playlist order.

    Raises:
        HTTPException: 404 if the course does not exist.
    """
    playlist = await course_service.get_playlist(playlist_id, db)
    detail = PlaylistResponse.model_validate(playlist).model_dump()
    return PlaylistDetailResponse(
        **detail,
        videos=[
            VideoResponse.model_validate(v)
            for v in course_service.active_videos(playlist)
        ],
    )


@router.get(
    "/videos/{video_id}/quiz",
    response_model=QuizResponse,
    summary="Get the quiz for a video",
)
async def get_video_quiz(
    video_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QuizResponse:
    """
    Get the active quiz for a video without its answer key.

    time_limit is informational; the countdown runs on the client.
    """
    return await course_service.get_learner_quiz(video_id, db)
