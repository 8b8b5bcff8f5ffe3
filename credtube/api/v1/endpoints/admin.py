"""
Admin Routes

Course authoring and maintenance. Every route requires the admin role.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.api.deps import require_admin
from credtube.core.context import RequestContext
from credtube.core.database import get_db
from credtube.schemas.course import (
    AdminStats,
    GenerateQuizRequest,
    ImportResponse,
    PlaylistCreate,
    PlaylistImport,
    PlaylistResponse,
    QuizAdminResponse,
    QuizCreate,
    ReconcileResponse,
    VideoCreate,
    VideoResponse,
)
from credtube.services import course_service, token_service


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/playlists",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
)
async def create_playlist(
    data: PlaylistCreate,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlaylistResponse:
    playlist = await course_service.create_playlist(ctx, data, db)
    return PlaylistResponse.model_validate(playlist)


@router.post(
    "/playlists/import",
    response_model=ImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Import a course from a YouTube URL",
)
async def import_playlist(
    data: PlaylistImport,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ImportResponse:
    """
    Create a course from a playlist or video URL.

    A bare video URL becomes a single-video course.
    """
    playlist, video = await course_service.import_from_url(ctx, data.youtube_url, db)
    return ImportResponse(
        playlist=PlaylistResponse.model_validate(playlist),
        video=VideoResponse.model_validate(video) if video is not None else None,
    )


@router.post(
    "/videos",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a video to a course",
)
async def create_video(
    data: VideoCreate,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VideoResponse:
    video = await course_service.create_video(data, db)
    return VideoResponse.model_validate(video)


@router.post(
    "/quizzes",
    response_model=QuizAdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a quiz for a video",
)
async def create_quiz(
    data: QuizCreate,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QuizAdminResponse:
    quiz = await course_service.create_quiz(data, db)
    return QuizAdminResponse.model_validate(quiz)


@router.post(
    "/videos/{video_id}/generate-quiz",
    response_model=QuizAdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate and store a quiz for a video",
)
async def generate_quiz(
    video_id: uuid.UUID,
    data: GenerateQuizRequest,
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QuizAdminResponse:
    quiz = await course_service.generate_quiz_for_video(video_id, data, db)
    return QuizAdminResponse.model_validate(quiz)


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="Platform counts",
)
async def stats(
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminStats:
    return await course_service.get_admin_stats(db)


@router.post(
    "/reconcile-tokens",
    response_model=ReconcileResponse,
    summary="Repair token_issued flags",
)
async def reconcile_tokens(
    ctx: Annotated[RequestContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReconcileResponse:
    """
    Set token_issued on progress rows that already have a token.

    Needed when a token was stored but the follow-up flag update failed.
    """
    repaired = await token_service.reconcile_token_flags(db)
    return ReconcileResponse(repaired=repaired)
