"""
Progress Routes

Endpoints for video progress tracking, quiz submissions and enrollments.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.api.deps import get_request_context
from credtube.core.context import RequestContext
from credtube.core.database import get_db
from credtube.schemas.progress import (
    DashboardStats,
    EnrollmentCreate,
    EnrollmentResponse,
    ProgressComplete,
    ProgressResponse,
    ProgressStart,
    ProgressUpdate,
    QuizResult,
    QuizSubmission,
)
from credtube.services import progress_service


router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get(
    "/enrollments",
    response_model=List[EnrollmentResponse],
    summary="Get user enrollments",
)
async def get_enrollments(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[EnrollmentResponse]:
    """
    Get all courses the current user is enrolled in.

    progress_percentage is recomputed from completed videos on every call.
    """
    enrollments = await progress_service.list_enrollments(ctx, db)
    return [EnrollmentResponse.model_validate(e) for e in enrollments]


@router.post(
    "/enrollments",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
)
async def enroll(
    data: EnrollmentCreate,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnrollmentResponse:
    """Enroll in a course; enrolling again returns the existing enrollment."""
    enrollment = await progress_service.enroll(ctx, data.playlist_id, db)
    return EnrollmentResponse.model_validate(enrollment)


@router.post(
    "/start",
    response_model=ProgressResponse,
    summary="Start watching a video",
)
async def start_video(
    data: ProgressStart,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProgressResponse:
    """
    Called when the learner presses play.

    Creates the enrollment and the progress row if they do not exist yet.
    """
    progress = await progress_service.start_video(ctx, data.video_id, db)
    return ProgressResponse.model_validate(progress)


@router.post(
    "/heartbeat",
    response_model=ProgressResponse,
    summary="Update watch time",
)
async def heartbeat(
    data: ProgressUpdate,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProgressResponse:
    """Report total seconds watched; replays are harmless."""
    progress = await progress_service.record_watch_time(
        ctx, data.video_id, data.seconds_watched, db
    )
    return ProgressResponse.model_validate(progress)


@router.post(
    "/complete",
    response_model=ProgressResponse,
    summary="Mark video as complete",
)
async def complete_video(
    data: ProgressComplete,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProgressResponse:
    progress = await progress_service.complete_video(
        ctx, data.video_id, data.watch_time, db
    )
    return ProgressResponse.model_validate(progress)


@router.post(
    "/quiz/submit",
    response_model=QuizResult,
    summary="Submit quiz answers",
)
async def submit_quiz(
    data: QuizSubmission,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QuizResult:
    """
    Grade a quiz submission.

    A passing score mints a learning token. If recording the attempt or
    issuing the token fails, the score is still returned and the failure is
    described in progress_error or credential_error.
    """
    return await progress_service.submit_quiz(ctx, data.video_id, data.answers, db)


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Get learner dashboard counts",
)
async def dashboard(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardStats:
    return await progress_service.get_dashboard_stats(ctx, db)
