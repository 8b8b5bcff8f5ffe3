"""
Function Routes

Stateless helpers callable without an account: YouTube metadata lookup,
assignment generation, and guest quiz scoring.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from credtube.core.context import utc_now
from credtube.schemas.assignment import (
    GenerateAssignmentRequest,
    GuestQuizResult,
    GuestQuizSubmission,
)
from credtube.schemas.youtube import FetchYouTubeDataRequest
from credtube.services import course_service
from credtube.services.assignment_service import GenerationContext, generate_assignment
from credtube.services.youtube_service import FETCH_FAILED_MESSAGE, fetch_youtube_data


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Functions"])


@router.post(
    "/fetch-youtube-data",
    summary="Resolve a YouTube URL to video metadata",
)
async def fetch_youtube(data: FetchYouTubeDataRequest) -> JSONResponse:
    """
    Look up metadata for a video or playlist URL.

    Returns {success, video, extractedIds} on success. Failures keep the same
    {success: false, error} body with 400 for bad input and 502 when the
    metadata source failed.
    """
    result = await fetch_youtube_data(data.url)
    if result["success"]:
        return JSONResponse(content=result)

    code = (
        status.HTTP_502_BAD_GATEWAY
        if result["error"] == FETCH_FAILED_MESSAGE
        else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse(status_code=code, content=result)


@router.post(
    "/generate-assignment",
    summary="Generate a quiz, practical tasks and reflection questions",
)
async def generate(data: GenerateAssignmentRequest) -> dict:
    """
    Build an assignment from templates.

    Raises:
        HTTPException: 400 if videoTitle is missing.
    """
    if not data.video_title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Video title is required",
        )

    context = GenerationContext(
        video_title=data.video_title,
        video_description=data.video_description or "",
        difficulty=data.difficulty,
        guest_mode=data.guest_mode,
        subject=data.subject or "",
        topic=data.topic or "",
    )
    logger.info("Generating assignment for %r (guest=%s)", data.video_title, data.guest_mode)
    return generate_assignment(context)


@router.post(
    "/guest-quiz",
    response_model=GuestQuizResult,
    summary="Score a generated quiz without an account",
)
async def guest_quiz(data: GuestQuizSubmission) -> GuestQuizResult:
    """A passing score returns a temporary credential that is never stored."""
    return course_service.score_guest_quiz(data, now=utc_now())
