"""
Course Service

Business logic for the course catalogue and admin authoring: playlists,
videos, quizzes, YouTube import and quiz generation.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.core.config import settings
from credtube.core.context import RequestContext
from credtube.models.enrollment import PlaylistEnrollment
from credtube.models.playlist import Playlist
from credtube.models.quiz import Quiz
from credtube.models.user import User
from credtube.models.video import Video
from credtube.schemas.assignment import GuestQuizResult, GuestQuizSubmission
from credtube.schemas.course import (
    AdminStats,
    GenerateQuizRequest,
    LearnerQuestion,
    PlaylistCreate,
    QuizCreate,
    QuizResponse,
    VideoCreate,
)
from credtube.services.assignment_service import (
    GenerationContext,
    QuizGenerator,
    get_quiz_generator,
)
from credtube.services.credential_service import build_guest_credential
from credtube.services.progress_service import get_active_quiz, get_video
from credtube.services.scoring import (
    is_passing,
    parse_questions,
    resolve_passing_score,
    score_answers,
)
from credtube.services.youtube_service import FETCH_FAILED_MESSAGE, fetch_youtube_data


logger = logging.getLogger(__name__)


SINGLE_VIDEO_PREFIX = "single_"


# ============== Catalogue ==============

async def list_playlists(db: AsyncSession) -> List[Playlist]:
    """Active playlists, newest first."""
    result = await db.execute(
        select(Playlist)
        .where(Playlist.is_active.is_(True))
        .order_by(Playlist.created_at.desc())
    )
    return list(result.scalars().all())


async def get_playlist(
    playlist_id: uuid.UUID,
    db: AsyncSession,
) -> Playlist:
    """
    Get an active playlist with its videos.

    Raises:
        HTTPException: 404 if not found or inactive.
    """
    result = await db.execute(
        select(Playlist).where(
            Playlist.id == playlist_id,
            Playlist.is_active.is_(True),
        )
    )
    playlist = result.scalar_one_or_none()

    if not playlist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return playlist


def active_videos(playlist: Playlist) -> List[Video]:
    """Active videos in playlist order."""
    return sorted(
        (v for v in playlist.videos if v.is_active),
        key=lambda v: v.order_index,
    )


def learner_quiz_view(quiz: Quiz) -> QuizResponse:
    """Quiz as served to learners: well-formed questions only, answer key removed."""
    questions = [
        LearnerQuestion(
            question=q["question"],
            options=[str(option) for option in q["options"]],
            type=q.get("type"),
        )
        for q in parse_questions(quiz.questions)
    ]
    return QuizResponse(
        id=quiz.id,
        video_id=quiz.video_id,
        title=quiz.title,
        description=quiz.description,
        questions=questions,
        passing_score=resolve_passing_score(quiz.passing_score, settings.DEFAULT_PASSING_SCORE),
        time_limit=quiz.time_limit,
        quiz_type=quiz.quiz_type,
    )


async def get_learner_quiz(
    video_id: uuid.UUID,
    db: AsyncSession,
) -> QuizResponse:
    """
    The active quiz for a video, ready to present.

    Raises:
        HTTPException: 404 if the video has no active quiz,
            400 if the stored quiz has no usable questions.
    """
    await get_video(video_id, db)
    quiz = await get_active_quiz(video_id, db)

    if not quiz:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="This video does not have a quiz",
        )

    view = learner_quiz_view(quiz)
    if not view.questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quiz has no questions",
        )
    return view


# ============== Authoring ==============

async def _ensure_playlist_is_new(youtube_playlist_id: str, db: AsyncSession) -> None:
    result = await db.execute(
        select(Playlist).where(Playlist.youtube_playlist_id == youtube_playlist_id)
    )
    if result.scalars().first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Course with YouTube ID '{youtube_playlist_id}' already exists",
        )


async def create_playlist(
    ctx: RequestContext,
    data: PlaylistCreate,
    db: AsyncSession,
) -> Playlist:
    """
    Create a playlist owned by the calling admin.

    Raises:
        HTTPException: 400 if a course with the same YouTube ID exists.
    """
    await _ensure_playlist_is_new(data.youtube_playlist_id, db)

    playlist = Playlist(
        youtube_playlist_id=data.youtube_playlist_id,
        title=data.title,
        description=data.description,
        thumbnail_url=data.thumbnail_url,
        difficulty_level=data.difficulty_level,
        estimated_duration=data.estimated_duration,
        is_active=True,
        created_by=ctx.user_id,
    )
    db.add(playlist)
    await db.commit()
    await db.refresh(playlist)

    logger.info("Playlist %s created by %s", playlist.id, ctx.user_id)
    return playlist


async def create_video(
    data: VideoCreate,
    db: AsyncSession,
) -> Video:
    """
    Add a video to an existing playlist.

    Raises:
        HTTPException: 404 if the playlist does not exist.
    """
    result = await db.execute(select(Playlist).where(Playlist.id == data.playlist_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    video = Video(
        playlist_id=data.playlist_id,
        youtube_video_id=data.youtube_video_id,
        title=data.title,
        description=data.description,
        thumbnail_url=data.thumbnail_url,
        duration=data.duration,
        order_index=data.order_index,
        is_active=True,
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)

    return video


async def create_quiz(
    data: QuizCreate,
    db: AsyncSession,
) -> Quiz:
    """
    Attach a quiz to a video.

    Question shape (at least one question, two or more options each, correct
    index in range) and the 0-100 passing score are enforced by QuizCreate.

    Raises:
        HTTPException: 404 if the video does not exist.
    """
    await get_video(data.video_id, db)

    quiz = Quiz(
        video_id=data.video_id,
        title=data.title,
        description=data.description,
        questions=[q.model_dump(exclude_none=True) for q in data.questions],
        passing_score=data.passing_score,
        time_limit=data.time_limit,
        quiz_type=data.quiz_type,
        is_active=True,
    )
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)

    logger.info("Quiz %s created for video %s", quiz.id, data.video_id)
    return quiz


async def import_from_url(
    ctx: RequestContext,
    url: str,
    db: AsyncSession,
) -> tuple[Playlist, Optional[Video]]:
    """
    Create a course from a YouTube URL.

    Flow:
    1. Resolve the URL through the metadata lookup
    2. Reject courses that already exist
    3. Create the playlist; a bare video URL becomes a single-video course
    4. Create the video when the URL names one

    Returns:
        Tuple of (playlist, video or None).

    Raises:
        HTTPException: 400 for a bad URL or duplicate course,
            502 if metadata could not be fetched.
    """
    fetched = await fetch_youtube_data(url)
    if not fetched["success"]:
        code = (
            status.HTTP_502_BAD_GATEWAY
            if fetched["error"] == FETCH_FAILED_MESSAGE
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=code, detail=fetched["error"])

    metadata = fetched["video"]
    ids = fetched["extractedIds"]
    video_id = ids["videoId"]
    youtube_playlist_id = ids["playlistId"] or f"{SINGLE_VIDEO_PREFIX}{video_id}"

    await _ensure_playlist_is_new(youtube_playlist_id, db)

    duration = metadata.get("duration") or 0
    playlist = Playlist(
        youtube_playlist_id=youtube_playlist_id,
        title=metadata["title"],
        description=metadata.get("description"),
        thumbnail_url=metadata.get("thumbnail"),
        difficulty_level=1,
        estimated_duration=math.ceil(duration / 60) if duration else 0,
        is_active=True,
        created_by=ctx.user_id,
    )
    db.add(playlist)
    await db.flush()

    video = None
    if video_id:
        video = Video(
            playlist_id=playlist.id,
            youtube_video_id=video_id,
            title=metadata["title"],
            description=metadata.get("description"),
            thumbnail_url=metadata.get("thumbnail"),
            duration=duration or None,
            order_index=0,
            is_active=True,
        )
        db.add(video)

    await db.commit()
    await db.refresh(playlist)

    logger.info("Imported %s as playlist %s", url, playlist.id)
    return playlist, video


async def generate_quiz_for_video(
    video_id: uuid.UUID,
    request: GenerateQuizRequest,
    db: AsyncSession,
    generator: Optional[QuizGenerator] = None,
) -> Quiz:
    """
    Generate and store a quiz for a video.

    Args:
        video_id: Video to write the quiz for.
        request: Difficulty, subject and topic hints.
        db: Database session.
        generator: Quiz generator; defaults to the configured one.

    Returns:
        The stored Quiz.
    """
    video = await get_video(video_id, db)
    context = GenerationContext(
        video_title=video.title,
        video_description=video.description or "",
        difficulty=request.difficulty,
        subject=request.subject,
        topic=request.topic,
    )
    draft = (generator or get_quiz_generator()).generate(context)

    quiz = Quiz(
        video_id=video.id,
        title=draft.title,
        description=f"Generated {request.difficulty} assessment",
        questions=draft.questions,
        passing_score=draft.passing_score,
        is_active=True,
    )
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)

    return quiz


async def get_admin_stats(db: AsyncSession) -> AdminStats:
    """Platform-wide counts."""

    async def count(model) -> int:
        result = await db.execute(select(func.count()).select_from(model))
        return result.scalar_one() or 0

    return AdminStats(
        total_playlists=await count(Playlist),
        total_videos=await count(Video),
        total_users=await count(User),
        total_enrollments=await count(PlaylistEnrollment),
    )


# ============== Guest Mode ==============

def score_guest_quiz(
    submission: GuestQuizSubmission,
    now: datetime,
) -> GuestQuizResult:
    """
    Score a generated quiz for an anonymous learner.

    Nothing is stored. A passing score comes back with a temporary credential.

    Raises:
        HTTPException: 400 if the submission carries no usable questions.
    """
    questions = parse_questions(submission.questions)
    if not questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quiz has no questions",
        )

    graded = score_answers(questions, submission.answers)
    threshold = resolve_passing_score(submission.passing_score, settings.DEFAULT_PASSING_SCORE)
    passed = is_passing(graded.score, threshold)

    credential = None
    if passed:
        credential = build_guest_credential(
            video_title=submission.video_title,
            score=graded.score,
            passing_score=threshold,
            issued_at=now,
        )

    return GuestQuizResult(
        score=graded.score,
        passed=passed,
        correct_count=graded.correct_count,
        total_questions=graded.total_questions,
        passing_score=threshold,
        credential=credential,
    )
