"""
Progress Service

Business logic for watch tracking, enrollments and the quiz workflow:
score a submission, record the attempt, and mint a learning token when the
score meets the quiz's threshold.
"""

import logging
import uuid
from typing import Mapping, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from credtube.core.config import settings
from credtube.core.context import RequestContext
from credtube.models.enrollment import PlaylistEnrollment
from credtube.models.learning_token import LearningToken
from credtube.models.playlist import Playlist
from credtube.models.quiz import Quiz
from credtube.models.user_progress import UserProgress
from credtube.models.video import Video
from credtube.schemas.progress import DashboardStats, QuizResult
from credtube.services.scoring import (
    is_passing,
    parse_questions,
    resolve_passing_score,
    round_percentage,
    score_answers,
)
from credtube.services.token_service import (
    CREDENTIAL_ISSUANCE_FAILED_MESSAGE,
    CredentialIssuanceError,
    issue_learning_token,
)


logger = logging.getLogger(__name__)


# Share of the duration after which a video counts as watched
COMPLETION_THRESHOLD = 0.9

PROGRESS_FAILED_MESSAGE = "Error submitting quiz. Please try again."


# ============== Lookups ==============

async def get_video(
    video_id: uuid.UUID,
    db: AsyncSession,
) -> Video:
    """
    Get a video by ID with its playlist loaded.

    Args:
        video_id: Video ID.
        db: Database session.

    Returns:
        Video object.

    Raises:
        HTTPException: 404 if video not found.
    """
    result = await db.execute(
        select(Video)
        .where(Video.id == video_id)
        .options(selectinload(Video.playlist))
    )
    video = result.scalar_one_or_none()

    if not video:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Video with ID {video_id} not found",
        )

    return video


async def get_active_quiz(
    video_id: uuid.UUID,
    db: AsyncSession,
) -> Optional[Quiz]:
    """Newest active quiz for a video, or None."""
    result = await db.execute(
        select(Quiz)
        .where(Quiz.video_id == video_id, Quiz.is_active.is_(True))
        .order_by(Quiz.created_at.desc())
        .limit(1)
    )
    return result.scalars().first()


async def get_or_create_progress(
    user_id: uuid.UUID,
    video: Video,
    db: AsyncSession,
) -> UserProgress:
    """
    Get the (user, video) progress row, creating it if missing.

    The new row is flushed, not committed.
    """
    result = await db.execute(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.video_id == video.id,
        )
    )
    progress = result.scalar_one_or_none()

    if progress:
        return progress

    progress = UserProgress(
        user_id=user_id,
        video_id=video.id,
        playlist_id=video.playlist_id,
        is_video_completed=False,
        video_watch_time=0,
        is_quiz_completed=False,
        quiz_attempts=0,
        token_issued=False,
    )
    db.add(progress)
    await db.flush()

    return progress


# ============== Enrollment ==============

async def get_or_create_enrollment(
    user_id: uuid.UUID,
    playlist_id: uuid.UUID,
    db: AsyncSession,
) -> PlaylistEnrollment:
    """
    Get existing enrollment or create a new one.

    Args:
        user_id: Learner ID.
        playlist_id: Playlist ID to enroll in.
        db: Database session.

    Returns:
        PlaylistEnrollment object (flushed, not committed).
    """
    result = await db.execute(
        select(PlaylistEnrollment).where(
            PlaylistEnrollment.user_id == user_id,
            PlaylistEnrollment.playlist_id == playlist_id,
        )
    )
    enrollment = result.scalar_one_or_none()

    if enrollment:
        return enrollment

    enrollment = PlaylistEnrollment(
        user_id=user_id,
        playlist_id=playlist_id,
        progress_percentage=0,
    )
    db.add(enrollment)
    await db.flush()

    return enrollment


async def enroll(
    ctx: RequestContext,
    playlist_id: uuid.UUID,
    db: AsyncSession,
) -> PlaylistEnrollment:
    """
    Enroll the caller in a playlist. Enrolling twice returns the same row.

    Raises:
        HTTPException: 404 if the playlist does not exist or is inactive.
    """
    result = await db.execute(
        select(Playlist).where(Playlist.id == playlist_id, Playlist.is_active.is_(True))
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Playlist with ID {playlist_id} not found",
        )

    enrollment = await get_or_create_enrollment(ctx.user_id, playlist_id, db)
    await db.commit()
    await db.refresh(enrollment)

    logger.info("User %s enrolled in playlist %s", ctx.user_id, playlist_id)
    return enrollment


async def playlist_progress_percentage(
    user_id: uuid.UUID,
    playlist_id: uuid.UUID,
    db: AsyncSession,
) -> int:
    """Completed videos over active videos in the playlist, as a percentage."""
    total_result = await db.execute(
        select(func.count())
        .select_from(Video)
        .where(Video.playlist_id == playlist_id, Video.is_active.is_(True))
    )
    total = total_result.scalar_one()
    if not total:
        return 0

    completed_result = await db.execute(
        select(func.count())
        .select_from(UserProgress)
        .join(Video, Video.id == UserProgress.video_id)
        .where(
            UserProgress.user_id == user_id,
            UserProgress.playlist_id == playlist_id,
            UserProgress.is_video_completed.is_(True),
            Video.is_active.is_(True),
        )
    )
    completed = completed_result.scalar_one()

    return min(100, round_percentage(completed, total))


async def list_enrollments(
    ctx: RequestContext,
    db: AsyncSession,
) -> list[PlaylistEnrollment]:
    """
    The caller's enrollments with progress_percentage recomputed.

    An enrollment reaching 100% gets its completed_at stamped once.
    """
    result = await db.execute(
        select(PlaylistEnrollment)
        .where(PlaylistEnrollment.user_id == ctx.user_id)
        .order_by(PlaylistEnrollment.enrolled_at.desc())
    )
    enrollments = list(result.scalars().all())

    for enrollment in enrollments:
        percentage = await playlist_progress_percentage(
            ctx.user_id, enrollment.playlist_id, db
        )
        enrollment.progress_percentage = percentage
        if percentage == 100 and enrollment.completed_at is None:
            enrollment.completed_at = ctx.now()

    if enrollments:
        await db.commit()

    return enrollments


# ============== Watch Tracking ==============

def _reached_completion(watch_time: int, duration: Optional[int]) -> bool:
    return bool(duration) and watch_time >= duration * COMPLETION_THRESHOLD


async def start_video(
    ctx: RequestContext,
    video_id: uuid.UUID,
    db: AsyncSession,
) -> UserProgress:
    """
    Start watching a video - creates enrollment and progress if needed.

    Args:
        ctx: Request context.
        video_id: Video ID to start.
        db: Database session.

    Returns:
        UserProgress object.
    """
    video = await get_video(video_id, db)

    await get_or_create_enrollment(ctx.user_id, video.playlist_id, db)
    progress = await get_or_create_progress(ctx.user_id, video, db)

    await db.commit()
    await db.refresh(progress)

    return progress


async def record_watch_time(
    ctx: RequestContext,
    video_id: uuid.UUID,
    seconds_watched: int,
    db: AsyncSession,
) -> UserProgress:
    """
    Heartbeat: store the total seconds watched.

    The stored value never decreases, so replaying a heartbeat is a no-op.
    The video is marked complete once the total reaches 90% of its duration.

    Args:
        ctx: Request context.
        video_id: Video ID being watched.
        seconds_watched: Total seconds watched so far.
        db: Database session.

    Returns:
        Updated UserProgress object.
    """
    video = await get_video(video_id, db)
    progress = await get_or_create_progress(ctx.user_id, video, db)

    progress.video_watch_time = max(progress.video_watch_time or 0, seconds_watched)

    if not progress.is_video_completed and _reached_completion(
        progress.video_watch_time, video.duration
    ):
        progress.is_video_completed = True
        logger.info("User %s finished watching video %s", ctx.user_id, video_id)

    await db.commit()
    await db.refresh(progress)

    return progress


async def complete_video(
    ctx: RequestContext,
    video_id: uuid.UUID,
    watch_time: int,
    db: AsyncSession,
) -> UserProgress:
    """
    Mark a video as watched.

    Args:
        ctx: Request context.
        video_id: Video ID to complete.
        watch_time: Cumulative seconds watched, as reported by the player.
            Stored as the larger of this and the recorded total, so a
            replayed completion leaves the row unchanged.
        db: Database session.

    Returns:
        Updated UserProgress object.
    """
    video = await get_video(video_id, db)
    progress = await get_or_create_progress(ctx.user_id, video, db)

    progress.is_video_completed = True
    progress.video_watch_time = max(progress.video_watch_time or 0, watch_time)

    await db.commit()
    await db.refresh(progress)

    return progress


# ============== Quiz Workflow ==============

async def record_quiz_attempt(
    ctx: RequestContext,
    video: Video,
    score: int,
    passed: bool,
    db: AsyncSession,
) -> UserProgress:
    """
    Upsert the attempt onto the (user, video) progress row and commit.

    Raises:
        SQLAlchemyError: If the write fails; the caller decides what to do.
    """
    progress = await get_or_create_progress(ctx.user_id, video, db)

    progress.is_quiz_completed = passed
    progress.quiz_score = score
    progress.quiz_attempts = (progress.quiz_attempts or 0) + 1
    if passed:
        progress.completed_at = ctx.now()

    await db.commit()
    return progress


def _result_message(score: int, passed: bool, threshold: int) -> str:
    if passed:
        return f"Congratulations! You scored {score}% and earned a verifiable learning token."
    return f"You scored {score}%. You need {threshold}% to pass."


async def submit_quiz(
    ctx: RequestContext,
    video_id: uuid.UUID,
    answers: Mapping[int, int],
    db: AsyncSession,
) -> QuizResult:
    """
    Submit and grade the active quiz for a video.

    Steps run in order with no shared transaction: score, record the attempt,
    then (only if passed and the attempt was recorded) issue a token. A
    failure in either write is reported on the result instead of raising,
    so the computed score always reaches the caller.

    Args:
        ctx: Request context.
        video_id: Video ID for the quiz.
        answers: Question index -> selected option index; may be partial.
        db: Database session.

    Returns:
        QuizResult with score, pass flag and any write errors.

    Raises:
        HTTPException: 404 if the video or its quiz is missing,
            400 if the quiz has no gradable questions.
    """
    video = await get_video(video_id, db)
    quiz = await get_active_quiz(video_id, db)

    if not quiz:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="This video does not have a quiz",
        )

    questions = parse_questions(quiz.questions)
    if not questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quiz has no questions",
        )

    video_id = video.id
    graded = score_answers(questions, answers)
    threshold = resolve_passing_score(quiz.passing_score, settings.DEFAULT_PASSING_SCORE)
    passed = is_passing(graded.score, threshold)

    result = QuizResult(
        video_id=video_id,
        score=graded.score,
        passed=passed,
        correct_count=graded.correct_count,
        total_questions=graded.total_questions,
        passing_score=threshold,
        message=_result_message(graded.score, passed, threshold),
    )

    try:
        await record_quiz_attempt(ctx, video, graded.score, passed, db)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Error submitting quiz for user %s, video %s", ctx.user_id, video_id
        )
        result.progress_error = PROGRESS_FAILED_MESSAGE
        return result

    if not passed:
        return result

    try:
        token_id = await issue_learning_token(
            ctx,
            video,
            quiz,
            graded.score,
            threshold,
            graded.total_questions,
            db,
        )
    except CredentialIssuanceError:
        result.credential_error = CREDENTIAL_ISSUANCE_FAILED_MESSAGE
        return result

    result.token_id = token_id
    return result


# ============== Dashboard ==============

async def _count(db: AsyncSession, statement) -> int:
    result = await db.execute(statement)
    return result.scalar_one() or 0


async def get_dashboard_stats(
    ctx: RequestContext,
    db: AsyncSession,
) -> DashboardStats:
    """Counts of watched videos, passed quizzes, tokens and enrollments."""
    user_id = ctx.user_id
    progress_count = select(func.count()).select_from(UserProgress).where(
        UserProgress.user_id == user_id
    )

    return DashboardStats(
        videos_completed=await _count(
            db, progress_count.where(UserProgress.is_video_completed.is_(True))
        ),
        quizzes_passed=await _count(
            db, progress_count.where(UserProgress.is_quiz_completed.is_(True))
        ),
        tokens_earned=await _count(
            db,
            select(func.count())
            .select_from(LearningToken)
            .where(LearningToken.user_id == user_id),
        ),
        enrolled_playlists=await _count(
            db,
            select(func.count())
            .select_from(PlaylistEnrollment)
            .where(PlaylistEnrollment.user_id == user_id),
        ),
    )
