"""
Token Service

Persistence side of learning tokens: minting on a passing quiz, listing and
lookup for the viewer, and repair of progress rows whose token_issued flag
missed its update.
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import and_, exists, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.core.config import settings
from credtube.core.context import RequestContext
from credtube.models.enums import CredentialStatus
from credtube.models.learning_token import LearningToken
from credtube.models.quiz import Quiz
from credtube.models.user_progress import UserProgress
from credtube.models.video import Video
from credtube.services.credential_service import (
    ISSUER_DID,
    build_credential_document,
    generate_credential_hash,
    subject_did_for,
    verification_url_for,
)


logger = logging.getLogger(__name__)


CREDENTIAL_ISSUANCE_FAILED_MESSAGE = (
    "Your quiz was completed but the token couldn't be issued. Please contact support."
)


class CredentialIssuanceError(Exception):
    """The learning token row could not be written."""


# ============== Issuance ==============

async def issue_learning_token(
    ctx: RequestContext,
    video: Video,
    quiz: Quiz,
    score: int,
    passing_score: int,
    question_count: int,
    db: AsyncSession,
) -> uuid.UUID:
    """
    Mint a learning token for a passing submission.

    The token insert and the progress flag update are two separate commits.
    If the flag update fails the token still stands and the flag is left for
    reconcile_token_flags().

    Args:
        ctx: Request context (learner, public origin, clock).
        video: Video whose quiz was passed, with its playlist loaded.
        quiz: The quiz that was passed.
        score: Percentage achieved.
        passing_score: Threshold that applied.
        question_count: Number of graded questions.
        db: Database session.

    Returns:
        ID of the persisted LearningToken. The row itself is not returned;
        a failed flag update rolls back the session and expires it.

    Raises:
        CredentialIssuanceError: If the token row could not be stored.
    """
    user_id = ctx.user_id
    video_id = video.id
    token_id = uuid.uuid4()
    issued_at = ctx.now()
    document = build_credential_document(
        user=ctx.user,
        video=video,
        playlist=video.playlist,
        quiz_title=quiz.title,
        score=score,
        passing_score=passing_score,
        question_count=question_count,
        base_url=ctx.base_url,
        issued_at=issued_at,
        validity_days=settings.CREDENTIAL_VALIDITY_DAYS,
    )
    credential_hash = generate_credential_hash(user_id, score, issued_at)

    token = LearningToken(
        id=token_id,
        user_id=user_id,
        video_id=video_id,
        playlist_id=video.playlist_id,
        credential_json=document.to_json(),
        credential_hash=credential_hash,
        issuer_did=ISSUER_DID,
        subject_did=subject_did_for(user_id),
        status=CredentialStatus.ISSUED,
        verification_url=verification_url_for(ctx.base_url, credential_hash),
        issued_at=issued_at,
        expires_at=issued_at + timedelta(days=settings.CREDENTIAL_VALIDITY_DAYS),
    )

    try:
        db.add(token)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(
            "Failed to store learning token for user %s, video %s", user_id, video_id
        )
        raise CredentialIssuanceError(str(e)) from e

    logger.info(
        "Issued learning token %s to user %s for video %s (score %s)",
        token_id,
        user_id,
        video_id,
        score,
    )

    try:
        await mark_token_issued(user_id, video_id, db)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Token %s stored but token_issued flag not set for user %s, video %s",
            token_id,
            user_id,
            video_id,
        )

    return token_id


async def mark_token_issued(
    user_id: uuid.UUID,
    video_id: uuid.UUID,
    db: AsyncSession,
) -> None:
    """Set token_issued on the (user, video) progress row."""
    await db.execute(
        update(UserProgress)
        .where(
            UserProgress.user_id == user_id,
            UserProgress.video_id == video_id,
        )
        .values(token_issued=True)
    )
    await db.commit()


async def reconcile_token_flags(db: AsyncSession) -> int:
    """
    Set token_issued on every progress row that has a token but no flag.

    Returns:
        Number of progress rows repaired.
    """
    has_token = exists().where(
        and_(
            LearningToken.user_id == UserProgress.user_id,
            LearningToken.video_id == UserProgress.video_id,
        )
    )
    result = await db.execute(
        update(UserProgress)
        .where(UserProgress.token_issued.is_(False), has_token)
        .values(token_issued=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    repaired = result.rowcount or 0
    if repaired:
        logger.warning("Reconciled token_issued flag on %d progress rows", repaired)
    return repaired


# ============== Viewer ==============

async def list_user_tokens(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> list[LearningToken]:
    """All of a user's tokens, newest first, with video and playlist loaded."""
    result = await db.execute(
        select(LearningToken)
        .where(LearningToken.user_id == user_id)
        .order_by(LearningToken.issued_at.desc())
    )
    return list(result.scalars().all())


async def get_user_token(
    user_id: uuid.UUID,
    token_id: uuid.UUID,
    db: AsyncSession,
) -> LearningToken:
    """
    Get one of a user's tokens.

    Raises:
        HTTPException: 404 if the token does not exist or belongs to someone else.
    """
    result = await db.execute(
        select(LearningToken).where(
            LearningToken.id == token_id,
            LearningToken.user_id == user_id,
        )
    )
    token = result.scalar_one_or_none()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Learning token not found",
        )

    return token


async def lookup_by_hash(
    credential_hash: str,
    db: AsyncSession,
) -> LearningToken:
    """
    Resolve a verification link to its token.

    Raises:
        HTTPException: 404 if no token carries this integrity string.
    """
    result = await db.execute(
        select(LearningToken).where(LearningToken.credential_hash == credential_hash)
    )
    token: Optional[LearningToken] = result.scalars().first()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Credential not found",
        )

    return token
