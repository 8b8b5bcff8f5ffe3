"""
Quiz Workflow Tests Against a Real Session

Runs submit_quiz on an in-memory SQLite database through aiosqlite, so that
store failures go through a real AsyncSession rollback (which expires every
loaded row) rather than a mock.
"""

import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from credtube.core.context import RequestContext
from credtube.core.database import Base
from credtube.models.enums import AppRole
from credtube.models.learning_token import LearningToken
from credtube.models.playlist import Playlist
from credtube.models.quiz import Quiz
from credtube.models.user import User
from credtube.models.user_progress import UserProgress
from credtube.models.video import Video
from credtube.services import progress_service, token_service
from credtube.services.token_service import CREDENTIAL_ISSUANCE_FAILED_MESSAGE


BASE_URL = "https://credtube.test"
FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

ALL_CORRECT = {0: 0, 1: 1, 2: 2, 3: 3}
ALL_WRONG = {0: 1, 1: 0, 2: 3, 3: 2}


@pytest_asyncio.fixture
async def db():
    """Session on a fresh in-memory database with every table created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded(db, sample_questions):
    """User, playlist, video and a four-question quiz with the default threshold."""
    user = User(
        id=uuid.uuid4(),
        email="ada@example.com",
        name="Ada Lovelace",
        password_hash="not-a-real-hash",
        auth_provider="email",
    )
    playlist = Playlist(id=uuid.uuid4(), youtube_playlist_id="PLtest", title="Complete Python Course")
    video = Video(
        id=uuid.uuid4(),
        playlist_id=playlist.id,
        youtube_video_id="dQw4w9WgXcQ",
        title="Python Decorators Tutorial",
        duration=600,
        order_index=0,
    )
    quiz = Quiz(
        id=uuid.uuid4(),
        video_id=video.id,
        title="Python Decorators Quiz",
        questions=sample_questions,
        passing_score=None,
    )
    db.add_all([user, playlist, video, quiz])
    await db.commit()
    db.expunge_all()

    # Load the learner the way get_current_user does
    result = await db.execute(select(User).where(User.id == user.id))
    learner = result.scalar_one()
    ctx = RequestContext(
        user=learner,
        base_url=BASE_URL,
        roles=frozenset({AppRole.USER}),
        clock=lambda: FIXED_NOW,
    )
    return {"ctx": ctx, "user_id": user.id, "video_id": video.id}


async def _progress_row(db: AsyncSession, user_id, video_id):
    result = await db.execute(
        select(
            UserProgress.quiz_score,
            UserProgress.quiz_attempts,
            UserProgress.is_quiz_completed,
            UserProgress.token_issued,
        ).where(UserProgress.user_id == user_id, UserProgress.video_id == video_id)
    )
    return result.one()


async def _token_ids(db: AsyncSession) -> list:
    result = await db.execute(select(LearningToken.id))
    return list(result.scalars().all())


class TestSubmitQuizScenarios:
    """End-to-end pass and fail submissions."""

    @pytest.mark.asyncio
    async def test_pass_mints_token_and_sets_flag(self, db, seeded):
        result = await progress_service.submit_quiz(
            seeded["ctx"], seeded["video_id"], ALL_CORRECT, db
        )

        assert result.score == 100
        assert result.passed is True
        assert result.progress_error is None
        assert result.credential_error is None
        assert await _token_ids(db) == [result.token_id]

        score, attempts, quiz_completed, token_issued = await _progress_row(
            db, seeded["user_id"], seeded["video_id"]
        )
        assert (score, attempts, quiz_completed, token_issued) == (100, 1, True, True)

    @pytest.mark.asyncio
    async def test_all_wrong_fails_without_token(self, db, seeded):
        result = await progress_service.submit_quiz(
            seeded["ctx"], seeded["video_id"], ALL_WRONG, db
        )

        assert result.score == 0
        assert result.passed is False
        assert result.passing_score == 70
        assert result.token_id is None
        assert await _token_ids(db) == []

        score, attempts, quiz_completed, token_issued = await _progress_row(
            db, seeded["user_id"], seeded["video_id"]
        )
        assert (score, attempts, quiz_completed, token_issued) == (0, 1, False, False)


class TestSubmitQuizStoreFailures:
    """A failed write is rolled back and reported on the result."""

    @pytest.mark.asyncio
    async def test_progress_write_failure_returns_score(self, db, seeded):
        await db.execute(text("DROP TABLE user_progress"))
        await db.commit()

        result = await progress_service.submit_quiz(
            seeded["ctx"], seeded["video_id"], ALL_CORRECT, db
        )

        assert result.score == 100
        assert result.passed is True
        assert result.progress_error == progress_service.PROGRESS_FAILED_MESSAGE
        assert result.credential_error is None
        assert result.token_id is None
        assert await _token_ids(db) == []

    @pytest.mark.asyncio
    async def test_token_insert_failure_reports_credential_error(self, db, seeded):
        await db.execute(text("DROP TABLE learning_tokens"))
        await db.commit()

        result = await progress_service.submit_quiz(
            seeded["ctx"], seeded["video_id"], ALL_CORRECT, db
        )

        assert result.score == 100
        assert result.passed is True
        assert result.progress_error is None
        assert result.credential_error == CREDENTIAL_ISSUANCE_FAILED_MESSAGE
        assert result.token_id is None

        score, attempts, quiz_completed, token_issued = await _progress_row(
            db, seeded["user_id"], seeded["video_id"]
        )
        assert (score, quiz_completed, token_issued) == (100, True, False)

    @pytest.mark.asyncio
    async def test_flag_failure_keeps_token_until_reconciled(self, db, seeded):
        await db.execute(
            text(
                "CREATE TRIGGER reject_token_flag BEFORE UPDATE OF token_issued ON user_progress "
                "WHEN NEW.token_issued = 1 "
                "BEGIN SELECT RAISE(ABORT, 'token flag write rejected'); END"
            )
        )
        await db.commit()

        result = await progress_service.submit_quiz(
            seeded["ctx"], seeded["video_id"], ALL_CORRECT, db
        )

        assert result.passed is True
        assert result.credential_error is None
        assert result.token_id is not None
        assert await _token_ids(db) == [result.token_id]
        *_, token_issued = await _progress_row(db, seeded["user_id"], seeded["video_id"])
        assert token_issued is False

        await db.execute(text("DROP TRIGGER reject_token_flag"))
        await db.commit()

        assert await token_service.reconcile_token_flags(db) == 1
        *_, token_issued = await _progress_row(db, seeded["user_id"], seeded["video_id"])
        assert token_issued is True
        count = await db.execute(select(func.count()).select_from(UserProgress))
        assert count.scalar_one() == 1
