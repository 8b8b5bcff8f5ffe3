"""
API Endpoint Tests

FastAPI TestClient tests with authentication and database dependencies
overridden and services patched.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from credtube.api.deps import get_request_context
from credtube.core.database import get_db
from credtube.core.security import create_access_token, decode_access_token, hash_password
from credtube.main import app
from credtube.schemas.course import AdminStats
from credtube.schemas.progress import QuizResult


@pytest.fixture
def client(mock_async_session):
    """Test client with the database replaced by a mock session."""

    async def override_get_db():
        yield mock_async_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_learner(ctx):
    app.dependency_overrides[get_request_context] = lambda: ctx
    return ctx


@pytest.fixture
def as_admin(admin_ctx):
    app.dependency_overrides[get_request_context] = lambda: admin_ctx
    return admin_ctx


class TestHealth:

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestFetchYouTubeData:
    """Tests for POST /api/v1/functions/fetch-youtube-data."""

    def test_missing_url_is_400(self, client: TestClient):
        response = client.post("/api/v1/functions/fetch-youtube-data", json={})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "YouTube URL is required"}

    def test_invalid_url_is_400(self, client: TestClient):
        response = client.post(
            "/api/v1/functions/fetch-youtube-data",
            json={"url": "https://example.com/watch"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid YouTube URL format"

    def test_valid_url(self, client: TestClient):
        with patch("credtube.services.youtube_service.settings") as mock_settings:
            mock_settings.YOUTUBE_API_KEY = ""
            response = client.post(
                "/api/v1/functions/fetch-youtube-data",
                json={"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["extractedIds"]["videoId"] == "dQw4w9WgXcQ"
        assert body["video"]["duration"] == 600


class TestGenerateAssignment:
    """Tests for POST /api/v1/functions/generate-assignment."""

    def test_missing_title_is_400(self, client: TestClient):
        response = client.post(
            "/api/v1/functions/generate-assignment",
            json={"videoDescription": "no title"},
        )

        assert response.status_code == 400

    def test_generates_assignment(self, client: TestClient):
        response = client.post(
            "/api/v1/functions/generate-assignment",
            json={"videoTitle": "JavaScript Closures", "videoDescription": "", "guestMode": True},
        )

        assert response.status_code == 200
        assignment = response.json()["assignment"]
        assert assignment["quiz"]["questions"][-1]["type"] == "coding"
        assert len(assignment["reflection"]["questions"]) == 5


class TestGuestQuiz:

    def test_passing_guest_gets_temporary_credential(self, client: TestClient, sample_questions):
        response = client.post(
            "/api/v1/functions/guest-quiz",
            json={
                "videoTitle": "Python Decorators",
                "questions": sample_questions,
                "answers": {"0": 0, "1": 1, "2": 2, "3": 3},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 100
        assert body["passed"] is True
        assert body["credential"]["credentialStatus"]["type"] == "TemporaryCredential"

    def test_failing_guest_gets_no_credential(self, client: TestClient, sample_questions):
        response = client.post(
            "/api/v1/functions/guest-quiz",
            json={"videoTitle": "Python Decorators", "questions": sample_questions, "answers": {}},
        )

        assert response.status_code == 200
        assert response.json()["passed"] is False
        assert response.json()["credential"] is None

    def test_empty_quiz_is_400(self, client: TestClient):
        response = client.post(
            "/api/v1/functions/guest-quiz",
            json={"videoTitle": "Nothing", "questions": [], "answers": {}},
        )

        assert response.status_code == 400


class TestAuth:
    """Tests for signup, login and bearer-token resolution."""

    def test_tokens_require_bearer_token(self, client: TestClient):
        response = client.get("/api/v1/tokens")

        assert response.status_code == 401

    def test_signup_duplicate_email(self, client: TestClient, mock_async_session, make_result, sample_user):
        mock_async_session.execute.return_value = make_result(sample_user)

        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "Ada@Example.com", "password": "long-enough-pw", "name": "Ada"},
        )

        assert response.status_code == 400
        mock_async_session.add.assert_not_called()

    def test_login_returns_bearer_token(self, client: TestClient, mock_async_session, make_result, sample_user):
        sample_user.password_hash = hash_password("long-enough-pw")
        mock_async_session.execute.return_value = make_result(sample_user)

        response = client.post(
            "/api/v1/auth/login",
            data={"username": "ada@example.com", "password": "long-enough-pw"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert decode_access_token(body["access_token"])["sub"] == str(sample_user.id)

    def test_login_wrong_password(self, client: TestClient, mock_async_session, make_result, sample_user):
        sample_user.password_hash = hash_password("long-enough-pw")
        mock_async_session.execute.return_value = make_result(sample_user)

        response = client.post(
            "/api/v1/auth/login",
            data={"username": "ada@example.com", "password": "guess"},
        )

        assert response.status_code == 401

    def test_me_with_bearer_token(self, client: TestClient, mock_async_session, make_result, sample_user):
        mock_async_session.execute.return_value = make_result(sample_user)
        token = create_access_token(subject=sample_user.id)

        response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == sample_user.email

    def test_unknown_user_is_401(self, client: TestClient, mock_async_session, make_result):
        mock_async_session.execute.return_value = make_result(None)
        token = create_access_token(subject=uuid.uuid4())

        response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestQuizSubmit:

    def test_submit_returns_result(self, client: TestClient, as_learner, sample_video):
        result = QuizResult(
            video_id=sample_video.id,
            score=75,
            passed=True,
            correct_count=3,
            total_questions=4,
            passing_score=70,
            message="Congratulations!",
            token_id=uuid.uuid4(),
        )
        with patch(
            "credtube.services.progress_service.submit_quiz",
            new=AsyncMock(return_value=result),
        ) as submit:
            response = client.post(
                "/api/v1/progress/quiz/submit",
                json={"video_id": str(sample_video.id), "answers": {"0": 0, "2": 1}},
            )

        assert response.status_code == 200
        assert response.json()["score"] == 75
        answers = submit.await_args.args[2]
        assert answers == {0: 0, 2: 1}

    def test_bad_answer_payload_is_422(self, client: TestClient, as_learner, sample_video):
        response = client.post(
            "/api/v1/progress/quiz/submit",
            json={"video_id": str(sample_video.id), "answers": {"first": "A"}},
        )

        assert response.status_code == 422


class TestTokens:

    def test_export_is_json_attachment(self, client: TestClient, as_learner, sample_token):
        with patch(
            "credtube.services.token_service.get_user_token",
            new=AsyncMock(return_value=sample_token),
        ):
            response = client.get(f"/api/v1/tokens/{sample_token.id}/export")

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            f'attachment; filename="credential-{sample_token.id}.json"'
        )
        body = response.json()
        assert body["tokenId"] == str(sample_token.id)
        assert body["credentialSubject"] == sample_token.credential_json["credentialSubject"]

    def test_verify_reports_substring_method(self, client: TestClient, as_learner, sample_token):
        with patch(
            "credtube.services.token_service.get_user_token",
            new=AsyncMock(return_value=sample_token),
        ):
            response = client.post(f"/api/v1/tokens/{sample_token.id}/verify")

        assert response.status_code == 200
        assert response.json()["verified"] is True
        assert response.json()["method"] == "substring"

    def test_public_verification_page(self, client: TestClient, sample_token):
        with patch(
            "credtube.services.token_service.lookup_by_hash",
            new=AsyncMock(return_value=sample_token),
        ):
            response = client.get(f"/api/v1/verify/{sample_token.credential_hash}")

        assert response.status_code == 200
        assert response.json()["credential_json"]["schemaVersion"] == 1


class TestAdmin:

    def test_learner_is_forbidden(self, client: TestClient, as_learner):
        response = client.get("/api/v1/admin/stats")

        assert response.status_code == 403

    def test_admin_stats(self, client: TestClient, as_admin):
        stats = AdminStats(total_playlists=2, total_videos=5, total_users=3, total_enrollments=4)
        with patch(
            "credtube.services.course_service.get_admin_stats",
            new=AsyncMock(return_value=stats),
        ):
            response = client.get("/api/v1/admin/stats")

        assert response.status_code == 200
        assert response.json()["total_videos"] == 5

    def test_reconcile_tokens(self, client: TestClient, as_admin):
        with patch(
            "credtube.services.token_service.reconcile_token_flags",
            new=AsyncMock(return_value=2),
        ):
            response = client.post("/api/v1/admin/reconcile-tokens")

        assert response.status_code == 200
        assert response.json() == {"repaired": 2}

    def test_quiz_validation(self, client: TestClient, as_admin, sample_video):
        response = client.post(
            "/api/v1/admin/quizzes",
            json={
                "video_id": str(sample_video.id),
                "title": "Broken",
                "questions": [{"question": "Pick one", "options": ["a", "b"], "correct": 5}],
            },
        )

        assert response.status_code == 422
