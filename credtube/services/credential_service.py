"""
Credential Service

Builds learning-token documents and the values derived from them: the
placeholder integrity string, the cosmetic verification check, JSON export,
and share links.

The integrity string is NOT a hash of the document. It is assembled from the
issue time, the user id, the score and a short random suffix, and the
"verification" only checks that the user id occurs inside it. Anyone can forge
a passing string. Real deployments need a content hash over canonical JSON
and an actual signature before calling these credentials verifiable.
"""

import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

from pydantic import ValidationError

from credtube.schemas.credential import (
    CURRENT_SCHEMA_VERSION,
    Achievement,
    Assessment,
    CredentialDocument,
    CredentialStatusEntry,
    CredentialSubject,
    Evidence,
    Issuer,
    Proof,
    ShareLinks,
    VideoReference,
)

if TYPE_CHECKING:
    from credtube.models.learning_token import LearningToken
    from credtube.models.playlist import Playlist
    from credtube.models.user import User
    from credtube.models.video import Video


# ============== Fixed Document Parts ==============

CREDENTIAL_CONTEXT = [
    "https://www.w3.org/2018/credentials/v1",
    "https://purl.imsglobal.org/spec/ob/v3p0/context.json",
    "https://lfdt.org/v1/context.json",
]

CREDENTIAL_TYPES = ["VerifiableCredential", "OpenBadgeCredential", "LearningCredential"]

ISSUER_DID = "did:web:credtube.app"

ISSUER = Issuer(
    id=ISSUER_DID,
    name="CredTube Learning Platform",
    url="https://credtube.app",
    description="Learning platform that turns YouTube content into shareable learning credentials",
)

VERIFICATION_METHOD = f"{ISSUER_DID}#key-1"

HASH_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
HASH_SUFFIX_LENGTH = 9


class CredentialSchemaError(ValueError):
    """Stored credential JSON does not match any known schema version."""


# ============== Helpers ==============

def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def subject_did_for(user_id: Any) -> str:
    return f"did:credtube:user:{user_id}"


def generate_credential_hash(user_id: Any, score: int, issued_at: datetime) -> str:
    """
    Placeholder integrity string: hash_<epoch ms>_<user id>_<score>_<random>.

    Not derived from the document contents; provides no tamper evidence.
    """
    epoch_ms = int(issued_at.timestamp() * 1000)
    suffix = "".join(secrets.choice(HASH_SUFFIX_ALPHABET) for _ in range(HASH_SUFFIX_LENGTH))
    return f"hash_{epoch_ms}_{user_id}_{score}_{suffix}"


def verification_url_for(base_url: str, credential_hash: str) -> str:
    return f"{base_url.rstrip('/')}/verify/{credential_hash}"


# ============== Document Construction ==============

def build_credential_document(
    *,
    user: "User",
    video: "Video",
    playlist: Optional["Playlist"],
    quiz_title: Optional[str],
    score: int,
    passing_score: int,
    question_count: int,
    base_url: str,
    issued_at: datetime,
    validity_days: int = 365,
) -> CredentialDocument:
    """
    Assemble the credential document for a passing quiz submission.

    Args:
        user: Learner the credential is issued to.
        video: Video whose quiz was passed.
        playlist: Course the video belongs to, if loaded.
        quiz_title: Title of the passed quiz.
        score: Percentage achieved.
        passing_score: Threshold that applied.
        question_count: Number of graded questions.
        base_url: Public origin for the credential status link.
        issued_at: Issuance time; expiration is validity_days later.

    Returns:
        CredentialDocument tagged with the current schema version.
    """
    now = format_timestamp(issued_at)
    expires = format_timestamp(issued_at + timedelta(days=validity_days))
    video_title = video.title
    playlist_title = playlist.title if playlist is not None else None

    achievement = Achievement(
        name=f"Completion of {video_title}",
        description=(
            f'Successfully completed learning assessment for "{video_title}" '
            f"with {score}% score"
        ),
        course=playlist_title or "Individual Video Learning",
        video=VideoReference(
            title=video_title,
            id=video.youtube_video_id,
            url=f"https://youtube.com/watch?v={video.youtube_video_id}",
            duration=video.duration,
        ),
        assessment=Assessment(
            title=quiz_title,
            score=score,
            passing_score=passing_score,
            questions=question_count,
            completed_at=now,
        ),
        learning_outcomes=[
            f"Demonstrated understanding of {video_title} content",
            f"Achieved {score}% on comprehensive assessment",
            f"Completed {question_count} evaluation questions",
            "Earned verified learning credential",
        ],
        skills_acquired=[
            f"{playlist_title} Knowledge" if playlist_title else "Video Content Mastery",
            "Self-directed Learning",
            "Knowledge Assessment Completion",
            "Digital Learning Engagement",
        ],
    )

    return CredentialDocument(
        schema_version=CURRENT_SCHEMA_VERSION,
        context=list(CREDENTIAL_CONTEXT),
        type=list(CREDENTIAL_TYPES),
        id=f"urn:uuid:{uuid.uuid4()}",
        issuer=ISSUER.model_copy(),
        issuance_date=now,
        expiration_date=expires,
        credential_subject=CredentialSubject(
            id=subject_did_for(user.id),
            name=user.display_name,
            email=user.email,
            has_credential=achievement,
        ),
        evidence=[
            Evidence(
                narrative=(
                    f'Learner completed video "{video_title}" and successfully passed '
                    f"the assessment with a score of {score}%."
                ),
                name="Video Learning and Assessment Completion",
                description="Evidence of successful video learning and knowledge assessment",
            )
        ],
        credential_status=CredentialStatusEntry(
            id=f"{base_url.rstrip('/')}/credentials/status/{uuid.uuid4()}",
        ),
        proof=Proof(
            created=now,
            verification_method=VERIFICATION_METHOD,
        ),
    )


def build_guest_credential(
    *,
    video_title: str,
    score: int,
    passing_score: int,
    issued_at: datetime,
) -> Dict[str, Any]:
    """
    Temporary credential for an anonymous learner. Never persisted.
    """
    now = format_timestamp(issued_at)
    epoch_ms = int(issued_at.timestamp() * 1000)
    return {
        "@context": CREDENTIAL_CONTEXT[:2],
        "type": ["VerifiableCredential", "TemporaryLearningCredential"],
        "id": f"urn:uuid:temp-{epoch_ms}",
        "issuer": {
            "id": ISSUER_DID,
            "name": "CredTube Learning Platform (Guest Mode)",
            "description": "Temporary credential from free trial",
        },
        "issuanceDate": now,
        "credentialSubject": {
            "id": f"did:credtube:guest:{epoch_ms}",
            "type": ["Learner", "Person"],
            "name": "Guest Learner",
            "hasCredential": {
                "type": "VideoLearningCredential",
                "name": f"Completion of {video_title}",
                "description": (
                    f'Successfully completed learning assessment for "{video_title}" '
                    f"with {score}% score"
                ),
                "video": {"title": video_title, "platform": "YouTube via CredTube"},
                "assessment": {
                    "type": "Generated Quiz",
                    "score": score,
                    "passingScore": passing_score,
                    "completedAt": now,
                },
            },
        },
        "credentialStatus": {
            "type": "TemporaryCredential",
            "note": "This is a temporary credential. Sign up for permanent credentials.",
        },
    }


# ============== Reading Stored Documents ==============

def read_credential_document(data: Dict[str, Any]) -> CredentialDocument:
    """
    Parse stored credential JSON, upgrading legacy rows.

    Rows written before versioning carry no schemaVersion; their layout is
    identical to version 1, so they are tagged and parsed as such.

    Raises:
        CredentialSchemaError: Unknown version or malformed document.
    """
    version = data.get("schemaVersion")
    if version is None:
        data = {**data, "schemaVersion": CURRENT_SCHEMA_VERSION}
    elif version != CURRENT_SCHEMA_VERSION:
        raise CredentialSchemaError(f"Unsupported credential schema version: {version}")

    try:
        return CredentialDocument.model_validate(data)
    except ValidationError as e:
        raise CredentialSchemaError(str(e)) from e


# ============== Viewer / Exporter ==============

def verify_credential_hash(token: "LearningToken") -> bool:
    """
    Cosmetic check: True iff the owner's id is a substring of the stored
    integrity string. Says nothing about whether the document was altered.
    """
    return str(token.user_id) in token.credential_hash


def export_credential(token: "LearningToken", downloaded_at: datetime) -> Dict[str, Any]:
    """
    Downloadable JSON: the stored document merged with the row metadata.
    """
    document = token.credential_json if isinstance(token.credential_json, dict) else {}
    return {
        **document,
        "tokenId": str(token.id),
        "credentialHash": token.credential_hash,
        "issuerDID": token.issuer_did,
        "subjectDID": token.subject_did,
        "status": token.status.value if token.status is not None else None,
        "issuedAt": format_timestamp(token.issued_at) if token.issued_at else None,
        "verificationUrl": token.verification_url,
        "downloadedAt": format_timestamp(downloaded_at),
    }


def _encode_component(value: str) -> str:
    # Same reserved set as JavaScript's encodeURIComponent
    return quote(value, safe="!*'()")


def build_share_links(token: "LearningToken", base_url: str) -> ShareLinks:
    """Verification link plus Twitter/LinkedIn share intents for a token."""
    document = token.credential_json if isinstance(token.credential_json, dict) else {}
    achievement = document.get("credentialSubject", {}).get("hasCredential", {})

    video_title = (
        achievement.get("video", {}).get("title")
        or (token.video.title if token.video is not None else None)
        or "Video Learning"
    )
    score = achievement.get("assessment", {}).get("score", "High")
    course = (
        achievement.get("course")
        or (token.playlist.title if token.playlist is not None else None)
        or "Self-Learning"
    )

    text = (
        f'🎓 I just earned a learning credential for completing "{video_title}" '
        f"with {score}% score in {course}! "
        "#LearningCredentials #VerifiableEducation #CredTube"
    )
    url = token.verification_url or verification_url_for(base_url, token.credential_hash)

    return ShareLinks(
        verification_url=url,
        share_text=text,
        twitter=(
            "https://twitter.com/intent/tweet"
            f"?text={_encode_component(text)}&url={_encode_component(url)}"
        ),
        linkedin=(
            "https://www.linkedin.com/sharing/share-offsite/"
            f"?url={_encode_component(url)}&summary={_encode_component(text)}"
        ),
    )
