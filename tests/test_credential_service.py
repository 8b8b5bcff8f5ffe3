"""
Credential Service Unit Tests

Tests for document construction, the placeholder integrity string,
export, legacy upgrade and share links.
"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

import pytest

from credtube.schemas.credential import CURRENT_SCHEMA_VERSION
from credtube.services.credential_service import (
    CREDENTIAL_CONTEXT,
    ISSUER_DID,
    CredentialSchemaError,
    build_credential_document,
    build_guest_credential,
    build_share_links,
    export_credential,
    format_timestamp,
    generate_credential_hash,
    read_credential_document,
    verify_credential_hash,
)


FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _document(user, video, playlist, score=85, passing_score=70):
    return build_credential_document(
        user=user,
        video=video,
        playlist=playlist,
        quiz_title="Python Decorators Quiz",
        score=score,
        passing_score=passing_score,
        question_count=4,
        base_url="https://credtube.test/",
        issued_at=FIXED_NOW,
    )


class TestFormatTimestamp:

    def test_millisecond_precision_with_z(self):
        moment = datetime(2026, 1, 15, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2026-01-15T12:00:00.123Z"

    def test_converts_to_utc(self):
        moment = datetime(2026, 1, 15, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2026-01-15T12:00:00.000Z"


class TestBuildCredentialDocument:
    """Tests for build_credential_document."""

    def test_top_level_fields(self, sample_user, sample_video, sample_playlist):
        doc = _document(sample_user, sample_video, sample_playlist).to_json()

        assert doc["schemaVersion"] == CURRENT_SCHEMA_VERSION
        assert doc["@context"] == CREDENTIAL_CONTEXT
        assert doc["type"] == ["VerifiableCredential", "OpenBadgeCredential", "LearningCredential"]
        assert doc["id"].startswith("urn:uuid:")
        assert doc["issuer"]["id"] == ISSUER_DID
        assert doc["issuanceDate"] == "2026-01-15T12:00:00.000Z"

    def test_expires_after_365_days(self, sample_user, sample_video, sample_playlist):
        doc = _document(sample_user, sample_video, sample_playlist).to_json()

        assert doc["expirationDate"] == format_timestamp(FIXED_NOW + timedelta(days=365))

    def test_subject_and_achievement(self, sample_user, sample_video, sample_playlist):
        doc = _document(sample_user, sample_video, sample_playlist).to_json()
        subject = doc["credentialSubject"]
        achievement = subject["hasCredential"]

        assert subject["id"] == f"did:credtube:user:{sample_user.id}"
        assert subject["name"] == "Ada Lovelace"
        assert subject["email"] == "ada@example.com"
        assert achievement["name"] == "Completion of Python Decorators Tutorial"
        assert achievement["course"] == "Complete Python Course"
        assert achievement["video"]["url"] == "https://youtube.com/watch?v=dQw4w9WgXcQ"
        assert achievement["assessment"]["score"] == 85
        assert achievement["assessment"]["passingScore"] == 70
        assert achievement["assessment"]["questions"] == 4
        assert len(achievement["learningOutcomes"]) == 4
        assert achievement["skillsAcquired"][0] == "Complete Python Course Knowledge"

    def test_status_and_proof_placeholders(self, sample_user, sample_video, sample_playlist):
        doc = _document(sample_user, sample_video, sample_playlist).to_json()

        assert doc["credentialStatus"]["type"] == "RevocationList2020Status"
        assert doc["credentialStatus"]["id"].startswith("https://credtube.test/credentials/status/")
        assert doc["proof"]["type"] == "Ed25519Signature2020"
        assert doc["proof"]["verificationMethod"] == f"{ISSUER_DID}#key-1"
        assert "proofValue" not in doc["proof"]

    def test_name_falls_back_to_email_local_part(self, sample_user, sample_video, sample_playlist):
        sample_user.name = None

        doc = _document(sample_user, sample_video, sample_playlist).to_json()

        assert doc["credentialSubject"]["name"] == "ada"

    def test_course_fallback_without_playlist(self, sample_user, sample_video):
        doc = _document(sample_user, sample_video, None).to_json()
        achievement = doc["credentialSubject"]["hasCredential"]

        assert achievement["course"] == "Individual Video Learning"
        assert achievement["skillsAcquired"][0] == "Video Content Mastery"

    def test_each_document_gets_a_fresh_id(self, sample_user, sample_video, sample_playlist):
        first = _document(sample_user, sample_video, sample_playlist)
        second = _document(sample_user, sample_video, sample_playlist)

        assert first.id != second.id


class TestIntegrityString:
    """Tests for the placeholder hash and its verification."""

    def test_format(self):
        user_id = uuid.uuid4()

        value = generate_credential_hash(user_id, 85, FIXED_NOW)

        epoch_ms = int(FIXED_NOW.timestamp() * 1000)
        assert re.fullmatch(rf"hash_{epoch_ms}_{user_id}_85_[a-z0-9]{{9}}", value)

    def test_verifies_for_owner(self, sample_token):
        assert verify_credential_hash(sample_token) is True

    def test_fails_when_owner_id_absent(self, sample_token):
        sample_token.credential_hash = "hash_1_someone-else_90_abcdefghi"

        assert verify_credential_hash(sample_token) is False

    def test_forged_string_containing_owner_id_passes(self, sample_token):
        # Substring check only: any string embedding the id is accepted
        sample_token.credential_hash = f"forged-{sample_token.user_id}"

        assert verify_credential_hash(sample_token) is True


class TestExport:
    """Tests for export_credential."""

    def test_contains_document_and_metadata(self, sample_token):
        downloaded_at = FIXED_NOW + timedelta(days=1)

        exported = export_credential(sample_token, downloaded_at)

        for key, value in sample_token.credential_json.items():
            assert exported[key] == value
        assert exported["tokenId"] == str(sample_token.id)
        assert exported["credentialHash"] == sample_token.credential_hash
        assert exported["issuerDID"] == ISSUER_DID
        assert exported["subjectDID"] == sample_token.subject_did
        assert exported["status"] == "issued"
        assert exported["issuedAt"] == format_timestamp(FIXED_NOW)
        assert exported["verificationUrl"] == sample_token.verification_url
        assert exported["downloadedAt"] == format_timestamp(downloaded_at)

    def test_exported_document_reads_back(self, sample_token):
        exported = export_credential(sample_token, FIXED_NOW)

        document = read_credential_document(exported)

        assert document.to_json()["credentialSubject"] == sample_token.credential_json["credentialSubject"]


class TestReadCredentialDocument:
    """Tests for schema version handling."""

    def test_current_version(self, sample_token):
        document = read_credential_document(sample_token.credential_json)

        assert document.schema_version == CURRENT_SCHEMA_VERSION

    def test_legacy_document_is_upgraded(self, sample_token):
        legacy = dict(sample_token.credential_json)
        legacy.pop("schemaVersion")

        document = read_credential_document(legacy)

        assert document.schema_version == CURRENT_SCHEMA_VERSION
        assert document.to_json()["schemaVersion"] == CURRENT_SCHEMA_VERSION

    def test_unknown_version_is_rejected(self, sample_token):
        future = {**sample_token.credential_json, "schemaVersion": 99}

        with pytest.raises(CredentialSchemaError):
            read_credential_document(future)

    def test_malformed_document_is_rejected(self):
        with pytest.raises(CredentialSchemaError):
            read_credential_document({"type": ["VerifiableCredential"]})


class TestShareLinks:
    """Tests for build_share_links."""

    def test_links_carry_text_and_url(self, sample_token):
        links = build_share_links(sample_token, "https://credtube.test")

        assert links.verification_url == sample_token.verification_url
        assert "Python Decorators Tutorial" in links.share_text
        assert "75%" in links.share_text
        assert links.twitter.startswith("https://twitter.com/intent/tweet?text=")
        assert unquote(links.twitter.split("&url=")[1]) == sample_token.verification_url
        assert links.linkedin.startswith("https://www.linkedin.com/sharing/share-offsite/?url=")

    def test_falls_back_to_built_verification_url(self, sample_token):
        sample_token.verification_url = None

        links = build_share_links(sample_token, "https://credtube.test/")

        assert links.verification_url == (
            f"https://credtube.test/verify/{sample_token.credential_hash}"
        )


class TestGuestCredential:

    def test_temporary_shape(self):
        credential = build_guest_credential(
            video_title="Intro to Graphs",
            score=80,
            passing_score=70,
            issued_at=FIXED_NOW,
        )

        epoch_ms = int(FIXED_NOW.timestamp() * 1000)
        assert credential["type"] == ["VerifiableCredential", "TemporaryLearningCredential"]
        assert credential["credentialSubject"]["id"] == f"did:credtube:guest:{epoch_ms}"
        assert credential["credentialStatus"]["type"] == "TemporaryCredential"
        assert credential["credentialSubject"]["hasCredential"]["assessment"]["score"] == 80
