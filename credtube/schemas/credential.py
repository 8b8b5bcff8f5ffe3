"""
Credential Schemas

Versioned shape of the JSON credential document stored in
learning_tokens.credential_json, plus API response models for tokens.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from credtube.models.enums import CredentialStatus


CURRENT_SCHEMA_VERSION = 1


class DocumentModel(BaseModel):
    """Base for credential document parts: camelCase aliases, unknown keys kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ============== Credential Document ==============

class Issuer(DocumentModel):
    id: str
    type: str = "Issuer"
    name: str
    url: str
    description: str


class VideoReference(DocumentModel):
    title: Optional[str] = None
    id: Optional[str] = None
    url: Optional[str] = None
    duration: Optional[int] = None


class Assessment(DocumentModel):
    type: str = "Quiz"
    title: Optional[str] = None
    score: int
    passing_score: int = Field(alias="passingScore")
    questions: Optional[int] = None
    completed_at: str = Field(alias="completedAt")


class Achievement(DocumentModel):
    type: str = "VideoLearningCredential"
    name: str
    description: str
    course: Optional[str] = None
    video: VideoReference
    assessment: Assessment
    learning_outcomes: List[str] = Field(default_factory=list, alias="learningOutcomes")
    skills_acquired: List[str] = Field(default_factory=list, alias="skillsAcquired")


class CredentialSubject(DocumentModel):
    id: str
    type: List[str] = Field(default_factory=lambda: ["Learner", "Person"])
    name: str
    email: Optional[str] = None
    has_credential: Achievement = Field(alias="hasCredential")


class Evidence(DocumentModel):
    type: str = "LearningEvidence"
    narrative: str
    name: str
    description: str
    genre: str = "Performance"
    audience: str = "Professional"


class CredentialStatusEntry(DocumentModel):
    id: Optional[str] = None
    type: str = "RevocationList2020Status"
    note: Optional[str] = None


class Proof(DocumentModel):
    """Structural placeholder: carries no signature value."""
    type: str = "Ed25519Signature2020"
    created: str
    verification_method: str = Field(alias="verificationMethod")
    proof_purpose: str = Field(default="assertionMethod", alias="proofPurpose")


class CredentialDocument(DocumentModel):
    """The credential document, tagged with its schema version."""

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION, alias="schemaVersion")
    context: List[str] = Field(alias="@context")
    type: List[str]
    id: str
    issuer: Issuer
    issuance_date: str = Field(alias="issuanceDate")
    expiration_date: Optional[str] = Field(default=None, alias="expirationDate")
    credential_subject: CredentialSubject = Field(alias="credentialSubject")
    evidence: List[Evidence] = Field(default_factory=list)
    credential_status: Optional[CredentialStatusEntry] = Field(
        default=None, alias="credentialStatus"
    )
    proof: Optional[Proof] = None

    def to_json(self) -> Dict[str, Any]:
        """Plain JSON-compatible dict, keyed exactly as stored and exported."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# ============== API Responses ==============

class VideoSummary(BaseModel):
    id: uuid.UUID
    title: str
    youtube_video_id: str
    duration: Optional[int] = None

    model_config = {"from_attributes": True}


class PlaylistSummary(BaseModel):
    id: uuid.UUID
    title: str
    thumbnail_url: Optional[str] = None

    model_config = {"from_attributes": True}


class LearningTokenResponse(BaseModel):
    """A stored token with its referenced video and playlist."""

    id: uuid.UUID
    user_id: uuid.UUID
    video_id: uuid.UUID
    playlist_id: uuid.UUID
    credential_json: Dict[str, Any]
    credential_hash: str
    issuer_did: str
    subject_did: str
    status: CredentialStatus
    verification_url: Optional[str] = None
    issued_at: datetime
    expires_at: Optional[datetime] = None
    video: Optional[VideoSummary] = None
    playlist: Optional[PlaylistSummary] = None

    model_config = {"from_attributes": True}


class VerificationResult(BaseModel):
    """
    Outcome of the hash check.

    The check only tests that the owner's id appears in the stored integrity
    string. It is not a cryptographic verification.
    """

    token_id: uuid.UUID
    verified: bool
    method: str = "substring"
    message: str


class ShareLinks(BaseModel):
    verification_url: str
    share_text: str
    twitter: str
    linkedin: str


class PublicCredentialView(BaseModel):
    """What a verification link reveals about a token."""

    token_id: uuid.UUID
    status: CredentialStatus
    issued_at: datetime
    expires_at: Optional[datetime] = None
    subject_did: str
    issuer_did: str
    credential_json: Dict[str, Any]
