"""
Learning Token Model

Stored credential: the JSON document plus the row metadata shown and exported
alongside it.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base, JSONType
from credtube.models.enums import CredentialStatus, enum_values

if TYPE_CHECKING:
    from credtube.models.playlist import Playlist
    from credtube.models.user import User
    from credtube.models.video import Video


class LearningToken(Base):
    """
    Learning token (credential) minted on a passing quiz submission.

    Rows are never deduplicated and never updated by the quiz workflow.

    Attributes:
        credential_json: The versioned credential document.
        credential_hash: Placeholder integrity string, NOT a content hash.
        issuer_did / subject_did: Identifier strings copied out of the document.
        status: pending / issued / verified / revoked.
        verification_url: Public link built from the integrity string.
    """

    __tablename__ = "learning_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
    )
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    credential_json: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
    )
    credential_hash: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    issuer_did: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    subject_did: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    status: Mapped[CredentialStatus] = mapped_column(
        Enum(CredentialStatus, name="credential_status", values_callable=enum_values),
        default=CredentialStatus.ISSUED,
        nullable=False,
    )
    verification_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    revoked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="learning_tokens",
    )
    video: Mapped["Video"] = relationship("Video", lazy="selectin")
    playlist: Mapped["Playlist"] = relationship("Playlist", lazy="selectin")

    def __repr__(self) -> str:
        return f"<LearningToken(id={self.id}, user_id={self.user_id}, status={self.status})>"
