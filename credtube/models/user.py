"""
User Models

Learner accounts and the role assignments that gate admin features.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credtube.core.database import Base
from credtube.models.enums import AppRole, enum_values

if TYPE_CHECKING:
    from credtube.models.enrollment import PlaylistEnrollment
    from credtube.models.learning_token import LearningToken


class User(Base):
    """
    User model.

    Attributes:
        id: UUID primary key, also embedded in learner DIDs.
        email: Unique email address, indexed for fast lookups.
        name: Display name (optional; credentials fall back to the email).
        did: Optional decentralized identifier supplied by the user.
        avatar_url: Profile picture URL.
        auth_provider: How the account was created ("email").
        password_hash: bcrypt hash.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    did: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )
    auth_provider: Mapped[str] = mapped_column(
        String(50),
        default="email",
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    roles: Mapped[list["UserRole"]] = relationship(
        "UserRole",
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    enrollments: Mapped[list["PlaylistEnrollment"]] = relationship(
        "PlaylistEnrollment",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    learning_tokens: Mapped[list["LearningToken"]] = relationship(
        "LearningToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def display_name(self) -> str:
        """Name shown on credentials."""
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return "Anonymous Learner"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class UserRole(Base):
    """Role assignment; a user may hold several roles."""

    __tablename__ = "user_roles"

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[AppRole] = mapped_column(
        Enum(AppRole, name="app_role", values_callable=enum_values),
        default=AppRole.USER,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="roles",
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role={self.role})>"
