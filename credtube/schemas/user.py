"""
User Schemas

Pydantic models for user request/response validation.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from credtube.models.enums import AppRole


class UserCreate(BaseModel):
    """Schema for creating a new user."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Display name")


class UserResponse(BaseModel):
    """Schema for user response (excludes password)."""

    id: uuid.UUID
    email: str
    name: Optional[str] = None
    did: Optional[str] = None
    avatar_url: Optional[str] = None
    roles: List[AppRole] = []
    created_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            did=user.did,
            avatar_url=user.avatar_url,
            roles=[r.role for r in user.roles],
            created_at=user.created_at,
        )


class UserUpdate(BaseModel):
    """Schema for updating user profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New display name")
    did: Optional[str] = Field(None, max_length=255, description="Decentralized identifier")
    avatar_url: Optional[str] = Field(None, max_length=512, description="Profile picture URL")
