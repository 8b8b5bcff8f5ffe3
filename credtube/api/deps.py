"""
API Dependencies

Reusable dependencies for API routes including authentication and the
per-request context handed to services.
"""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.core.config import settings
from credtube.core.context import RequestContext
from credtube.core.database import get_db
from credtube.core.security import decode_access_token
from credtube.models.enums import AppRole
from credtube.models.user import User


# OAuth2 scheme for token extraction from Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency to get the current authenticated user.

    This dependency:
    1. Extracts the JWT token from the Authorization header
    2. Decodes and validates the token
    3. Fetches the user from the database
    4. Raises 401 if token is invalid or user not found

    Args:
        token: JWT token from Authorization header (auto-extracted).
        db: Database session (auto-injected).

    Returns:
        User: The authenticated user object.

    Raises:
        HTTPException: 401 if authentication fails.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise credentials_exception

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


async def get_request_context(
    current_user: Annotated[User, Depends(get_current_user)],
) -> RequestContext:
    """
    Build the request context for the authenticated caller.

    Links in issued credentials are built against PUBLIC_BASE_URL.
    """
    return RequestContext(
        user=current_user,
        base_url=settings.public_base_url,
        roles=frozenset(r.role for r in current_user.roles),
    )


async def require_admin(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> RequestContext:
    """
    Dependency that only lets admins through.

    Raises:
        HTTPException: 403 if the caller lacks the admin role.
    """
    if not ctx.has_role(AppRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return ctx
