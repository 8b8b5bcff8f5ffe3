"""
Authentication Routes

Handles user signup and login.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.core.database import get_db
from credtube.core.security import create_access_token, hash_password, verify_password
from credtube.models.enums import AppRole
from credtube.models.user import User, UserRole
from credtube.schemas.token import Token
from credtube.schemas.user import UserCreate, UserResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user account",
)
async def signup(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Create a new learner account.

    **Flow:**
    1. Check if email already exists in database
    2. Hash the password using bcrypt
    3. Create the user with the default "user" role

    Raises:
        HTTPException: 400 if email already exists.
    """
    email = user_data.email.lower()
    result = await db.execute(
        select(User).where(User.email == email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    new_user = User(
        email=email,
        name=user_data.name,
        password_hash=hash_password(user_data.password),
        auth_provider="email",
        roles=[UserRole(role=AppRole.USER)],
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("New account %s", new_user.id)
    return UserResponse.from_user(new_user)


@router.post(
    "/login",
    response_model=Token,
    summary="Login and get access token",
)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """
    Authenticate user and return JWT access token.

    Note: Uses OAuth2PasswordRequestForm for compatibility with
    Swagger UI's built-in authorization feature.

    Args:
        form_data: OAuth2 form with username (email) and password.
        db: Database session.

    Returns:
        Token: JWT access token and token type.

    Raises:
        HTTPException: 401 if credentials are invalid.
    """
    result = await db.execute(
        select(User).where(User.email == form_data.username.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(subject=user.id)

    return Token(access_token=access_token, token_type="bearer")
