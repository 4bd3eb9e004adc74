"""Authentication and user lifecycle service."""

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.api.middleware.auth import create_access_token, hash_password, verify_password
from bookmatch.api.schemas import LoginRequest, RegisterRequest
from bookmatch.config import Settings
from bookmatch.domain.models import User


class AuthService:
    """Handles user registration, authentication, and profile retrieval."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    async def register(self, data: RegisterRequest) -> User:
        """Register a new user. Raises 400 on blank fields, 409 if the email exists."""
        email = data.email.strip().lower()
        name = data.name.strip()
        if not email or not data.password or not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please provide email, password, and name",
            )

        existing = await self._session.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User already exists",
            )

        user = User(name=name, email=email, hashed_password=hash_password(data.password))
        self._session.add(user)
        await self._session.commit()
        return user

    async def login(self, data: LoginRequest) -> tuple[User, str]:
        """Authenticate a user and return it with a JWT access token."""
        email = data.email.strip().lower()
        if not email or not data.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please provide email and password",
            )

        result = await self._session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user or not verify_password(data.password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        return user, create_access_token(user, self._settings)
