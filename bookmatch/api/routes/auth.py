"""Registration, login and profile routes."""

from fastapi import APIRouter, Depends, status

from bookmatch.api.deps import get_auth_service
from bookmatch.api.middleware.auth import get_current_user
from bookmatch.api.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    UserResponse,
)
from bookmatch.domain.models import User
from bookmatch.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await service.register(data)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    user, token = await service.login(data)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/profile", response_model=ProfileResponse)
async def profile(user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse(user=UserResponse.model_validate(user))
