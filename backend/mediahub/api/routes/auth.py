"""User authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from mediahub.core.config import Settings
from mediahub.core.dependencies import (
    get_app_settings,
    get_auth_service,
    get_session_id,
    get_session_signer,
    require_authenticated,
)
from mediahub.core.security import SessionSigner
from mediahub.models.user import User
from mediahub.schemas.auth import LoginRequest, MessageResponse
from mediahub.schemas.user import UserCreate, UserRead
from mediahub.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def set_session_cookie(response: Response, settings: Settings, signer: SessionSigner, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=signer.dumps(session_id),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.session_ttl_seconds,
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
    signer: SessionSigner = Depends(get_session_signer),
) -> UserRead:
    result = await auth.register(payload)
    set_session_cookie(response, settings, signer, result.session_id)
    return result.user


@router.post("/login", response_model=UserRead)
async def login(
    payload: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
    signer: SessionSigner = Depends(get_session_signer),
) -> UserRead:
    result = await auth.login(payload.username, payload.password)
    set_session_cookie(response, settings, signer, result.session_id)
    return result.user


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
    session_id: str | None = Depends(get_session_id),
) -> MessageResponse:
    await auth.logout(session_id)
    response.delete_cookie(settings.session_cookie_name, httponly=True, samesite="lax", secure=settings.cookie_secure)
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserRead)
async def current_user(user: User = Depends(require_authenticated)) -> UserRead:
    return UserRead.model_validate(user)
