"""Admin authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from mediahub.api.routes.auth import set_session_cookie
from mediahub.core.config import Settings
from mediahub.core.dependencies import get_app_settings, get_auth_service, get_session_signer, require_admin
from mediahub.core.security import SessionSigner
from mediahub.models.user import User
from mediahub.schemas.auth import LoginRequest
from mediahub.schemas.user import UserRead
from mediahub.services.auth import AuthService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=UserRead)
async def admin_login(
    payload: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
    signer: SessionSigner = Depends(get_session_signer),
) -> UserRead:
    result = await auth.admin_login(payload.username, payload.password)
    set_session_cookie(response, settings, signer, result.session_id)
    return result.user


@router.get("/user", response_model=UserRead)
async def current_admin(admin: User = Depends(require_admin)) -> UserRead:
    return UserRead.model_validate(admin)
