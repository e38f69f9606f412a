"""Admin-only user management endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.dependencies import get_db, get_session_manager, require_admin
from mediahub.core.errors import NotFound, ValidationError
from mediahub.models.user import User
from mediahub.schemas.user import UserRead, UserUpdate
from mediahub.services import users as user_service
from mediahub.services.auth import hash_password
from mediahub.services.sessions import SessionManager

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserRead])
async def list_users(session: AsyncSession = Depends(get_db)) -> list[UserRead]:
    users = await user_service.list_users(session)
    return [UserRead.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, session: AsyncSession = Depends(get_db)) -> UserRead:
    user = await user_service.get_user(session, user_id)
    if not user:
        raise NotFound("User not found")
    return UserRead.model_validate(user)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(user_id: int, payload: UserUpdate, session: AsyncSession = Depends(get_db)) -> UserRead:
    changes = payload.model_dump(exclude_unset=True, exclude={"password"})
    # email and is_admin are required columns; an explicit null leaves them unchanged.
    for field in ("email", "is_admin"):
        if field in changes and changes[field] is None:
            del changes[field]
    if payload.password is not None:
        changes["password_hash"] = await hash_password(payload.password)

    user = await user_service.update_user(session, user_id, changes)
    if not user:
        raise NotFound("User not found")
    await session.commit()
    return UserRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    current_user: User = Depends(require_admin),
) -> Response:
    if user_id == current_user.id:
        raise ValidationError("Cannot delete yourself")

    if not await user_service.delete_user(session, user_id):
        raise NotFound("User not found")
    await sessions.destroy_for_user(session, user_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
