"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import Field

from mediahub.schemas.user import CamelModel


class LoginRequest(CamelModel):
    # No length policy here: a short password is simply a wrong one.
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class MessageResponse(CamelModel):
    message: str
