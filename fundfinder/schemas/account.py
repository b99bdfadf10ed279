"""Account and session schemas."""

from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field

from fundfinder.schemas.lead import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)


class TokenResponse(CamelModel):
    """Session token issued at registration or login."""

    access_token: str
    token_type: str = "bearer"
    user_id: UUID


class AccountStatus(CamelModel):
    """Account fields plus remaining daily searches."""

    id: UUID
    name: str
    email: str
    subscription_status: str
    daily_search_limit: int | None
    daily_searches_left: int | Literal["unlimited"]
