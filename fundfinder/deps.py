"""FastAPI dependencies."""

import logging
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.config import get_settings
from fundfinder.core.auth import session_auth
from fundfinder.core.errors import NotAuthenticated
from fundfinder.database import get_db
from fundfinder.models.user import User
from fundfinder.services.accounts import account_service

logger = logging.getLogger(__name__)


def _extract_token(request: Request, authorization: str | None) -> str | None:
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()
        return None
    return request.cookies.get(get_settings().session_cookie_name)


async def get_current_user_id(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> UUID | None:
    """Resolve the session to a user id, or None when there is no valid session."""
    token = _extract_token(request, authorization)
    if not token:
        return None

    try:
        return session_auth.verify_token(token)
    except jwt.InvalidTokenError as e:
        logger.info("Rejected session token: %s", e)
        return None


async def require_user_id(
    user_id: Annotated[UUID | None, Depends(get_current_user_id)],
) -> UUID:
    if user_id is None:
        raise NotAuthenticated()
    return user_id


async def get_current_user(
    user_id: Annotated[UUID, Depends(require_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Load the authenticated user."""
    return await account_service.get_user(db, user_id)


# Type aliases for dependency injection
OptionalUserId = Annotated[UUID | None, Depends(get_current_user_id)]
UserId = Annotated[UUID, Depends(require_user_id)]
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
