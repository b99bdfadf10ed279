"""Registration, login and logout endpoints."""

from fastapi import APIRouter, Response, status

from fundfinder.config import get_settings
from fundfinder.core.auth import session_auth
from fundfinder.deps import DbSession
from fundfinder.models.user import User
from fundfinder.schemas.account import LoginRequest, RegisterRequest, TokenResponse
from fundfinder.services.accounts import account_service

router = APIRouter()
settings = get_settings()


def _start_session(response: Response, user: User) -> TokenResponse:
    token = session_auth.create_token(user.id)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )
    return TokenResponse(access_token=token, user_id=user.id)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, response: Response, db: DbSession) -> TokenResponse:
    """Create a free account and start a session."""
    user = await account_service.register(db, body.name, body.email, body.password)
    return _start_session(response, user)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, response: Response, db: DbSession) -> TokenResponse:
    user = await account_service.authenticate(db, body.email, body.password)
    return _start_session(response, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)
