"""Password hashing and signed session tokens."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from fundfinder.config import get_settings


class SessionAuth:
    """bcrypt password hashing and JWT session tokens."""

    BCRYPT_ROUNDS = 12

    def __init__(self) -> None:
        self.settings = get_settings()

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    def create_token(self, user_id: UUID) -> str:
        """Issue a session token for a user.

        Args:
            user_id: Id stored in the ``sub`` claim

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self.settings.access_token_expire_minutes),
        }
        return jwt.encode(
            claims,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm,
        )

    def verify_token(self, token: str) -> UUID:
        """Decode a session token and return the user id.

        Raises:
            jwt.InvalidTokenError: If the token is invalid, expired or has no usable subject
        """
        claims = jwt.decode(
            token,
            self.settings.jwt_secret_key,
            algorithms=[self.settings.jwt_algorithm],
        )
        try:
            return UUID(claims["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise jwt.InvalidTokenError("Invalid subject claim") from e


# Global instance
session_auth = SessionAuth()
