"""Error taxonomy rendered as flat ``{"error": ...}`` JSON bodies."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fundfinder.services.rate_gate import RateDecision


class FundFinderError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class NotAuthenticated(FundFinderError):
    """No valid session was presented."""

    status_code = 401
    default_message = "Please login to continue"


class InvalidInputError(FundFinderError):
    """Request is missing required fields or carries invalid values."""

    status_code = 400
    default_message = "Missing required fields"


class ForbiddenError(FundFinderError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(FundFinderError):
    status_code = 404
    default_message = "Not found"


class ConflictError(FundFinderError):
    status_code = 409
    default_message = "Already exists"


class RateLimitExceeded(FundFinderError):
    """Free daily search quota is used up."""

    status_code = 429

    def __init__(self, decision: "RateDecision") -> None:
        self.decision = decision
        super().__init__(
            f"Daily search limit reached ({decision.daily_count}/{decision.limit}). "
            "Upgrade to Pro for unlimited searches."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "dailyCount": self.decision.daily_count,
            "limit": self.decision.limit,
        }


class UpstreamError(FundFinderError):
    """The AI collaborator failed or returned unusable content."""

    status_code = 500
    default_message = "AI search failed"

    def __init__(self, message: str | None = None, diagnostic: Any = None) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.diagnostic is not None:
            body["diagnostic"] = self.diagnostic
        return body


class UserNotFound(FundFinderError):
    """An authenticated id does not resolve to a user row.

    This is an internal-consistency failure, so clients only see the
    generic message.
    """

    status_code = 500

    def __init__(self, user_id: Any) -> None:
        self.user_id = user_id
        super().__init__()


class PaymentError(FundFinderError):
    """Checkout could not be created or verified."""

    status_code = 400
    default_message = "Payment could not be processed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
