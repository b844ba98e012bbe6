"""Error categories raised by the account core.

Routers translate ``category`` into a status code; the ``message`` of each
error is safe to show to clients and never carries driver output.
"""


class AccountError(Exception):
    """Base class for all account-service failures."""

    category = "ERROR"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(AccountError):
    """Raised when a username is already registered."""

    category = "CONFLICT"
    default_message = "There is already a user with the same username"


class UnauthorizedError(AccountError):
    """Raised for bad credentials or a bad, missing, or expired token."""

    category = "UNAUTHORIZED"
    default_message = "User or password incorrect"


class UnauthenticatedError(UnauthorizedError):
    """Raised by the request gate when no valid bearer token is presented."""

    category = "UNAUTHENTICATED"
    default_message = "Invalid or missing token"


class NotFoundError(AccountError):
    """Raised when an authenticated identity no longer exists."""

    category = "NOT_FOUND"
    default_message = "User not found"


class InvalidRequestError(AccountError):
    """Raised when a request is missing required fields or is malformed."""

    category = "INVALID"
    default_message = "Invalid request"


class StoreUnavailableError(AccountError):
    """Raised when the user store fails; never retried."""

    category = "STORE_UNAVAILABLE"
    default_message = "User store unavailable"
