"""
Business logic services for the account service.
"""

from .account_service import AccountService
from .exceptions import (
    AccountError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
)

__all__ = [
    "AccountService",
    "AccountError",
    "ConflictError",
    "InvalidRequestError",
    "NotFoundError",
    "StoreUnavailableError",
    "UnauthenticatedError",
    "UnauthorizedError",
]
