"""
Pydantic schemas for request/response validation.
"""

from .user_schemas import (
    AuthenticationRequest,
    DeleteAccountRequest,
    ErrorResponse,
    ProfileResponse,
    RegistrationRequest,
    TokenResponse,
)

__all__ = [
    "AuthenticationRequest",
    "DeleteAccountRequest",
    "ErrorResponse",
    "ProfileResponse",
    "RegistrationRequest",
    "TokenResponse",
]
