"""Test data factories for account service testing."""

from .user_factory import ProfileFieldsFactory, RegistrationPayloadFactory

__all__ = [
    "ProfileFieldsFactory",
    "RegistrationPayloadFactory",
]
