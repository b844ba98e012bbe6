"""
Database models for the account service.
"""

from .base import Base, TimestampMixin
from .user import User, UserRecord, generate_user_id

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserRecord",
    "generate_user_id",
]
