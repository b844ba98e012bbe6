"""
Repository implementations for data access operations.
"""

from .in_memory_user_repository import InMemoryUserRepository
from .user_repository import UserRepository

__all__ = ["InMemoryUserRepository", "UserRepository"]
