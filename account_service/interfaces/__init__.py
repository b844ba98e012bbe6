"""
Interface definitions for dependency abstractions.
"""

from .repository_interface import IUserRepository

__all__ = [
    "IUserRepository",
]
