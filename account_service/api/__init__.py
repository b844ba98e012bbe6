"""
HTTP routing layer for the account service.
"""

from .users import router as users_router

__all__ = ["users_router"]
