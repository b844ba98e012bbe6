"""
Token issuance and the request gate built on it.
"""

from .request_gate import RequestGate
from .token_service import InvalidTokenError, TokenService

__all__ = [
    "InvalidTokenError",
    "RequestGate",
    "TokenService",
]
