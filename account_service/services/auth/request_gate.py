"""
Bearer-token gate in front of every protected account operation.
"""

from typing import Optional
import structlog

from ..exceptions import UnauthenticatedError
from .token_service import InvalidTokenError, TokenService

logger = structlog.get_logger()


class RequestGate:
    """Resolve an ``Authorization`` header value to a user id."""
    
    def __init__(self, token_service: TokenService):
        self.token_service = token_service
    
    def authenticate(self, header: Optional[str]) -> str:
        """
        Authenticate a raw header of the form ``"<scheme> <token>"``.
        
        The scheme is not checked. Everything after the first space is the
        token.
        
        Raises:
            UnauthenticatedError: Missing header, no token, or token rejected
        """
        if not header:
            raise UnauthenticatedError()
        
        _, separator, token = header.partition(" ")
        if not separator or not token:
            raise UnauthenticatedError()
        
        try:
            return self.token_service.verify(token)
        except InvalidTokenError as e:
            raise UnauthenticatedError() from e
