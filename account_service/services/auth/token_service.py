"""
Token service focused solely on JWT identity tokens.
Tokens are stateless: nothing is stored server-side, so a token stays valid
until it expires.
"""

from typing import Callable, Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
import structlog

from ..exceptions import UnauthorizedError

logger = structlog.get_logger()


class InvalidTokenError(UnauthorizedError):
    """Token is malformed, wrongly signed, expired, or missing its id claim."""
    
    default_message = "Invalid or expired token"


class TokenService:
    """Service responsible for issuing and verifying identity tokens."""
    
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))
    
    def issue(self, user_id: str) -> str:
        """
        Create a signed token for a user.
        
        Args:
            user_id: Store identifier of the authenticated user
        
        Returns:
            Encoded JWT with ``id``, ``iat`` and ``exp`` claims
        """
        issued_at = self._clock()
        claims = {
            "id": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        logger.debug("Access token issued", user_id=user_id)
        return token
    
    def verify(self, token: str) -> str:
        """
        Check signature and expiry and return the embedded user id.
        
        Raises:
            InvalidTokenError: For every kind of bad token
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("Access token rejected", error=str(e))
            raise InvalidTokenError() from e
        
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return user_id
