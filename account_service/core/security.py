"""
Password hashing for stored credentials.
"""
from typing import Optional

import anyio
from passlib.context import CryptContext
import structlog

logger = structlog.get_logger()


class PasswordHasher:
    """Salted one-way hashing of passwords with a fixed bcrypt cost."""
    
    def __init__(self, rounds: int = 12):
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
    
    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh random salt."""
        return self._context.hash(plaintext)
    
    def verify(self, plaintext: str, hashed: Optional[str]) -> bool:
        """
        Check a password against a stored hash.
        
        Args:
            plaintext: Candidate password
            hashed: Stored hash, possibly missing or malformed
        
        Returns:
            True only if ``plaintext`` produced ``hashed``
        """
        if not hashed or plaintext is None:
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False
    
    async def hash_async(self, plaintext: str) -> str:
        """Hash in a worker thread; bcrypt is CPU-bound."""
        return await anyio.to_thread.run_sync(self.hash, plaintext)
    
    async def verify_async(self, plaintext: str, hashed: Optional[str]) -> bool:
        """Verify in a worker thread."""
        return await anyio.to_thread.run_sync(self.verify, plaintext, hashed)
