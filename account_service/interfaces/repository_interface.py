"""
Repository interfaces for dependency abstraction.
Defines the contract of the user store so the account service can run
against SQL storage or an in-memory substitute.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ..models.user import User


@runtime_checkable
class IUserRepository(Protocol):
    """Protocol for user store operations.
    
    Implementations must enforce username uniqueness themselves and raise
    ``ConflictError`` on a duplicate; infrastructure failures surface as
    ``StoreUnavailableError``.
    """
    
    async def create(
        self,
        username: str,
        password_hash: str,
        name: Optional[str] = None,
        profile: Optional[Dict[str, Any]] = None
    ) -> User:
        """
        Create a new user.
        
        Args:
            username: Unique username
            password_hash: Already hashed password
            name: Display name
            profile: Additional profile fields
            
        Returns:
            Created user with its store-assigned id
        """
        ...
    
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.
        
        Returns:
            User instance or None if not found
        """
        ...
    
    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.
        
        Returns:
            User instance or None if not found
        """
        ...
    
    async def get_all(self) -> List[User]:
        """Return every stored user."""
        ...
    
    async def update(self, user_id: str, update_data: Dict[str, Any]) -> bool:
        """
        Merge fields into a user record.
        
        ``name`` replaces the display name; every other key is merged into the
        profile document. Keys not present in ``update_data`` are untouched.
        
        Returns:
            True if the user existed
        """
        ...
    
    async def update_password(self, user_id: str, password_hash: str) -> bool:
        """
        Replace only the stored password hash.
        
        Returns:
            True if the user existed
        """
        ...
    
    async def delete(self, user_id: str) -> bool:
        """
        Permanently delete a user.
        
        Returns:
            True if a record was removed
        """
        ...
    
    async def ping(self) -> bool:
        """Return True if the store is reachable."""
        ...
