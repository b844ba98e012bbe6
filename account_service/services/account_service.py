"""
Account service orchestrating registration, authentication, and the
token-protected profile operations.
"""

from typing import Any, Dict, List, Mapping, Optional
import structlog

from ..core.security import PasswordHasher
from ..interfaces.repository_interface import IUserRepository
from ..models.user import User
from .auth.request_gate import RequestGate
from .auth.token_service import TokenService
from .exceptions import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)

logger = structlog.get_logger()

# Keys the generic profile merge may never write
PROTECTED_FIELDS = frozenset({"id", "_id", "username", "password", "oldPassword", "passwordHash", "password_hash"})


def _strip_protected(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}


class AccountService:
    """Service responsible for user account operations."""
    
    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        request_gate: Optional[RequestGate] = None
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.request_gate = request_gate or RequestGate(token_service)
    
    async def register(
        self,
        username: str,
        password: str,
        name: Optional[str] = None,
        profile_fields: Optional[Mapping[str, Any]] = None
    ) -> User:
        """
        Register a new user account.
        
        Args:
            username: Unique username
            password: Plaintext password; only its hash is stored
            name: Display name
            profile_fields: Arbitrary extra fields to keep on the profile
        
        Returns:
            Created user
        
        Raises:
            ConflictError: If the username is taken
            InvalidRequestError: If username or password is empty
        """
        if not username or not password:
            raise InvalidRequestError("username and password are required")
        
        if await self.user_repository.get_by_username(username) is not None:
            raise ConflictError()
        
        password_hash = await self.password_hasher.hash_async(password)
        
        profile = _strip_protected(profile_fields or {})
        profile.pop("name", None)
        
        # The store's uniqueness constraint still decides concurrent registrations
        user = await self.user_repository.create(
            username=username,
            password_hash=password_hash,
            name=name,
            profile=profile
        )
        
        logger.info("User registered", user_id=user.id)
        return user
    
    async def authenticate(self, username: str, password: str) -> str:
        """
        Verify credentials and issue a token.
        
        Unknown usernames and wrong passwords fail identically.
        
        Returns:
            Signed access token
        """
        user = await self.user_repository.get_by_username(username) if username else None
        if user is None:
            logger.info("Authentication failed", reason="unknown_user")
            raise UnauthorizedError()
        
        if not await self.password_hasher.verify_async(password, user.password_hash):
            logger.info("Authentication failed", reason="invalid_password", user_id=user.id)
            raise UnauthorizedError()
        
        logger.info("User authenticated successfully", user_id=user.id)
        return self.token_service.issue(user.id)
    
    async def get_profile(self, authorization: Optional[str]) -> Dict[str, Any]:
        """Return only ``name`` and ``username`` of the token's user."""
        user_id = self.request_gate.authenticate(authorization)
        
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError()
        
        return {"name": user.name, "username": user.username}
    
    async def update_profile(self, authorization: Optional[str], patch: Mapping[str, Any]) -> None:
        """
        Change the password or merge profile fields.
        
        When both ``oldPassword`` and ``password`` are given, this is a password
        change and nothing else in ``patch`` is applied. Otherwise the password
        keys are dropped and the remaining fields are merged.
        
        Raises:
            UnauthorizedError: Bad token, or wrong ``oldPassword``
            InvalidRequestError: A password or ``name`` that is not a string
            NotFoundError: The token's user no longer exists
        """
        user_id = self.request_gate.authenticate(authorization)

        old_password = patch.get("oldPassword")
        new_password = patch.get("password")
        for value in (old_password, new_password):
            if value is not None and not isinstance(value, str):
                raise InvalidRequestError("Passwords must be strings")

        if old_password and new_password:
            await self._change_password(user_id, old_password, new_password)
            return

        update_data = _strip_protected(patch)
        name = update_data.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidRequestError("Name must be a string")
        if not update_data:
            if await self.user_repository.get_by_id(user_id) is None:
                raise NotFoundError()
            return
        
        if not await self.user_repository.update(user_id, update_data):
            raise NotFoundError()
    
    async def delete(self, authorization: Optional[str], password: str) -> None:
        """Permanently remove the token's user after re-checking the password."""
        user_id = self.request_gate.authenticate(authorization)
        
        user = await self.user_repository.get_by_id(user_id)
        if user is None or not await self.password_hasher.verify_async(password, user.password_hash):
            raise UnauthorizedError()
        
        await self.user_repository.delete(user_id)
        logger.info("User deleted permanently", user_id=user_id)
    
    async def list_users(self) -> List[Dict[str, Any]]:
        """Public documents of every user; password hashes are left out."""
        users = await self.user_repository.get_all()
        return [user.to_public_dict() for user in users]
    
    async def _change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        user = await self.user_repository.get_by_id(user_id)
        if user is None or not await self.password_hasher.verify_async(old_password, user.password_hash):
            logger.info("Password change rejected", user_id=user_id)
            raise UnauthorizedError()
        
        password_hash = await self.password_hasher.hash_async(new_password)
        if not await self.user_repository.update_password(user_id, password_hash):
            raise NotFoundError()
        
        logger.info("Password changed successfully", user_id=user_id)
