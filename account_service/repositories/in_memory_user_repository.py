"""
In-memory user store for tests and local runs.
"""

import asyncio
from typing import Any, Dict, List, Optional

import structlog

from ..interfaces.repository_interface import IUserRepository
from ..models.user import User, generate_user_id
from ..services.exceptions import ConflictError

logger = structlog.get_logger()


class InMemoryUserRepository(IUserRepository):
    """Dict-backed store; a single lock serializes every mutation."""
    
    def __init__(self):
        self._users: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()
    
    async def create(
        self,
        username: str,
        password_hash: str,
        name: Optional[str] = None,
        profile: Optional[Dict[str, Any]] = None
    ) -> User:
        async with self._lock:
            if any(doc["username"] == username for doc in self._users.values()):
                raise ConflictError()
            
            user_id = generate_user_id()
            self._users[user_id] = {
                "id": user_id,
                "username": username,
                "name": name,
                "password_hash": password_hash,
                "profile": dict(profile or {}),
            }
            logger.debug("User stored in memory", user_id=user_id)
            return self._to_user(self._users[user_id])
    
    async def get_by_id(self, user_id: str) -> Optional[User]:
        doc = self._users.get(user_id)
        return self._to_user(doc) if doc else None
    
    async def get_by_username(self, username: str) -> Optional[User]:
        for doc in self._users.values():
            if doc["username"] == username:
                return self._to_user(doc)
        return None
    
    async def get_all(self) -> List[User]:
        return [self._to_user(doc) for doc in self._users.values()]
    
    async def update(self, user_id: str, update_data: Dict[str, Any]) -> bool:
        changes = dict(update_data)
        async with self._lock:
            doc = self._users.get(user_id)
            if doc is None:
                return False
            if "name" in changes:
                doc["name"] = changes.pop("name")
            doc["profile"] = {**doc["profile"], **changes}
            return True
    
    async def update_password(self, user_id: str, password_hash: str) -> bool:
        async with self._lock:
            doc = self._users.get(user_id)
            if doc is None:
                return False
            doc["password_hash"] = password_hash
            return True
    
    async def delete(self, user_id: str) -> bool:
        async with self._lock:
            return self._users.pop(user_id, None) is not None
    
    async def ping(self) -> bool:
        return True
    
    @staticmethod
    def _to_user(doc: Dict[str, Any]) -> User:
        return User(
            id=doc["id"],
            username=doc["username"],
            name=doc["name"],
            password_hash=doc["password_hash"],
            profile=dict(doc["profile"]),
        )
