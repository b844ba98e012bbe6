"""
User repository backed by async SQLAlchemy.
Each call runs in its own short transaction.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from ..core.database import DatabaseHealthCheck
from ..interfaces.repository_interface import IUserRepository
from ..models.user import User, UserRecord
from ..services.exceptions import ConflictError, StoreUnavailableError

logger = structlog.get_logger()


class UserRepository(IUserRepository):
    """Repository for user data access operations."""
    
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._health = DatabaseHealthCheck(session_factory)
    
    async def create(
        self,
        username: str,
        password_hash: str,
        name: Optional[str] = None,
        profile: Optional[Dict[str, Any]] = None
    ) -> User:
        """
        Insert a new user row.
        
        The unique index on ``username`` decides concurrent registrations of
        the same name; the loser gets ``ConflictError``.
        """
        record = UserRecord(
            username=username,
            name=name,
            password_hash=password_hash,
            profile=dict(profile or {})
        )
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    db.add(record)
        except IntegrityError as e:
            logger.info("User creation rejected by unique index")
            raise ConflictError() from e
        except SQLAlchemyError as e:
            logger.error("User creation failed", error=str(e))
            raise StoreUnavailableError() from e
        
        logger.info("User created successfully", user_id=record.id)
        return record.to_user()
    
    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self._get_one(select(UserRecord).where(UserRecord.id == user_id))
    
    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._get_one(select(UserRecord).where(UserRecord.username == username))
    
    async def get_all(self) -> List[User]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(UserRecord).order_by(UserRecord.created_at, UserRecord.id)
                )
                return [record.to_user() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Failed to list users", error=str(e))
            raise StoreUnavailableError() from e
    
    async def update(self, user_id: str, update_data: Dict[str, Any]) -> bool:
        """
        Merge ``update_data`` into the row inside one locked transaction.
        
        Args:
            user_id: User ID to update
            update_data: ``name`` and/or profile fields
            
        Returns:
            True if the user existed
        """
        changes = dict(update_data)
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    result = await db.execute(
                        select(UserRecord).where(UserRecord.id == user_id).with_for_update()
                    )
                    record = result.scalar_one_or_none()
                    if record is None:
                        return False
                    
                    if "name" in changes:
                        record.name = changes.pop("name")
                    if changes:
                        # Reassign so the JSON column is flagged dirty
                        record.profile = {**(record.profile or {}), **changes}
        except SQLAlchemyError as e:
            logger.error("User update failed", user_id=user_id, error=str(e))
            raise StoreUnavailableError() from e
        
        logger.info("User profile updated", user_id=user_id, fields=sorted(update_data))
        return True
    
    async def update_password(self, user_id: str, password_hash: str) -> bool:
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    result = await db.execute(
                        update(UserRecord)
                        .where(UserRecord.id == user_id)
                        .values(password_hash=password_hash)
                    )
                    updated = result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Password update failed", user_id=user_id, error=str(e))
            raise StoreUnavailableError() from e
        
        return updated
    
    async def delete(self, user_id: str) -> bool:
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    result = await db.execute(delete(UserRecord).where(UserRecord.id == user_id))
                    deleted = result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("User deletion failed", user_id=user_id, error=str(e))
            raise StoreUnavailableError() from e
        
        if deleted:
            logger.info("User deleted", user_id=user_id)
        return deleted
    
    async def ping(self) -> bool:
        return await self._health.check_connection()
    
    async def _get_one(self, query) -> Optional[User]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(query)
                record = result.scalar_one_or_none()
                return record.to_user() if record else None
        except SQLAlchemyError as e:
            logger.error("User lookup failed", error=str(e))
            raise StoreUnavailableError() from e
