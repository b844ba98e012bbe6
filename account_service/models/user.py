"""
User persistence row and the typed user view handed to services.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, String, UniqueConstraint

from .base import Base, TimestampMixin


def generate_user_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class User:
    """A stored account. ``password_hash`` must never leave the service layer."""
    
    id: str
    username: str
    name: Optional[str]
    password_hash: str = field(repr=False)
    profile: Dict[str, Any] = field(default_factory=dict)
    
    def to_public_dict(self) -> Dict[str, Any]:
        """Document form without credentials."""
        document = dict(self.profile)
        document.update({"id": self.id, "username": self.username, "name": self.name})
        return document


class UserRecord(Base, TimestampMixin):
    """Row in the ``users`` table; extra profile fields live in a JSON document."""
    
    __tablename__ = "users"
    
    id = Column(String(32), primary_key=True, default=generate_user_id)
    username = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    profile = Column(JSON, nullable=False, default=dict)
    
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
    )
    
    def to_user(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            name=self.name,
            password_hash=self.password_hash,
            profile=dict(self.profile or {}),
        )
    
    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id})>"
