"""
Dependency container wiring the account core from settings.
Built once per application and stored on ``app.state``.
"""

from datetime import timedelta
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine
import structlog

from ..core.config import Settings
from ..core.database import close_db_connections, create_engine, create_session_factory, init_models
from ..core.security import PasswordHasher
from ..interfaces.repository_interface import IUserRepository
from ..repositories.user_repository import UserRepository
from ..services.account_service import AccountService
from ..services.auth.request_gate import RequestGate
from ..services.auth.token_service import TokenService

logger = structlog.get_logger()


class Container:
    """Holds the process-wide service instances."""
    
    def __init__(self, settings: Settings, user_repository: Optional[IUserRepository] = None):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        
        self.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
        self.token_service = TokenService(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        self.request_gate = RequestGate(self.token_service)
        
        if user_repository is None:
            self.engine = create_engine(settings)
            user_repository = UserRepository(create_session_factory(self.engine))
        self.user_repository = user_repository
        
        self.account_service = AccountService(
            user_repository=self.user_repository,
            password_hasher=self.password_hasher,
            token_service=self.token_service,
            request_gate=self.request_gate
        )
        logger.debug("Container built", repository=type(self.user_repository).__name__)
    
    async def startup(self) -> None:
        """Prepare storage; creates missing tables for SQL stores."""
        if self.engine is not None:
            await init_models(self.engine)
    
    async def shutdown(self) -> None:
        if self.engine is not None:
            await close_db_connections(self.engine)
