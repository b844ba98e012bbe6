"""
Pytest configuration and fixtures for account service testing.
Provides settings, stores, services, and application clients.
"""
from datetime import timedelta

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from account_service.core.config import Settings
from account_service.core.database import create_engine, create_session_factory, init_models
from account_service.core.security import PasswordHasher
from account_service.main import create_app
from account_service.repositories.in_memory_user_repository import InMemoryUserRepository
from account_service.repositories.user_repository import UserRepository
from account_service.services.account_service import AccountService
from account_service.services.auth.request_gate import RequestGate
from account_service.services.auth.token_service import TokenService

TEST_SECRET_KEY = "test-signing-key-a1b2c3d4e5f6g7h8i9j0klmnopqrstuv"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for a throwaway SQLite database and cheap hashing."""
    return Settings(
        SECRET_KEY=TEST_SECRET_KEY,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}",
        ENVIRONMENT="test",
        BCRYPT_ROUNDS=4,
        ACCESS_TOKEN_EXPIRE_MINUTES=15,
    )


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret_key=TEST_SECRET_KEY, ttl=timedelta(minutes=15))


@pytest.fixture
def request_gate(token_service) -> RequestGate:
    return RequestGate(token_service)


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def account_service(memory_repository, password_hasher, token_service, request_gate) -> AccountService:
    """AccountService over an in-memory store."""
    return AccountService(
        user_repository=memory_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        request_gate=request_gate
    )


@pytest_asyncio.fixture
async def sql_repository(test_settings):
    """UserRepository over a fresh SQLite file."""
    engine = create_engine(test_settings)
    await init_models(engine)
    
    yield UserRepository(create_session_factory(engine))
    
    await engine.dispose()


@pytest.fixture
def client(test_settings):
    """Test client for the full application with the SQL store."""
    app = create_app(settings=test_settings)
    
    with TestClient(app) as client:
        yield client


@pytest.fixture
def memory_client(test_settings, memory_repository):
    """Test client whose store is the in-memory repository."""
    app = create_app(settings=test_settings, user_repository=memory_repository)
    
    with TestClient(app) as client:
        yield client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
