"""
Tests for AccountService over the in-memory store.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from account_service.services.account_service import AccountService
from account_service.services.exceptions import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
)


def bearer(token: str) -> str:
    return f"Bearer {token}"


@pytest.fixture
def register_user(account_service):
    async def _register(username="ada", password="x", name="Ada", **profile):
        return await account_service.register(username, password, name=name, profile_fields=profile)
    return _register


class TestRegister:
    
    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(self, account_service, memory_repository, register_user):
        user = await register_user(password="plain-secret")
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.username == "ada"
        assert stored.name == "Ada"
        assert stored.password_hash != "plain-secret"
        assert account_service.password_hasher.verify("plain-secret", stored.password_hash)
    
    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, register_user):
        await register_user()
        
        with pytest.raises(ConflictError):
            await register_user(password="other")
    
    @pytest.mark.asyncio
    async def test_extra_fields_kept_but_identity_fields_dropped(self, memory_repository, register_user):
        user = await register_user(city="London", id="forged", passwordHash="forged", _id="forged")
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.profile == {"city": "London"}
        assert stored.id != "forged"
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("", "x"), ("ada", "")])
    async def test_missing_credentials_are_invalid(self, account_service, username, password):
        with pytest.raises(InvalidRequestError):
            await account_service.register(username, password, name="Ada")
    
    @pytest.mark.asyncio
    async def test_concurrent_registrations_only_one_wins(self, account_service):
        results = await asyncio.gather(
            *(account_service.register("same", f"pw{i}", name="Same") for i in range(8)),
            return_exceptions=True
        )
        
        successes = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(successes) == 1
        assert len(conflicts) == 7


class TestAuthenticate:
    
    @pytest.mark.asyncio
    async def test_returns_token_for_user_id(self, account_service, token_service, register_user):
        user = await register_user()
        
        token = await account_service.authenticate("ada", "x")
        
        assert token_service.verify(token) == user.id
    
    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_fail_alike(self, account_service, register_user):
        await register_user()
        
        with pytest.raises(UnauthorizedError) as unknown:
            await account_service.authenticate("nobody", "x")
        with pytest.raises(UnauthorizedError) as wrong:
            await account_service.authenticate("ada", "wrong")
        
        assert str(unknown.value) == str(wrong.value)
    
    @pytest.mark.asyncio
    async def test_unknown_user_never_reaches_hasher(self, account_service):
        account_service.password_hasher = AsyncMock()
        
        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("nobody", "x")
        
        account_service.password_hasher.verify_async.assert_not_called()


class TestGetProfile:
    
    @pytest.mark.asyncio
    async def test_returns_only_name_and_username(self, account_service, register_user):
        await register_user(city="London")
        token = await account_service.authenticate("ada", "x")
        
        profile = await account_service.get_profile(bearer(token))
        
        assert profile == {"name": "Ada", "username": "ada"}
    
    @pytest.mark.asyncio
    async def test_bad_token_is_unauthenticated(self, account_service, memory_repository):
        memory_repository.get_by_id = AsyncMock()
        
        with pytest.raises(UnauthenticatedError):
            await account_service.get_profile("Bearer nope")
        
        memory_repository.get_by_id.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(self, account_service, token_service):
        with pytest.raises(NotFoundError):
            await account_service.get_profile(bearer(token_service.issue("missing")))


class TestUpdateProfile:
    
    @pytest.mark.asyncio
    async def test_password_change(self, account_service, register_user):
        await register_user()
        token = await account_service.authenticate("ada", "x")
        
        await account_service.update_profile(bearer(token), {"oldPassword": "x", "password": "y"})
        
        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("ada", "x")
        assert await account_service.authenticate("ada", "y")
    
    @pytest.mark.asyncio
    async def test_password_change_ignores_other_fields(self, account_service, memory_repository, register_user):
        user = await register_user(city="London")
        token = await account_service.authenticate("ada", "x")
        
        await account_service.update_profile(
            bearer(token),
            {"oldPassword": "x", "password": "y", "name": "Changed", "city": "Paris"}
        )
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.name == "Ada"
        assert stored.profile == {"city": "London"}
    
    @pytest.mark.asyncio
    async def test_wrong_old_password_is_unauthorized(self, account_service, register_user):
        await register_user()
        token = await account_service.authenticate("ada", "x")
        
        with pytest.raises(UnauthorizedError):
            await account_service.update_profile(bearer(token), {"oldPassword": "bad", "password": "y"})
        
        assert await account_service.authenticate("ada", "x")
    
    @pytest.mark.asyncio
    async def test_merge_keeps_existing_fields(self, account_service, memory_repository, register_user):
        user = await register_user(city="London", bio="hi")
        token = await account_service.authenticate("ada", "x")
        
        await account_service.update_profile(bearer(token), {"name": "Ada L.", "city": "Paris"})
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.name == "Ada L."
        assert stored.profile == {"city": "Paris", "bio": "hi"}
    
    @pytest.mark.asyncio
    async def test_single_password_key_never_changes_password(self, account_service, memory_repository, register_user):
        user = await register_user()
        token = await account_service.authenticate("ada", "x")
        
        await account_service.update_profile(bearer(token), {"password": "y", "bio": "new"})
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.profile == {"bio": "new"}
        assert account_service.password_hasher.verify("x", stored.password_hash)
    
    @pytest.mark.asyncio
    async def test_identity_fields_cannot_be_merged(self, account_service, memory_repository, register_user):
        user = await register_user()
        token = await account_service.authenticate("ada", "x")
        
        await account_service.update_profile(
            bearer(token),
            {"id": "other", "username": "mallory", "passwordHash": "x", "password_hash": "x"}
        )
        
        stored = await memory_repository.get_by_id(user.id)
        assert stored.username == "ada"
        assert stored.profile == {}
        assert account_service.password_hasher.verify("x", stored.password_hash)
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("patch", [
        {"oldPassword": "x", "password": 12345},
        {"oldPassword": 12345, "password": "y"},
        {"password": ["y"], "bio": "new"},
    ])
    async def test_non_string_passwords_are_invalid(self, account_service, register_user, patch):
        await register_user()
        token = await account_service.authenticate("ada", "x")

        with pytest.raises(InvalidRequestError):
            await account_service.update_profile(bearer(token), patch)

        assert await account_service.authenticate("ada", "x")

    @pytest.mark.asyncio
    async def test_non_string_name_is_invalid(self, account_service, memory_repository, register_user):
        user = await register_user()
        token = await account_service.authenticate("ada", "x")

        with pytest.raises(InvalidRequestError):
            await account_service.update_profile(bearer(token), {"name": {"first": "x"}, "bio": "new"})

        stored = await memory_repository.get_by_id(user.id)
        assert stored.name == "Ada"
        assert stored.profile == {}
        assert await account_service.get_profile(bearer(token)) == {"name": "Ada", "username": "ada"}

    @pytest.mark.asyncio
    async def test_update_for_deleted_user_is_not_found(self, account_service, token_service):
        with pytest.raises(NotFoundError):
            await account_service.update_profile(bearer(token_service.issue("missing")), {"bio": "x"})


class TestDelete:
    
    @pytest.mark.asyncio
    async def test_delete_requires_password(self, account_service, memory_repository, register_user):
        user = await register_user()
        token = await account_service.authenticate("ada", "x")
        
        with pytest.raises(UnauthorizedError):
            await account_service.delete(bearer(token), "wrong")
        assert await memory_repository.get_by_id(user.id) is not None
        
        await account_service.delete(bearer(token), "x")
        assert await memory_repository.get_by_id(user.id) is None
    
    @pytest.mark.asyncio
    async def test_delete_missing_user_is_unauthorized(self, account_service, token_service):
        with pytest.raises(UnauthorizedError):
            await account_service.delete(bearer(token_service.issue("missing")), "x")


class TestListUsers:
    
    @pytest.mark.asyncio
    async def test_list_never_exposes_password_hash(self, account_service, register_user):
        await register_user(city="London")
        await register_user(username="bob", name="Bob")
        
        users = await account_service.list_users()
        
        assert {u["username"] for u in users} == {"ada", "bob"}
        for document in users:
            assert "password_hash" not in document
            assert "passwordHash" not in document
            assert "password" not in document


class TestStoreFailures:
    
    @pytest.mark.asyncio
    async def test_store_errors_propagate_without_retry(self, password_hasher, token_service):
        repository = AsyncMock()
        repository.get_by_username.side_effect = StoreUnavailableError()
        service = AccountService(repository, password_hasher, token_service)
        
        with pytest.raises(StoreUnavailableError):
            await service.authenticate("ada", "x")
        
        assert repository.get_by_username.await_count == 1


class TestScenario:
    
    @pytest.mark.asyncio
    async def test_stale_token_after_deletion(self, account_service):
        await account_service.register("a", "x", name="A")
        with pytest.raises(ConflictError):
            await account_service.register("a", "x", name="A")
        
        first_token = await account_service.authenticate("a", "x")
        assert await account_service.get_profile(bearer(first_token)) == {"name": "A", "username": "a"}
        
        await account_service.update_profile(bearer(first_token), {"oldPassword": "x", "password": "y"})
        with pytest.raises(UnauthorizedError):
            await account_service.authenticate("a", "x")
        second_token = await account_service.authenticate("a", "y")
        
        await account_service.delete(bearer(second_token), "y")
        
        with pytest.raises(NotFoundError):
            await account_service.get_profile(bearer(first_token))
