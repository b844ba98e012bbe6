"""
Tests for bcrypt password hashing.
"""
import pytest

from account_service.core.security import PasswordHasher


class TestPasswordHasher:
    
    def test_hash_is_not_plaintext(self, password_hasher):
        hashed = password_hasher.hash("correct horse")
        
        assert hashed != "correct horse"
        assert hashed.startswith("$2")
    
    def test_same_password_hashes_differently(self, password_hasher):
        """Each call draws a new salt."""
        assert password_hasher.hash("secret") != password_hasher.hash("secret")
    
    def test_verify_round_trip(self, password_hasher):
        hashed = password_hasher.hash("secret")
        
        assert password_hasher.verify("secret", hashed) is True
        assert password_hasher.verify("Secret", hashed) is False
    
    def test_configured_cost_is_used(self):
        hashed = PasswordHasher(rounds=5).hash("secret")
        
        assert hashed.split("$")[2] == "05"
    
    @pytest.mark.parametrize("malformed", ["", "not-a-hash", "$2b$04$short", None])
    def test_verify_malformed_hash_returns_false(self, password_hasher, malformed):
        assert password_hasher.verify("secret", malformed) is False
    
    @pytest.mark.parametrize("rounds", [3, 32])
    def test_invalid_cost_fails_at_construction(self, rounds):
        with pytest.raises(ValueError):
            PasswordHasher(rounds=rounds)
    
    @pytest.mark.asyncio
    async def test_async_wrappers(self, password_hasher):
        hashed = await password_hasher.hash_async("secret")
        
        assert await password_hasher.verify_async("secret", hashed) is True
        assert await password_hasher.verify_async("other", hashed) is False
