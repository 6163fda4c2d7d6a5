"""Tests for Argon2 password hashing utilities."""

import pytest

from polyglot.auth.argon2_utils import (
    hash_password,
    hash_password_async,
    verify_dummy_password,
    verify_password,
    verify_password_async,
)
from polyglot.exceptions import AuthenticationError


class TestArgon2HashGeneration:
    """Test Argon2 hash generation functionality."""

    def test_hash_password_basic(self):
        hashed = hash_password("test_password")

        assert isinstance(hashed, str)
        assert hashed.startswith("$argon2id$")
        assert "test_password" not in hashed

    def test_hash_password_is_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_hash_password_rejects_non_string(self):
        with pytest.raises(AuthenticationError):
            hash_password(12345)  # type: ignore[arg-type]


class TestArgon2Verification:
    def test_verify_correct_password(self):
        assert verify_password("correct", hash_password("correct")) is True

    def test_verify_wrong_password(self):
        assert verify_password("wrong", hash_password("correct")) is False

    def test_verify_empty_hash(self):
        assert verify_password("anything", "") is False

    def test_verify_malformed_hash(self):
        assert verify_password("anything", "not-an-argon2-hash") is False

    def test_dummy_verification_always_fails(self, monkeypatch):
        calls = []
        real_verify = verify_password
        monkeypatch.setattr(
            "polyglot.auth.argon2_utils.verify_password",
            lambda password, hashed: calls.append(hashed) or real_verify(password, hashed),
        )

        assert verify_dummy_password("anything") is False
        assert calls and calls[0].startswith("$argon2id$")


class TestAsyncWrappers:
    @pytest.mark.asyncio
    async def test_async_round_trip(self):
        hashed = await hash_password_async("s3cret")

        assert await verify_password_async("s3cret", hashed) is True
        assert await verify_password_async("other", hashed) is False
