"""
Argon2 password hashing utilities for Polyglot.

Passwords are hashed with Argon2id. The hash and verify calls are CPU bound,
so the async wrappers run them in a worker thread to keep the event loop free.
"""

import asyncio
import functools
import os
import secrets

from argon2 import PasswordHasher, Type, exceptions
from argon2.exceptions import VerificationError

from ..exceptions import AuthenticationError
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import log_and_raise

logger = get_logger(__name__)

# Overridable via ARGON2_TIME_COST, ARGON2_MEMORY_COST, ARGON2_PARALLELISM, ARGON2_HASH_LENGTH
# TIME_COST: 1-10, MEMORY_COST: 1024-1048576 KiB, PARALLELISM: 1-16, HASH_LENGTH: 16-64 bytes
TIME_COST = int(os.getenv("ARGON2_TIME_COST", "3"))
MEMORY_COST = int(os.getenv("ARGON2_MEMORY_COST", "65536"))  # 64MB
PARALLELISM = int(os.getenv("ARGON2_PARALLELISM", "1"))
HASH_LENGTH = int(os.getenv("ARGON2_HASH_LENGTH", "32"))


def _validate_params(time_cost: int, memory_cost: int, parallelism: int, hash_len: int) -> None:
    if time_cost < 1 or time_cost > 10:
        raise ValueError(f"time_cost must be between 1 and 10, got {time_cost}")
    if memory_cost < 1024 or memory_cost > 1048576:
        raise ValueError(f"memory_cost must be between 1024 and 1048576, got {memory_cost}")
    if parallelism < 1 or parallelism > 16:
        raise ValueError(f"parallelism must be between 1 and 16, got {parallelism}")
    if hash_len < 16 or hash_len > 64:
        raise ValueError(f"hash_len must be between 16 and 64, got {hash_len}")


_validate_params(TIME_COST, MEMORY_COST, PARALLELISM, HASH_LENGTH)

_default_hasher = PasswordHasher(
    type=Type.ID,
    time_cost=TIME_COST,
    memory_cost=MEMORY_COST,
    parallelism=PARALLELISM,
    hash_len=HASH_LENGTH,
)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using Argon2id.

    Returns:
        Argon2id hash string in format: $argon2id$v=19$m=65536,t=3,p=1$...

    Raises:
        AuthenticationError: If password is not a string or hashing fails
    """
    if not isinstance(password, str):
        logger.error("Password must be a string", password_type=type(password).__name__)  # type: ignore[unreachable]
        raise AuthenticationError("Password must be a string", user_friendly="Password processing failed")

    try:
        return _default_hasher.hash(password)
    except exceptions.HashingError as e:
        log_and_raise(
            AuthenticationError,
            f"Failed to hash password: {e}",
            details={"error_type": type(e).__name__},
            user_friendly="Password processing failed",
        )


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a plaintext password against an Argon2 hash.

    Returns:
        True if password matches hash, False otherwise (including malformed hashes)
    """
    if not isinstance(password, str):
        logger.warning("Password verification failed - password not a string")  # type: ignore[unreachable]
        return False

    if not hashed:
        logger.warning("Password verification failed - empty hash")
        return False

    try:
        _default_hasher.verify(hashed, password)
        return True
    except VerificationError:
        return False
    except exceptions.InvalidHashError as e:
        logger.warning("Password verification failed - invalid hash", error=str(e))
        return False


@functools.cache
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def verify_dummy_password(password: str) -> bool:
    """
    Run a full verification against a throwaway hash and report failure.

    Used when no stored hash exists so the caller still pays the verify cost.
    """
    verify_password(password, _dummy_hash())
    return False


async def hash_password_async(password: str) -> str:
    """hash_password() in a worker thread."""
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(password: str, hashed: str) -> bool:
    """verify_password() in a worker thread."""
    return await asyncio.to_thread(verify_password, password, hashed)


async def verify_dummy_password_async(password: str) -> bool:
    """verify_dummy_password() in a worker thread."""
    return await asyncio.to_thread(verify_dummy_password, password)
