"""Repository modules for the async persistence layer."""

from .user_repository import UserRepository

__all__ = ["UserRepository"]
