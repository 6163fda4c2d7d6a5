"""
User profile service.

Looks a user up by id before every mutation and raises ResourceNotFoundError
when it is absent, so routes never have to inspect a None.
"""

from ..error_types import ErrorMessages
from ..exceptions import ResourceNotFoundError, create_error_context
from ..models.user import User
from ..persistence.repositories.user_repository import UserRepository
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class UserService:
    """Profile reads and single-field mutations."""

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    async def get_all_users(self) -> list[User]:
        return await self._users.get_all_users()

    async def get_user_profile(self, user_id: str) -> User:
        return self._require(await self._users.get_user_by_id(user_id), user_id, "get_user_profile")

    async def update_user_email(self, user_id: str, new_email: str) -> User:
        """
        Replace a user's email.

        Raises:
            ResourceNotFoundError: No such user
            DatabaseError: The email is taken or storage failed
        """
        self._require(await self._users.get_user_by_id(user_id), user_id, "update_user_email")
        return self._require(await self._users.update_email(user_id, new_email), user_id, "update_user_email")

    async def update_user_name(self, user_id: str, new_name: str) -> User:
        self._require(await self._users.get_user_by_id(user_id), user_id, "update_user_name")
        return self._require(await self._users.update_username(user_id, new_name), user_id, "update_user_name")

    async def add_friend(self, user_id: str) -> User:
        self._require(await self._users.get_user_by_id(user_id), user_id, "add_friend")
        return self._require(await self._users.increment_friends(user_id), user_id, "add_friend")

    async def remove_friend(self, user_id: str) -> User:
        """Decrement the friend count. A count already at zero stays at zero."""
        self._require(await self._users.get_user_by_id(user_id), user_id, "remove_friend")
        return self._require(await self._users.decrement_friends(user_id), user_id, "remove_friend")

    def _require(self, user: User | None, user_id: str, operation: str) -> User:
        if user is None:
            context = create_error_context(user_id=user_id)
            context.metadata["operation"] = operation
            raise ResourceNotFoundError(
                f"User '{user_id}' not found",
                context=context,
                resource_type="user",
                resource_id=user_id,
                user_friendly=ErrorMessages.USER_NOT_FOUND,
            )
        return user
