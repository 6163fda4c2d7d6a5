"""
User repository for async persistence operations.

Every storage failure is logged with its raw detail and re-raised as a
DatabaseError whose user_friendly text comes from parse_database_error().
"""

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError

from polyglot.database import DatabaseManager
from polyglot.exceptions import DatabaseError, create_error_context
from polyglot.models.user import User
from polyglot.structured_logging.enhanced_logging_config import get_logger
from polyglot.utils.db_errors import parse_database_error
from polyglot.utils.error_logging import log_and_raise

logger = get_logger(__name__)


class UserRepository:
    """
    Repository for user persistence operations.

    Handles account creation, lookup and single-field mutations.
    """

    def __init__(self, database: DatabaseManager):
        """Initialize the user repository."""
        self._database = database
        self._logger = get_logger(__name__)

    async def get_all_users(self) -> list[User]:
        """
        Get all registered users ordered by username.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context()
        context.metadata["operation"] = "get_all_users"

        try:
            async with self._database.session() as session:
                result = await session.execute(select(User).order_by(User.username))
                users = list(result.scalars().all())
                self._logger.debug("Loaded users", user_count=len(users))
                return users
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving users: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly=parse_database_error(e),
                operation="select",
                table="users",
            )

    async def get_user_by_email(self, email: str) -> User | None:
        """
        Get a user by email address.

        Returns:
            User | None: The user, or None if no account uses that email

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context()
        context.metadata["operation"] = "get_user_by_email"

        try:
            async with self._database.session() as session:
                result = await session.execute(select(User).where(User.email == email))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving user by email: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly=parse_database_error(e),
                operation="select",
                table="users",
            )

    async def get_user_by_id(self, user_id: str) -> User | None:
        """
        Get a user by ID.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(user_id=user_id)
        context.metadata["operation"] = "get_user_by_id"

        try:
            async with self._database.session() as session:
                return await session.get(User, user_id)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving user '{user_id}': {e}",
                context=context,
                details={"user_id": user_id, "error": str(e)},
                user_friendly=parse_database_error(e),
                operation="select",
                table="users",
            )

    async def add_user(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Args:
            username: Display name
            email: Unique email address
            password_hash: Argon2id hash of the password

        Raises:
            DatabaseError: On duplicate email or any other storage failure
        """
        context = create_error_context()
        context.metadata["operation"] = "add_user"

        user = User(username=username, email=email, password_hash=password_hash, friend_count=0)
        try:
            async with self._database.session() as session:
                session.add(user)
                await session.commit()
                await session.refresh(user)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error inserting user: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly=parse_database_error(e),
                operation="insert",
                table="users",
            )

        self._logger.info("User created", user_id=user.user_id)
        return user

    async def update_email(self, user_id: str, new_email: str) -> User | None:
        """Replace a user's email. Returns the updated user, or None if it does not exist."""
        return await self._update_fields(user_id, "update_email", email=new_email)

    async def update_username(self, user_id: str, new_username: str) -> User | None:
        """Replace a user's display name. Returns the updated user, or None if it does not exist."""
        return await self._update_fields(user_id, "update_username", username=new_username)

    async def increment_friends(self, user_id: str) -> User | None:
        return await self._update_fields(user_id, "increment_friends", friend_count=User.friend_count + 1)

    async def decrement_friends(self, user_id: str) -> User | None:
        """
        Decrement the friend count, saturating at zero.

        The floor is applied inside the UPDATE so concurrent removals cannot
        push the stored value below zero.
        """
        return await self._update_fields(
            user_id,
            "decrement_friends",
            friend_count=case((User.friend_count > 0, User.friend_count - 1), else_=0),
        )

    async def _update_fields(self, user_id: str, operation: str, **values) -> User | None:
        context = create_error_context(user_id=user_id)
        context.metadata["operation"] = operation

        try:
            async with self._database.session() as session:
                stmt = update(User).where(User.user_id == user_id).values(**values)
                result = await session.execute(stmt.execution_options(synchronize_session=False))
                if result.rowcount == 0:
                    await session.rollback()
                    return None
                await session.commit()
                user = await session.get(User, user_id, populate_existing=True)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error during {operation} for user '{user_id}': {e}",
                context=context,
                details={"user_id": user_id, "error": str(e)},
                user_friendly=parse_database_error(e),
                operation="update",
                table="users",
            )

        self._logger.info("User updated", user_id=user_id, operation=operation)
        return user
