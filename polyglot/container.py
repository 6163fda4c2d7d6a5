"""
Dependency Injection Container for Polyglot.

Owns every service instance for one application. Created in the lifespan
context, stored on ``app.state.container`` and torn down on shutdown.

USAGE:
    # In application startup (lifespan.py):
    container = ApplicationContainer(config)
    await container.initialize()
    app.state.container = container

    # In dependency injection (dependencies.py):
    def get_user_service(request: Request) -> UserService:
        return request.app.state.container.user_service
"""

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .auth.service import AuthService
    from .config.models import AppConfig
    from .database import DatabaseManager
    from .persistence.repositories.user_repository import UserRepository
    from .realtime.gateway import RealtimeGateway
    from .realtime.presence_registry import PresenceRegistry
    from .services.user_service import UserService
    from .sessions.signing import SessionCookieSigner
    from .sessions.store import SqlSessionStore

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ApplicationContainer:
    """
    Holds the application's services and their lifecycle.

    Services are created in initialize(), not in the constructor, so a
    container can be built without touching the database.
    """

    def __init__(self, config: "AppConfig | None" = None):
        self.config: AppConfig | None = config

        self.database_manager: DatabaseManager | None = None
        self.session_store: SqlSessionStore | None = None
        self.cookie_signer: SessionCookieSigner | None = None

        self.user_repository: UserRepository | None = None
        self.auth_service: AuthService | None = None
        self.user_service: UserService | None = None

        self.presence_registry: PresenceRegistry | None = None
        self.realtime_gateway: RealtimeGateway | None = None

        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in dependency order.

        INITIALIZATION ORDER:
        1. Configuration
        2. Database and tables
        3. Sessions (store, cookie signer)
        4. Users (repository, auth and profile services)
        5. Realtime (presence registry, gateway)
        """
        async with self._initialization_lock:
            if self._initialized:
                logger.warning("Container already initialized - skipping re-initialization")
                return

            logger.info("Initializing ApplicationContainer...")

            if self.config is None:
                from .config import get_config

                self.config = get_config()

            from .database import DatabaseManager

            self.database_manager = DatabaseManager(self.config.database.url, echo=self.config.database.echo)
            await self.database_manager.create_tables()
            logger.info("Database infrastructure initialized")

            from .sessions.signing import SessionCookieSigner
            from .sessions.store import SqlSessionStore

            self.session_store = SqlSessionStore(self.database_manager, self.config.security.session_max_age_seconds)
            self.cookie_signer = SessionCookieSigner(self.config.security.cookie_secret)
            purged = await self.session_store.purge_expired()
            logger.info("Session store initialized", purged_sessions=purged)

            from .auth.lockout import LockoutPolicy
            from .auth.service import AuthService
            from .persistence.repositories.user_repository import UserRepository
            from .services.user_service import UserService

            self.user_repository = UserRepository(self.database_manager)
            policy = LockoutPolicy(
                max_attempts=self.config.auth.max_login_attempts,
                duration=timedelta(minutes=self.config.auth.lockout_minutes),
            )
            self.auth_service = AuthService(self.user_repository, policy)
            self.user_service = UserService(self.user_repository)
            logger.info("User services initialized", max_login_attempts=policy.max_attempts)

            from .realtime.gateway import RealtimeGateway
            from .realtime.presence_registry import PresenceRegistry

            self.presence_registry = PresenceRegistry()
            self.realtime_gateway = RealtimeGateway(self.session_store, self.presence_registry)
            logger.info("Realtime gateway initialized")

            self._initialized = True
            logger.info("ApplicationContainer initialization complete")

    async def shutdown(self) -> None:
        """Close realtime connections, clear presence and dispose of the database engine."""
        logger.info("Shutting down ApplicationContainer...")

        if self.realtime_gateway is not None:
            await self.realtime_gateway.close_all()
        if self.presence_registry is not None:
            self.presence_registry.clear()

        if self.database_manager is not None:
            try:
                await self.database_manager.close()
            except RuntimeError as e:
                logger.error("Error closing database connections", error=str(e))

        self._initialized = False
        logger.info("ApplicationContainer shutdown complete")
