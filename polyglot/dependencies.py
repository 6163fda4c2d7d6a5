"""
Dependency injection providers for the Polyglot server.

Routes obtain services from the ApplicationContainer on ``app.state`` rather
than from module globals, so tests can swap in their own container.
"""

from fastapi import Request

from .auth.service import AuthService
from .container import ApplicationContainer
from .services.user_service import UserService
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def get_container(request: Request) -> ApplicationContainer:
    """
    Get the application container from request state.

    This is the base dependency that all other dependencies use.
    """
    if not hasattr(request.app.state, "container"):
        raise RuntimeError(
            "ApplicationContainer not found in app.state - ensure container is initialized in lifespan context"
        )
    return request.app.state.container


def get_auth_service(request: Request) -> AuthService:
    container = get_container(request)
    if container.auth_service is None:
        raise RuntimeError("AuthService not initialized in container")
    return container.auth_service


def get_user_service(request: Request) -> UserService:
    container = get_container(request)
    if container.user_service is None:
        raise RuntimeError("UserService not initialized in container")
    return container.user_service
