"""
FastAPI application factory for the Polyglot server.

Handles app creation, middleware configuration and router registration.
"""

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..api.real_time import realtime_router
from ..api.users import profile_router, user_router
from ..auth.endpoints import auth_router
from ..config import get_config
from ..config.models import AppConfig
from ..middleware.comprehensive_logging import ComprehensiveLoggingMiddleware
from ..middleware.error_handling_middleware import setup_error_handling
from ..sessions.middleware import SessionMiddleware
from ..structured_logging.enhanced_logging_config import get_logger
from .lifespan import lifespan

logger = get_logger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration to build the app from; defaults to get_config()

    Returns:
        FastAPI: The configured application. Services are created by the lifespan.
    """
    config = config or get_config()

    app = FastAPI(
        title="Polyglot API",
        description="Language-learning social backend with realtime chat",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    # Innermost first: session handling sits closest to the routes
    app.add_middleware(
        SessionMiddleware,
        cookie_name=config.security.cookie_name,
        max_age_seconds=config.security.session_max_age_seconds,
        secure=config.security.cookie_secure,
    )
    app.add_middleware(ComprehensiveLoggingMiddleware)
    setup_error_handling(app)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(profile_router)
    app.include_router(realtime_router)

    if config.static.directory:
        app.mount("/", StaticFiles(directory=config.static.directory, html=True), name="static")
        logger.info("Static files mounted", directory=config.static.directory)

    logger.info("FastAPI application created", cookie_name=config.security.cookie_name)
    return app
