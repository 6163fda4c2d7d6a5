"""Application lifecycle management for the Polyglot server."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..container import ApplicationContainer
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the ApplicationContainer on startup and tear it down on shutdown.

    The container is stored on ``app.state.container``; routes reach it through
    the providers in ``polyglot.dependencies``.
    """
    logger.info("Starting Polyglot server with ApplicationContainer...")

    container = ApplicationContainer(getattr(app.state, "config", None))
    try:
        await container.initialize()
    except Exception as error:
        log_exception_once(logger, "error", "Failed to initialize application", exc=error, lifespan_phase="startup")
        await container.shutdown()
        raise
    app.state.container = container

    try:
        yield
    finally:
        logger.info("Shutting down Polyglot server...")
        await container.shutdown()
