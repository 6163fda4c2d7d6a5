"""
Polyglot Server - Main Application Entry Point

Configures logging from the environment, builds the FastAPI app and, when run
directly, serves it with uvicorn on the configured host and port.
"""

import uvicorn

from .app.factory import create_app
from .config import get_config
from .structured_logging.enhanced_logging_config import get_logger, setup_enhanced_logging

config = get_config()
setup_enhanced_logging(config.to_legacy_dict())

logger = get_logger(__name__)
logger.info("Logging setup completed", environment=config.logging.environment)

app = create_app(config)


def main() -> None:
    logger.info("Starting uvicorn", host=config.server.host, port=config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
