"""
Real-time communication API endpoints for the Polyglot server.

The chat WebSocket authenticates with the same signed session cookie as the
HTTP routes.
"""

from fastapi import APIRouter, WebSocket

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

realtime_router = APIRouter(prefix="/api", tags=["realtime"])


@realtime_router.websocket("/chat")
async def chat_websocket(websocket: WebSocket) -> None:
    """Chat channel. Closed with 1008 before the handshake completes when the session is not logged in."""
    container = getattr(websocket.app.state, "container", None)
    if container is None:
        logger.error("ApplicationContainer missing for realtime connection")
        await websocket.close(code=1011)
        return

    cookie_value = websocket.cookies.get(container.config.security.cookie_name)
    session_id = container.cookie_signer.unsign(cookie_value)
    await container.realtime_gateway.handle_connection(websocket, session_id)
