"""
Realtime chat gateway.

Authorizes each WebSocket against the same server-side session as HTTP,
tracks it in the PresenceRegistry and relays chat events to every connected
peer. The session is re-read before each inbound message; any failure to
confirm the identity closes the connection.
"""

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from ..error_types import ErrorMessages, ErrorType, create_websocket_error_response
from ..exceptions import PolyglotError
from ..sessions.state import AuthenticatedUser
from ..sessions.store import SessionStore
from ..structured_logging.enhanced_logging_config import get_logger
from .envelope import (
    CHAT_MESSAGE,
    ENTERED_CHAT,
    ERROR,
    EXITED_CHAT,
    MessageValidationError,
    build_event,
    parse_client_event,
)
from .presence_registry import PresenceRegistry

logger = get_logger(__name__)

POLICY_VIOLATION = 1008
GOING_AWAY = 1001
# Application close code sent to a connection displaced by a newer one for the same identity
SUPERSEDED = 4000


class RealtimeGateway:
    """
    Session-authenticated chat over WebSockets.

    Args:
        session_store: Store the HTTP session middleware writes to
        registry: Process-wide presence registry
    """

    def __init__(self, session_store: SessionStore, registry: PresenceRegistry):
        self._sessions = session_store
        self.registry = registry

    async def authorize(self, session_id: str | None) -> AuthenticatedUser | None:
        """Fresh session read. Any failure yields None."""
        if not session_id:
            return None
        try:
            state = await self._sessions.load(session_id)
        except PolyglotError as e:
            logger.warning("Session reload failed for realtime connection", error=e.user_friendly)
            return None
        if state is None:
            return None
        return state.authenticated_user

    async def handle_connection(self, websocket: WebSocket, session_id: str | None) -> None:
        """Run one connection from handshake to teardown."""
        user = await self.authorize(session_id)
        if user is None:
            logger.info("Rejected unauthenticated realtime connection")
            await websocket.close(code=POLICY_VIOLATION)
            return

        email = user.email
        await websocket.accept()
        superseded = self.registry.register(email, websocket)
        if superseded is not None:
            await self._close_quietly(superseded, SUPERSEDED, "Replaced by a newer connection")

        logger.info("Realtime connection established", user_id=user.user_id, connected=len(self.registry))
        await self.broadcast(ENTERED_CHAT, {"message": f"{email} has entered the chat"})

        try:
            await self._message_loop(websocket, session_id, user)
        finally:
            if self.registry.unregister(email, websocket):
                await self.broadcast(EXITED_CHAT, {"message": f"{email} has left the chat."})
            logger.info("Realtime connection closed", user_id=user.user_id, connected=len(self.registry))

    async def _message_loop(self, websocket: WebSocket, session_id: str | None, user: AuthenticatedUser) -> None:
        while True:
            try:
                message = await websocket.receive()
            except RuntimeError as e:
                # Raised once the socket was closed from our side
                logger.warning("WebSocket connection lost (not connected)", user_id=user.user_id, error=str(e))
                return
            if message["type"] == "websocket.disconnect":
                logger.info("WebSocket disconnected", user_id=user.user_id, code=message.get("code"))
                return

            current = await self.authorize(session_id)
            if current is None or current.email != user.email:
                logger.info("Session no longer authorizes realtime connection", user_id=user.user_id)
                await self._close_quietly(websocket, POLICY_VIOLATION, "Session is no longer valid")
                return

            try:
                event = parse_client_event(message.get("text"))
            except MessageValidationError as e:
                logger.warning("Message validation failed", user_id=user.user_id, error_type=e.error_type)
                error = create_websocket_error_response(
                    ErrorType.INVALID_FORMAT,
                    f"Message validation failed: {e.message}",
                    ErrorMessages.INVALID_FORMAT,
                    {"error_type": e.error_type},
                )
                error_event = build_event(ERROR, error, sequence_number=self.registry.next_sequence())
                if not await self._send(websocket, error_event):
                    return
                continue

            await self.broadcast(CHAT_MESSAGE, {"email": user.email, "text": event.data.text})

    async def broadcast(self, event_type: str, data: dict) -> int:
        """
        Send one event to every registered connection.

        Peers whose socket has died are dropped from the registry.

        Returns:
            Number of peers the event was delivered to
        """
        event = build_event(event_type, data, sequence_number=self.registry.next_sequence())
        delivered = 0
        for email, websocket in self.registry.items():
            if await self._send(websocket, event):
                delivered += 1
            else:
                self.registry.unregister(email, websocket)
                logger.info("Dropped dead peer during broadcast", email=email)
        return delivered

    async def close_all(self, code: int = GOING_AWAY) -> None:
        """Close every registered connection; used on shutdown."""
        for _email, websocket in self.registry.items():
            await self._close_quietly(websocket, code, "Server shutting down")
        self.registry.clear()

    async def _send(self, websocket: WebSocket, event: dict) -> bool:
        try:
            await websocket.send_json(event)
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug("Send to realtime peer failed", error=str(e), error_type=type(e).__name__)
            return False

    async def _close_quietly(self, websocket: WebSocket, code: int, reason: str) -> None:
        if websocket.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await websocket.close(code=code, reason=reason)
        except (RuntimeError, OSError) as e:
            logger.debug("Close on realtime peer failed", error=str(e), code=code)
