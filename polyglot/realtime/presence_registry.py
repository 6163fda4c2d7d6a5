"""
Presence registry: who is connected to the chat.

Maps an authenticated email to its one live WebSocket. Owned by the
ApplicationContainer; all mutations happen on the event loop, so no locking.
"""

from collections.abc import Iterator

from fastapi import WebSocket

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class PresenceRegistry:
    """At most one connection per identity. A newer connection replaces the older one."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._sequence = 0

    def register(self, email: str, websocket: WebSocket) -> WebSocket | None:
        """
        Register ``websocket`` as the connection for ``email``.

        Returns:
            The connection it replaced, if any
        """
        previous = self._connections.get(email)
        self._connections[email] = websocket
        if previous is not None and previous is not websocket:
            logger.info("Presence entry replaced by newer connection", email=email)
            return previous
        logger.debug("Presence entry registered", email=email, connected=len(self._connections))
        return None

    def unregister(self, email: str, websocket: WebSocket) -> bool:
        """
        Remove the entry for ``email`` only if it still points at ``websocket``.

        Returns:
            True if an entry was removed
        """
        if self._connections.get(email) is not websocket:
            return False
        del self._connections[email]
        logger.debug("Presence entry removed", email=email, connected=len(self._connections))
        return True

    def get(self, email: str) -> WebSocket | None:
        return self._connections.get(email)

    def items(self) -> list[tuple[str, WebSocket]]:
        """Snapshot of (email, connection) pairs, safe to iterate while mutating."""
        return list(self._connections.items())

    def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def clear(self) -> None:
        self._connections.clear()

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, email: object) -> bool:
        return email in self._connections

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._connections))
