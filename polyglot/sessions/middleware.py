"""
Cookie-backed session middleware.

Loads the server-side session named by the signed ``session`` cookie before the
request reaches a route, exposes it as ``request.state.session`` and persists
it when the response starts. A cookie is only issued once a route writes to
the session; requests that never touch it leave no trace in the store.

IMPLEMENTATION NOTE: pure ASGI rather than BaseHTTPMiddleware so the session
is saved before the response headers leave the process.
"""

from typing import Any

from fastapi import Request, Response
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..structured_logging.enhanced_logging_config import get_logger
from .state import SessionState
from .store import new_session_id

logger = get_logger(__name__)


class Session:
    """
    The session attached to one HTTP request.

    Routes read ``state`` and call ``update()`` or ``clear()``; the middleware
    decides what to persist from the resulting flags.
    """

    def __init__(self, session_id: str | None, state: SessionState):
        self.session_id = session_id
        self.state = state
        self.modified = False
        self.destroyed = False
        self.rotate = False

    @property
    def is_new(self) -> bool:
        return self.session_id is None

    def update(self, state: SessionState, *, rotate: bool = False) -> None:
        """
        Replace the session state.

        Args:
            state: The new state
            rotate: Issue a fresh session id, discarding the old one (used on login)
        """
        self.state = state
        self.modified = True
        self.destroyed = False
        self.rotate = self.rotate or rotate

    def clear(self) -> None:
        """Destroy the session; the cookie is expired on the response."""
        self.state = SessionState()
        self.destroyed = True
        self.modified = False


class SessionMiddleware:
    """Pure ASGI middleware managing the server-side session for HTTP requests."""

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: str = "session",
        max_age_seconds: int = 8 * 60 * 60,
        secure: bool = False,
    ) -> None:
        self.app = app
        self.cookie_name = cookie_name
        self.max_age_seconds = max_age_seconds
        self.secure = secure
        logger.info("SessionMiddleware initialized", cookie_name=cookie_name, max_age_seconds=max_age_seconds)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        container = scope["app"].state.container
        store = container.session_store
        signer = container.cookie_signer

        cookie_value = HTTPConnection(scope).cookies.get(self.cookie_name)
        session_id = signer.unsign(cookie_value)
        state = await store.load(session_id) if session_id else None
        if state is None:
            session = Session(None, SessionState())
        else:
            session = Session(session_id, state)
        scope.setdefault("state", {})["session"] = session

        async def send_with_session(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if session.destroyed:
                    if session.session_id is not None:
                        await store.destroy(session.session_id)
                        logger.info("Session destroyed", session_prefix=session.session_id[:8])
                    if cookie_value:
                        headers.append("Set-Cookie", self._cookie_header("", max_age=0))
                elif session.modified:
                    if session.rotate and session.session_id is not None:
                        await store.destroy(session.session_id)
                        session.session_id = None
                    if session.session_id is None:
                        session.session_id = new_session_id()
                        logger.debug("Session created", session_prefix=session.session_id[:8])
                    await store.save(session.session_id, session.state)
                    headers.append("Set-Cookie", self._cookie_header(signer.sign(session.session_id)))
            await send(message)

        await self.app(scope, receive, send_with_session)

    def _cookie_header(self, value: str, max_age: int | None = None) -> str:
        response = Response()
        response.set_cookie(
            self.cookie_name,
            value,
            max_age=self.max_age_seconds if max_age is None else max_age,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )
        return response.headers["set-cookie"]


def get_request_session(request: Request) -> Session:
    """FastAPI dependency returning the session loaded by SessionMiddleware."""
    session: Any = getattr(request.state, "session", None)
    if session is None:
        raise RuntimeError("Session not found in request state - ensure SessionMiddleware is installed")
    return session
