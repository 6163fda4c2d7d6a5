"""Server-side sessions: typed state, durable store, cookie signing and middleware."""

from .middleware import Session, SessionMiddleware, get_request_session
from .signing import SessionCookieSigner
from .state import Anonymous, Authenticated, AuthenticatedUser, Locked, SessionState, Unlocked
from .store import SessionStore, SqlSessionStore, new_session_id

__all__ = [
    "Anonymous",
    "Authenticated",
    "AuthenticatedUser",
    "Locked",
    "Session",
    "SessionCookieSigner",
    "SessionMiddleware",
    "SessionState",
    "SessionStore",
    "SqlSessionStore",
    "Unlocked",
    "get_request_session",
    "new_session_id",
]
