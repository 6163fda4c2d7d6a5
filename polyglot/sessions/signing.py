"""
Session cookie signing.

The cookie value is a compact HS256 JWS whose only claim is the session id,
so a client cannot forge or enumerate ids without the cookie secret.
"""

from jose import JWTError, jwt

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"


class SessionCookieSigner:
    """Signs and verifies session ids with the configured cookie secret."""

    def __init__(self, secret: str):
        self._secret = secret

    def sign(self, session_id: str) -> str:
        return jwt.encode({"sid": session_id}, self._secret, algorithm=ALGORITHM)

    def unsign(self, cookie_value: str | None) -> str | None:
        """Return the session id carried by a cookie, or None if it is missing or tampered with."""
        if not cookie_value:
            return None
        try:
            claims = jwt.decode(cookie_value, self._secret, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.warning("Rejected session cookie with invalid signature", error=str(e))
            return None
        session_id = claims.get("sid")
        if not isinstance(session_id, str) or not session_id:
            logger.warning("Rejected session cookie without a session id")
            return None
        return session_id
