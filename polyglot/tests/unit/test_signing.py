"""Tests for session cookie signing."""

from jose import jwt

from polyglot.sessions.signing import ALGORITHM, SessionCookieSigner

SECRET = "unit-test-secret-value"


class TestSessionCookieSigner:
    def test_sign_then_unsign(self):
        signer = SessionCookieSigner(SECRET)

        assert signer.unsign(signer.sign("abc123")) == "abc123"

    def test_value_signed_with_other_secret_is_rejected(self):
        forged = SessionCookieSigner("a-completely-different-secret").sign("abc123")

        assert SessionCookieSigner(SECRET).unsign(forged) is None

    def test_tampered_value_is_rejected(self):
        signer = SessionCookieSigner(SECRET)
        header, _payload, signature = signer.sign("abc123").split(".")
        _header, other_payload, _signature = signer.sign("someone-else").split(".")

        assert signer.unsign(f"{header}.{other_payload}.{signature}") is None

    def test_missing_cookie(self):
        signer = SessionCookieSigner(SECRET)

        assert signer.unsign(None) is None
        assert signer.unsign("") is None

    def test_token_without_session_id_is_rejected(self):
        token = jwt.encode({"user": "someone"}, SECRET, algorithm=ALGORITHM)

        assert SessionCookieSigner(SECRET).unsign(token) is None
