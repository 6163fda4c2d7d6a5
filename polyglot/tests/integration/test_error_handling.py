"""Integration tests for the error envelope rendered by the error handling layer."""

import pytest
from fastapi.testclient import TestClient

from polyglot.app.factory import create_app
from polyglot.exceptions import DatabaseError

pytestmark = pytest.mark.integration


@pytest.fixture
def failing_client(app_config):
    app = create_app(app_config)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internal detail")

    @app.get("/db")
    async def db():
        raise DatabaseError(
            "IntegrityError: UNIQUE constraint failed: users.email",
            details={"error": "UNIQUE constraint failed: users.email"},
            user_friendly="That email address is already in use",
        )

    with TestClient(app) as test_client:
        yield test_client


class TestErrorEnvelope:
    def test_unexpected_exception_is_generic_500(self, failing_client):
        response = failing_client.get("/boom")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["type"] == "internal_error"
        assert error["user_friendly"] == "An unexpected error occurred"
        assert "secret internal detail" not in response.text

    def test_database_error_hides_driver_details(self, failing_client):
        response = failing_client.get("/db")

        assert response.status_code == 500
        error = response.json()["error"]
        assert set(error) == {"type", "message", "user_friendly", "details", "severity", "timestamp"}
        assert error["message"] == "That email address is already in use"
        assert "UNIQUE" not in response.text
        assert error["severity"] == "high"

    def test_internal_detail_keys_are_dropped(self, failing_client):
        response = failing_client.get("/db")

        details = response.json()["error"]["details"]
        assert "error" not in details
        assert "operation" not in details

    def test_request_id_is_reported(self, failing_client):
        response = failing_client.get("/db")

        assert response.json()["error"]["details"]["request_id"]
