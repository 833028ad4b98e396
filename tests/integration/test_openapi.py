"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def schema() -> dict:
    """OpenAPI schema (no lifespan needed to render it)."""
    return TestClient(app).get("/openapi.json").json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_title_and_version(self, schema: dict) -> None:
        assert schema["info"]["title"] == "accounts"
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/api/auth/register", "post"),
            ("/api/auth/verify-email", "post"),
            ("/api/auth/resend-otp", "post"),
            ("/api/auth/login", "post"),
            ("/api/auth/logout", "post"),
            ("/api/auth/me", "get"),
            ("/api/health", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert method in schema["paths"][path]

    def test_register_summary(self, schema: dict) -> None:
        assert schema["paths"]["/api/auth/register"]["post"]["summary"] == "Register a new user"

    def test_protected_routes_declare_bearer_scheme(self, schema: dict) -> None:
        assert "HTTPBearer" in schema["components"]["securitySchemes"]
        assert schema["paths"]["/api/auth/me"]["get"]["security"] == [{"HTTPBearer": []}]

    def test_register_request_schema(self, schema: dict) -> None:
        register = schema["components"]["schemas"]["RegisterRequest"]
        assert set(register["required"]) == {"name", "email", "password"}

    def test_account_data_has_no_secrets(self, schema: dict) -> None:
        properties = schema["components"]["schemas"]["AccountData"]["properties"]
        assert "passwordHash" not in properties
        assert "password_hash" not in properties
        assert "isVerified" in properties
