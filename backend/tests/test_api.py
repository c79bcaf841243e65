"""
Utilbox Backend: API Endpoint Tests
====================================

What:  End-to-end tests through the ASGI app (middleware, routes, handlers).
How:   HTTPX AsyncClient over ASGITransport; the test_client fixture runs the
       application lifespan so the credential store is loaded from the
       temporary CSV written by conftest.py.

What we test:
    ✅ Success envelopes and camelCase field names for every endpoint
    ✅ Error envelopes: 400 missing fields / bad JSON, 401 bad credentials
    ✅ Health reports the loaded user count
    ✅ CORS, request IDs, unknown routes
    ✅ Startup aborts when the credential file is missing
"""

import pytest
from unittest.mock import patch

from utilbox.config import settings
from utilbox.exceptions import CredentialStoreError

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def assert_error(response, status_code, message):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["message"] == message
    return body


class TestGreetingEndpoint:

    @pytest.mark.asyncio
    async def test_greeting_success(self, test_client):
        response = await test_client.post("/api/greeting", json={"greeting": "Hello!"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Greeting received successfully"
        assert body["receivedGreeting"] == "Hello!"
        assert body["timestamp"].endswith("Z")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"greeting": ""}, {"greeting": None}])
    async def test_greeting_missing(self, test_client, payload):
        response = await test_client.post("/api/greeting", json=payload)
        body = assert_error(response, 400, "Greeting is required")
        assert body["error"] == "validation_error"


class TestLoginEndpoint:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client):
        response = await test_client.post(
            "/api/login", json={"username": "admin", "password": "admin123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["username"] == "admin"
        assert "password" not in body
        assert "admin123" not in response.text

    @pytest.mark.asyncio
    async def test_invalid_credentials_are_indistinguishable(self, test_client):
        unknown = await test_client.post(
            "/api/login", json={"username": "mallory", "password": "admin123"}
        )
        wrong = await test_client.post(
            "/api/login", json={"username": "admin", "password": "guess"}
        )

        first = assert_error(unknown, 401, "Invalid username or password")
        second = assert_error(wrong, 401, "Invalid username or password")
        first.pop("requestId", None)
        second.pop("requestId", None)
        assert first == second

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {},
        {"username": "admin"},
        {"password": "admin123"},
        {"username": "", "password": "admin123"},
    ])
    async def test_login_missing_fields(self, test_client, payload):
        response = await test_client.post("/api/login", json=payload)
        assert_error(response, 400, "Username and password are required")


class TestHashEndpoint:

    @pytest.mark.asyncio
    async def test_hash_abc(self, test_client):
        response = await test_client.post("/api/hash", json={"message": "abc"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["originalMessage"] == "abc"
        assert body["hash"] == ABC_SHA256
        assert body["algorithm"] == "SHA-256"
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_hash_is_idempotent(self, test_client):
        first = await test_client.post("/api/hash", json={"message": "repeat me"})
        second = await test_client.post("/api/hash", json={"message": "repeat me"})
        assert first.json()["hash"] == second.json()["hash"]

    @pytest.mark.asyncio
    async def test_hash_missing_message(self, test_client):
        response = await test_client.post("/api/hash", json={"message": ""})
        assert_error(response, 400, "Message is required")


class TestCalculateEndpoint:

    @pytest.mark.asyncio
    async def test_calculate_success(self, test_client):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": 6, "operator": "*", "secondNumber": "7"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Calculation performed successfully"
        assert body["firstNumber"] == 6
        assert body["operator"] == "*"
        assert body["secondNumber"] == 7
        assert body["result"] == 42
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_float_result_is_exact(self, test_client):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": 0.1, "operator": "+", "secondNumber": 0.2},
        )
        assert response.json()["result"] == 0.1 + 0.2

    @pytest.mark.asyncio
    async def test_zero_operands_are_accepted(self, test_client):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": 0, "operator": "-", "secondNumber": 0},
        )
        assert response.status_code == 200
        assert response.json()["result"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first", [0, 1, -99.5, "12"])
    async def test_divide_by_zero(self, test_client, first):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": first, "operator": "/", "secondNumber": 0},
        )
        assert_error(response, 400, "Cannot divide by zero")

    @pytest.mark.asyncio
    async def test_invalid_operator(self, test_client):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": 2, "operator": "%", "secondNumber": 3},
        )
        assert_error(response, 400, "Invalid operator. Valid operators are: +, -, *, /")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"firstNumber": 1e308, "operator": "*", "secondNumber": 10},
        {"firstNumber": 1, "operator": "/", "secondNumber": "5e-324"},
        {"firstNumber": -1e308, "operator": "-", "secondNumber": 1e308},
    ])
    async def test_overflow_serializes_as_null(self, test_client, payload):
        """Infinite results keep host float semantics and render as JSON null."""
        response = await test_client.post("/api/calculate", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["result"] is None

    @pytest.mark.asyncio
    async def test_invalid_numbers(self, test_client):
        response = await test_client.post(
            "/api/calculate",
            json={"firstNumber": "two", "operator": "+", "secondNumber": 3},
        )
        assert_error(response, 400, "Invalid numbers provided")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {},
        {"firstNumber": 1, "operator": "+"},
        {"operator": "+", "secondNumber": 1},
        {"firstNumber": 1, "secondNumber": 1},
        {"firstNumber": None, "operator": "+", "secondNumber": 1},
    ])
    async def test_missing_fields(self, test_client, payload):
        response = await test_client.post("/api/calculate", json=payload)
        assert_error(response, 400, "firstNumber, operator, and secondNumber are required")


class TestRequestBodyErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/greeting", "/api/login", "/api/hash", "/api/calculate"])
    async def test_malformed_json(self, test_client, path):
        response = await test_client.post(
            path,
            content=b'{"greeting": ',
            headers={"Content-Type": "application/json"},
        )
        assert_error(response, 400, "Malformed JSON request body")

    @pytest.mark.asyncio
    async def test_non_object_body(self, test_client):
        response = await test_client.post("/api/greeting", json=["hello"])
        assert_error(response, 400, "Invalid request body")

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, test_client):
        response = await test_client.post("/api/hash", json={"message": {"nested": True}})
        assert_error(response, 400, "Invalid request body")

    @pytest.mark.asyncio
    async def test_non_string_greeting_is_rejected(self, test_client):
        """Greetings are text; a truthy number is not echoed back."""
        response = await test_client.post("/api/greeting", json={"greeting": 42})
        assert_error(response, 400, "Invalid request body")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path, raw_body", [
        ("/api/hash", b'{"message": "\\ud800"}'),
        ("/api/greeting", b'{"greeting": "hi \\udfff"}'),
        ("/api/login", b'{"username": "admin", "password": "\\ud83d"}'),
        ("/api/calculate", b'{"firstNumber": 1, "operator": "\\ud800", "secondNumber": 2}'),
    ])
    async def test_lone_surrogate_is_a_client_error(self, test_client, path, raw_body):
        """Valid JSON escapes that are not encodable text give 400, never 500."""
        response = await test_client.post(
            path,
            content=raw_body,
            headers={"Content-Type": "application/json"},
        )
        body = assert_error(response, 400, "Invalid request body")
        assert body["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_paired_surrogates_are_hashed_as_utf8(self, test_client):
        """An escaped surrogate pair is one valid code point (U+1F600)."""
        import hashlib
        response = await test_client.post(
            "/api/hash",
            content=b'{"message": "\\ud83d\\ude00"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        expected = hashlib.sha256("\U0001F600".encode("utf-8")).hexdigest()
        assert response.json()["hash"] == expected


class TestHealthEndpoint:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["usersLoaded"] == 3
        assert "timestamp" in body
        assert body["uptimeSeconds"] >= 0


class TestDispatcher:

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    @pytest.mark.parametrize("client_id", ["has spaces in it", "x" * 65, "semi;colon"])
    async def test_unsafe_request_id_is_replaced(self, test_client, client_id):
        response = await test_client.post(
            "/api/hash", json={}, headers={"X-Request-ID": client_id}
        )

        rid = response.headers["X-Request-ID"]
        assert rid != client_id
        assert len(rid) == 8
        assert response.json()["requestId"] == rid

    @pytest.mark.asyncio
    async def test_request_id_is_propagated_to_errors(self, test_client):
        response = await test_client.post(
            "/api/hash", json={}, headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["requestId"] == "trace-123"

    @pytest.mark.asyncio
    async def test_cors_preflight(self, test_client):
        response = await test_client.options(
            "/api/login",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        allowed = response.headers["access-control-allow-methods"]
        for method in ("GET", "POST", "PUT", "DELETE", "OPTIONS"):
            assert method in allowed
        assert "access-control-allow-credentials" not in response.headers

    @pytest.mark.asyncio
    async def test_cors_simple_request(self, test_client):
        response = await test_client.post(
            "/api/greeting",
            json={"greeting": "hi"},
            headers={"Origin": "http://example.com"},
        )
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_envelope(self, test_client):
        response = await test_client.get("/api/nope")
        body = assert_error(response, 404, "Not Found")
        assert body["error"] == "http_error"

    @pytest.mark.asyncio
    async def test_wrong_method_uses_envelope(self, test_client):
        response = await test_client.get("/api/calculate")
        assert_error(response, 405, "Method Not Allowed")


class TestStartup:

    @pytest.mark.asyncio
    async def test_missing_credentials_file_aborts_startup(self, tmp_path):
        from utilbox.main import create_app
        app = create_app()

        with patch.object(settings, "credentials_path", str(tmp_path / "missing.csv")):
            with pytest.raises(CredentialStoreError):
                async with app.router.lifespan_context(app):
                    pass

        assert getattr(app.state, "credential_store", None) is None

    @pytest.mark.asyncio
    async def test_malformed_credentials_file_aborts_startup(self, tmp_path):
        from utilbox.main import create_app
        path = tmp_path / "users.csv"
        path.write_text("login;secret\n", encoding="utf-8")
        app = create_app()

        with patch.object(settings, "credentials_path", str(path)):
            with pytest.raises(CredentialStoreError):
                async with app.router.lifespan_context(app):
                    pass

    @pytest.mark.asyncio
    async def test_requests_without_startup_get_503(self):
        from httpx import AsyncClient, ASGITransport
        from utilbox.main import create_app
        app = create_app()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/api/login", json={"username": "admin", "password": "admin123"}
            )

        body = assert_error(response, 503, "Service is not ready. Please try again later.")
        assert body["error"] == "service_unavailable"

    @pytest.mark.asyncio
    async def test_store_is_published_on_app_state(self, credentials_file):
        from utilbox.main import create_app
        app = create_app()

        async with app.router.lifespan_context(app):
            store = app.state.credential_store
            assert len(store) == 3
            assert store.find("bob", "builder42") is not None

        assert app.state.credential_store is None
