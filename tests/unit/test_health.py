"""Tests for the health check, CORS headers, and the error envelope.

Exercises the FastAPI app through an async HTTP client without the lifespan,
so no services are built.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from talkitout.api.app import create_app
from talkitout.core.exceptions import UploadError


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance with two failing routes."""
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    @app.get("/upload-fails")
    async def upload_fails():
        raise UploadError("Upload to recordings/x.wav failed")

    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


async def test_health_returns_200(client):
    """GET /health returns 200 with status, version, and timestamp."""
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"
    assert "timestamp" in body


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


async def test_cors_allows_configured_origin(client):
    resp = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.headers.get("access-control-allow-origin") == "http://localhost:3000"


async def test_cors_rejects_unknown_origin(client):
    """Origins not in the allow-list receive no CORS header."""
    resp = await client.options(
        "/health",
        headers={
            "Origin": "http://evil.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


async def test_domain_error_keeps_its_status(client):
    resp = await client.get("/upload-fails")
    assert resp.status_code == 502
    body = resp.json()
    assert body["code"] == "UPLOAD_ERROR"
    assert body["detail"] == "Upload to recordings/x.wav failed"
    assert "timestamp" in body


async def test_unhandled_error_hides_details(client):
    resp = await client.get("/boom")
    assert resp.status_code == 500
    assert resp.json()["code"] == "INTERNAL_ERROR"
    assert "kaboom" not in resp.text


async def test_unknown_route_is_404(client):
    resp = await client.get("/api/v1/nope")
    assert resp.status_code == 404
