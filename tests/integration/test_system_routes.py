from httpx import AsyncClient
import pytest


@pytest.mark.integration
@pytest.mark.anyio
async def test_health_reports_store(client: AsyncClient):
    resp = await client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["status"] == "ok"
    assert body["store"] in {"memory", "sql"}
    assert body["timestamp"]


@pytest.mark.integration
@pytest.mark.anyio
async def test_root_welcome(client: AsyncClient):
    resp = await client.get("/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Welcome to NextBlog API"
    assert body["health"] == "/health"


@pytest.mark.integration
@pytest.mark.anyio
async def test_request_id_generated_and_echoed(client: AsyncClient):
    generated = await client.get("/api/posts")
    assert generated.headers["X-Request-Id"]

    echoed = await client.get("/api/posts", headers={"X-Request-Id": "abc123"})
    assert echoed.headers["X-Request-Id"] == "abc123"


@pytest.mark.integration
@pytest.mark.anyio
async def test_security_headers_present(client: AsyncClient):
    resp = await client.get("/api/posts")

    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["Referrer-Policy"] == "no-referrer"
    assert "default-src 'none'" in resp.headers["Content-Security-Policy"]
    # development environment in tests
    assert "Strict-Transport-Security" not in resp.headers


@pytest.mark.integration
@pytest.mark.anyio
async def test_error_responses_carry_headers(client: AsyncClient):
    resp = await client.get("/api/posts/abc")

    assert resp.status_code == 400
    assert resp.headers["X-Request-Id"]
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
