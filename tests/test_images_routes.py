import httpx
import pytest

from imagegen.config import AdapterConfig


# The upstream fixture replaces AsyncClient.post, so the ASGI test client
# sends through AsyncClient.request instead.


@pytest.fixture
def app(monkeypatch):
    from imagegen.main import app
    import imagegen.images_routes as images_routes

    monkeypatch.setattr(images_routes, "CONFIG", AdapterConfig(provider="google_imagen", api_key="g-key"))
    return app


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/generate-image", "/.netlify/functions/generate-image"])
async def test_generate_image_route_success(app, upstream, path):
    upstream.reply(200, {"predictions": [{"bytesBase64Encoded": "AAAA"}]})

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.request("POST", path, json={"prompt": "a lighthouse at dusk"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"base64Image": "AAAA"}
    assert len(upstream.calls) == 1


@pytest.mark.asyncio
async def test_get_is_405_from_adapter(app, upstream):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.request("GET", "/api/generate-image")

    assert r.status_code == 405
    assert r.content == b""
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_invalid_body_is_400(app, upstream):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.request("POST", "/api/generate-image", content=b"prompt=hello")

    assert r.status_code == 400
    assert r.json() == {"error": "Request body must be valid JSON."}
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_upstream_failure_is_json_500(app, upstream):
    upstream.reply(400, {"error": {"message": "prompt rejected by safety filter"}})

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.request("POST", "/api/generate-image", json={"prompt": "x"})

    assert r.status_code == 500
    assert r.json() == {"error": "prompt rejected by safety filter"}


@pytest.mark.asyncio
async def test_health_reports_provider(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"ok": True, "provider": "google_imagen"}


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["TRACE", "PURGE"])
async def test_uncommon_methods_get_empty_405(app, upstream, method):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.request(method, "/api/generate-image")

    assert r.status_code == 405
    assert r.content == b""
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_unknown_path_keeps_default_404(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/nope")

    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}
