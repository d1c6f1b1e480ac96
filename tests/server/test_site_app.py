import json

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer, make_mocked_request

from mes_backend import create_app
from mes_backend.config import load_settings
from mes_backend.routes.core.static_files import CACHE_IMMUTABLE, CACHE_WEEK, resolve_asset
from mes_backend.routes.registry import _make_error_middleware
from mes_shared import ErrorCode


@pytest_asyncio.fixture
async def client(site_root):
    app = create_app(load_settings(static_root=site_root, environment="development"))
    async with TestClient(TestServer(app)) as test_client:
        yield test_client


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/tos", "/privacy"])
async def test_page_routes_serve_document_shell(client, path) -> None:
    resp = await client.get(path)

    assert resp.status == 200
    assert "shell" in await resp.text()
    assert resp.headers["Content-Type"] == "text/html; charset=utf-8"
    assert resp.headers["Cache-Control"] == "no-cache, no-store, must-revalidate"
    assert resp.headers["Pragma"] == "no-cache"
    assert resp.headers["Expires"] == "0"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "frame-ancestors 'none'" in resp.headers["Content-Security-Policy"]


@pytest.mark.asyncio
async def test_health_reports_flat_status(client) -> None:
    resp = await client.get("/health")

    assert resp.status == 200
    body = await resp.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "development"
    assert body["timestamp"].endswith("Z")
    assert body["uptime"] >= 0


@pytest.mark.asyncio
async def test_stylesheet_content_type_and_week_cache(client) -> None:
    resp = await client.get("/styles.css")

    assert resp.status == 200
    assert resp.headers["Content-Type"] == "text/css; charset=utf-8"
    assert resp.headers["Cache-Control"] == CACHE_WEEK


@pytest.mark.asyncio
async def test_image_is_cached_immutably(client) -> None:
    resp = await client.get("/logo.png")

    assert resp.status == 200
    assert resp.headers["Content-Type"] == "image/png"
    assert resp.headers["Cache-Control"] == CACHE_IMMUTABLE


@pytest.mark.asyncio
async def test_extensionless_path_falls_back_to_html(client) -> None:
    resp = await client.get("/about")

    assert resp.status == 200
    assert "about" in await resp.text()


@pytest.mark.asyncio
async def test_conditional_request_uses_etag(client) -> None:
    first = await client.get("/styles.css")
    etag = first.headers.get("ETag")
    assert etag

    second = await client.get("/styles.css", headers={"If-None-Match": etag})
    assert second.status == 304


@pytest.mark.asyncio
async def test_dotfiles_are_never_served(client) -> None:
    resp = await client.get("/.env", allow_redirects=False)

    assert resp.status == 302
    assert resp.headers["Location"] == "/"


@pytest.mark.asyncio
async def test_unknown_page_redirects_home(client) -> None:
    resp = await client.get("/missing/page", allow_redirects=False)

    assert resp.status == 302
    assert resp.headers["Location"] == "/"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_unknown_api_path_returns_json_404(client) -> None:
    resp = await client.get("/api/unknown?x=1", allow_redirects=False)

    assert resp.status == 404
    body = await resp.json()
    assert body == {
        "error": "Not Found",
        "message": "The requested resource was not found",
        "path": "/api/unknown?x=1",
    }


@pytest.mark.asyncio
async def test_unsupported_method_on_api_path_is_json_404(client) -> None:
    resp = await client.post("/api/x", allow_redirects=False)

    assert resp.status == 404
    assert (await resp.json())["error"] == "Not Found"


@pytest.mark.asyncio
async def test_request_id_is_generated_and_echoed(client) -> None:
    generated = await client.get("/health")
    assert len(generated.headers["X-Request-ID"]) == 32

    echoed = await client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert echoed.headers["X-Request-ID"] == "trace-123"


@pytest.mark.asyncio
async def test_missing_document_shell_is_a_server_error(tmp_path) -> None:
    app = create_app(load_settings(static_root=tmp_path, environment="production"))
    async with TestClient(TestServer(app)) as test_client:
        resp = await test_client.get("/")

        assert resp.status == 500
        assert await resp.text() == "Internal Server Error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "environment, expect_stack",
    [("development", True), ("production", False)],
)
async def test_error_middleware_hides_details_outside_development(tmp_path, environment, expect_stack) -> None:
    middleware = _make_error_middleware(load_settings(static_root=tmp_path, environment=environment))

    async def _broken(_request):
        raise RuntimeError("database password is hunter2")

    req = make_mocked_request("GET", "/boom", app=web.Application())
    resp = await middleware(req, _broken)

    assert resp.status == 500
    body = json.loads(resp.text)
    assert body["error"] == "Internal Server Error"
    assert ("stack" in body) is expect_stack
    if not expect_stack:
        assert "hunter2" not in resp.text


@pytest.mark.asyncio
async def test_error_middleware_lets_http_errors_through(tmp_path) -> None:
    middleware = _make_error_middleware(load_settings(static_root=tmp_path))

    async def _missing(_request):
        raise web.HTTPNotFound()

    req = make_mocked_request("GET", "/nope", app=web.Application())
    with pytest.raises(web.HTTPNotFound):
        await middleware(req, _missing)


@pytest.mark.parametrize("tail", ["../secret.txt", "css/../../x", "a\\b", "bad\x00name"])
def test_resolve_asset_rejects_escaping_paths(site_root, tail) -> None:
    result = resolve_asset(site_root, tail)

    assert not result.ok
    assert result.code == ErrorCode.FORBIDDEN.value


def test_resolve_asset_ignores_directories(site_root) -> None:
    (site_root / "img").mkdir()

    assert resolve_asset(site_root, "img").code == ErrorCode.NOT_FOUND.value
    assert resolve_asset(site_root, "").code == ErrorCode.NOT_FOUND.value


def test_resolve_asset_rejects_symlink_out_of_root(site_root, tmp_path) -> None:
    outside = tmp_path / "outside.css"
    outside.write_text("body {}", encoding="utf-8")
    (site_root / "linked.css").symlink_to(outside)

    result = resolve_asset(site_root, "linked.css")

    assert not result.ok
    assert result.code == ErrorCode.NOT_FOUND.value
