"""Tests for application assembly, middleware and error shaping."""

import pytest
from httpx import ASGITransport, AsyncClient

from sellit.main import APP_NAME, create_app, format_validation_errors
from sellit.services import categories as category_service
from sellit.services.categories import DEFAULT_CATEGORY_NAMES
from tests.helpers import auth_headers


def test_format_validation_errors_strips_location_and_prefix():
    errors = format_validation_errors(
        [
            {"loc": ("body", "price"), "msg": "Input should be greater than 0"},
            {"loc": ("body",), "msg": "Value error, Provide exactly one of categoryId or categoryName"},
            {"loc": ("query", "token"), "msg": "Field required"},
            {"loc": ("body", "images", 0, "url"), "msg": "Field required"},
        ]
    )
    assert errors == [
        {"path": "price", "msg": "Input should be greater than 0"},
        {"path": "body", "msg": "Provide exactly one of categoryId or categoryName"},
        {"path": "token", "msg": "Field required"},
        {"path": "images.0.url", "msg": "Field required"},
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/api/health"])
async def test_health(client, path):
    response = await client.get(path)
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "name": APP_NAME}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_generated_when_absent(client):
    response = await client.get("/health")
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_unknown_route_uses_message_shape(client):
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_validation_errors_are_collected(client, verified_user):
    response = await client.post(
        "/api/products",
        json={"title": "", "description": "", "price": 0, "categoryName": "phones"},
        headers=auth_headers(verified_user),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert {error["path"] for error in body["errors"]} >= {"title", "description", "price"}


@pytest.mark.asyncio
async def test_unhandled_exception_hides_detail(clean_database, mailer):
    app = create_app(database=clean_database, mailer=mailer)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_test_utils_not_mounted_unless_enabled(clean_database, mailer):
    app = create_app(database=clean_database, mailer=mailer, enable_test_utils=False)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/test-utils/reset")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_lifespan_seeds_default_categories(clean_database, mailer, db):
    app = create_app(database=clean_database, mailer=mailer, enable_test_utils=True)

    async with app.router.lifespan_context(app):
        names = [c.name for c in await category_service.list_categories(db)]

    assert sorted(names) == sorted(DEFAULT_CATEGORY_NAMES)
    # Injected handles stay open for the caller
    assert app.state.database is clean_database
