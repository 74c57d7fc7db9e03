"""
GeoCats Backend — Validation Gate and Middleware Tests
========================================================

What:  The 400 message format for failed field rules, the common error
       body, request ids, rate limiting and the health probe.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from geocats.main import format_validation_errors
from geocats.middleware.rate_limit import RateLimitMiddleware
from geocats.middleware.request_id import RequestIDMiddleware


class TestMessageFormat:

    def test_single_failure(self):
        errors = [{"loc": ("body", "weight"), "msg": "Field required"}]
        assert format_validation_errors(errors) == "Field required: weight"

    def test_failures_are_joined(self):
        errors = [
            {"loc": ("body", "cat_name"), "msg": "Field required"},
            {"loc": ("query", "topRight"), "msg": "Field required"},
        ]
        assert format_validation_errors(errors) == "Field required: cat_name, Field required: topRight"

    def test_value_error_prefix_dropped(self):
        errors = [{"loc": ("body", "password"), "msg": "Value error, Password must be at least 5 characters"}]
        assert format_validation_errors(errors) == "Password must be at least 5 characters: password"


class TestValidationGate:

    @pytest.mark.asyncio
    async def test_invalid_body_is_400_and_never_stored(self, test_client):
        response = await test_client.post(
            "/api/users", json={"user_name": "mia", "email": "not-an-email", "password": "abc"},
        )

        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"error", "message", "details", "request_id"}
        assert body["error"] == "validation_error"
        assert ": email" in body["message"]
        assert ": password" in body["message"]

        listing = await test_client.get("/api/users")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_multipart_missing_fields(self, test_client, alice_headers, sample_image_bytes):
        response = await test_client.post(
            "/api/cats",
            data={"cat_name": "Tom"},
            files={"file": ("photo.jpg", sample_image_bytes, "image/jpeg")},
            headers=alice_headers,
        )

        assert response.status_code == 400
        message = response.json()["message"]
        for field in ("weight", "birthdate", "lat", "lng"):
            assert f"Field required: {field}" in message
        assert (await test_client.get("/api/cats")).json() == []

    @pytest.mark.asyncio
    async def test_bad_path_id(self, test_client):
        response = await test_client.get("/api/cats/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["message"].endswith(": cat_id")

    @pytest.mark.asyncio
    async def test_non_positive_weight(self, test_client, alice, alice_headers, make_cat):
        cat = await make_cat(alice)
        response = await test_client.put(
            f"/api/cats/{cat.id}", json={"weight": 0}, headers=alice_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"].endswith(": weight")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("weight", ["inf", "-inf", "nan"])
    async def test_non_finite_weight_on_create(self, test_client, alice_headers, sample_image_bytes, weight):
        response = await test_client.post(
            "/api/cats",
            data={
                "cat_name": "Tom",
                "weight": weight,
                "birthdate": "2020-05-17",
                "lat": "60.17",
                "lng": "24.94",
            },
            files={"file": ("photo.jpg", sample_image_bytes, "image/jpeg")},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"].endswith(": weight")
        assert (await test_client.get("/api/cats")).json() == []

    @pytest.mark.asyncio
    async def test_non_finite_weight_on_update(self, test_client, alice, alice_headers, make_cat):
        cat = await make_cat(alice)

        response = await test_client.put(
            f"/api/cats/{cat.id}", json={"weight": "inf"}, headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"].endswith(": weight")
        assert (await test_client.get(f"/api/cats/{cat.id}")).json()["weight"] == 4.2

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_body(self, test_client):
        response = await test_client.get("/api/dogs")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/cats", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/cats")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        app = FastAPI()

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        app.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60)
        app.add_middleware(RequestIDMiddleware)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            limited = await client.get("/ping")

        assert limited.status_code == 429
        assert int(limited.headers["Retry-After"]) > 0
        assert limited.json()["error"] == "rate_limit_exceeded"
        assert limited.json()["request_id"] == limited.headers["X-Request-ID"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
