"""Tests for the common error envelope."""
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from core.mail import get_mail_sender
from tests.api.conftest import assert_error


async def test_unknown_route_is_404_envelope(anon_client: AsyncClient) -> None:
    """Unknown routes use the envelope too."""
    response = await anon_client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert_error(response.json(), 404)
    assert response.json()["error"] == "Not Found"


async def test_method_not_allowed_envelope(client: AsyncClient) -> None:
    """Wrong methods are reported with the envelope."""
    response = await client.patch("/api/bookmarks")

    assert response.status_code == 405
    assert_error(response.json(), 405)


async def test_validation_error_names_the_field(client: AsyncClient) -> None:
    """422 messages point at the offending field."""
    response = await client.post("/api/categories", json={"tags": []})

    assert response.status_code == 422
    assert_error(response.json(), 422)
    assert response.json()["error"] == "Unprocessable Entity"
    assert response.json()["message"].startswith("title:")


async def test_malformed_json_is_422(client: AsyncClient) -> None:
    """Unparseable bodies fail validation."""
    response = await client.post(
        "/api/bookmarks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert_error(response.json(), 422)


async def test_unexpected_error_is_generic_500(app: FastAPI) -> None:
    """Unhandled exceptions become a 500 without internal details."""
    def broken_mail_sender() -> None:
        raise RuntimeError("smtp password is hunter2")

    app.dependency_overrides[get_mail_sender] = broken_mail_sender
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        response = await test_client.post(
            "/email/send-code", json={"email": "someone@example.com"},
        )

    assert response.status_code == 500
    assert_error(response.json(), 500, "Internal server error")
    assert "hunter2" not in response.text
