"""Shared helpers for API tests."""
from httpx import AsyncClient

# Constant for non-existent entity ID
FAKE_UUID = "00000000-0000-0000-0000-000000000000"


def assert_error(response_json: dict, status: int, message: str | None = None) -> None:
    """Check the common error envelope."""
    assert set(response_json) == {"timestamp", "status", "error", "message"}
    assert response_json["status"] == status
    if message is not None:
        assert response_json["message"] == message


async def create_bookmark(
    client: AsyncClient,
    url: str,
    tags: list[str] | None = None,
    **fields: object,
) -> dict:
    """Create a bookmark through the API and return its JSON."""
    response = await client.post(
        "/api/bookmarks", json={"url": url, "tags": tags or [], **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_category(
    client: AsyncClient,
    title: str,
    tags: list[str] | None = None,
    is_public: bool = False,
) -> dict:
    """Create a category through the API and return its JSON."""
    response = await client.post(
        "/api/categories",
        json={"title": title, "tags": tags or [], "is_public": is_public},
    )
    assert response.status_code == 201, response.text
    return response.json()
