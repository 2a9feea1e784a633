"""Tests for image deletion at the media provider."""

import pytest
from httpx import AsyncClient, Response

from cms_api.exceptions import MediaStorageError
from cms_api.main import app
from cms_api.media import DestroyResult, extract_public_id
from tests.factories import FakeMediaStorage

HERO_URL = "https://res.cloudinary.com/demo/image/upload/v1712345678/cms/hero.png"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (HERO_URL, "cms/hero"),
        ("https://res.cloudinary.com/demo/image/upload/sample.jpg", "sample"),
        (
            "https://res.cloudinary.com/demo/image/upload/c_fill,w_300/v17/team/maya.webp",
            "team/maya",
        ),
        (
            "https://res.cloudinary.com/demo/image/upload/c_fill,w_300/portfolio/a.png",
            "portfolio/a",
        ),
        ("https://example.com/images/hero.png", None),
        ("https://res.cloudinary.com/demo/image/fetch/hero.png", None),
        ("https://res.cloudinary.com/demo/image/upload/", None),
    ],
)
def test_extract_public_id(url: str, expected: str | None) -> None:
    assert extract_public_id(url) == expected


async def delete(
    client: AsyncClient, path: str, payload: object, headers: dict[str, str]
) -> Response:
    # httpx only sends a body on DELETE through the generic request method
    return await client.request("DELETE", f"/api/media{path}", json=payload, headers=headers)


@pytest.mark.asyncio
async def test_delete_image(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    resp = await delete(client, "/image", {"imageUrl": HERO_URL}, admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Image deleted successfully and cache invalidated"
    assert body["data"] == {
        "publicId": "cms/hero",
        "imageUrl": HERO_URL,
        "cacheInvalidated": True,
    }
    assert media_storage.destroyed == ["cms/hero"]


@pytest.mark.asyncio
async def test_delete_image_with_explicit_public_id(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    payload = {"imageUrl": "https://cdn.example.com/hero.png", "publicId": "legacy/hero"}
    resp = await delete(client, "/image", payload, admin_headers)
    assert resp.status_code == 200
    assert media_storage.destroyed == ["legacy/hero"]


@pytest.mark.asyncio
async def test_delete_image_unresolvable_url(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    resp = await delete(
        client, "/image", {"imageUrl": "https://cdn.example.com/hero.png"}, admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "imageUrl"
    assert media_storage.destroyed == []


@pytest.mark.asyncio
async def test_delete_image_not_found(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    media_storage.results["cms/hero"] = "not found"
    resp = await delete(client, "/image", {"imageUrl": HERO_URL}, admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Image not found in media storage"


@pytest.mark.asyncio
async def test_delete_image_provider_failure(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    media_storage.results["cms/hero"] = "error"
    resp = await delete(client, "/image", {"imageUrl": HERO_URL}, admin_headers)
    assert resp.status_code == 502
    assert resp.json()["message"] == "Media provider returned: error"


@pytest.mark.asyncio
async def test_media_requires_admin(client: AsyncClient, user_headers: dict[str, str]) -> None:
    resp = await delete(client, "/image", {"imageUrl": HERO_URL}, user_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_images_reports_each_outcome(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    media_storage.results["cms/gone"] = "not found"
    payload = {
        "images": [
            {"imageUrl": HERO_URL},
            {"imageUrl": "https://res.cloudinary.com/demo/image/upload/v1/cms/gone.png"},
            {"imageUrl": "https://cdn.example.com/other.png"},
        ]
    }
    resp = await delete(client, "/images", payload, admin_headers)
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "1/3 images deleted successfully"
    assert body["data"]["summary"] == {"total": 3, "successful": 1, "failed": 2}

    results = body["data"]["results"]
    assert results[1]["result"] == "not found"
    assert results[2]["publicId"] is None
    assert results[2]["error"] == "Unable to extract public_id from URL"


@pytest.mark.asyncio
async def test_delete_images_continues_after_provider_error(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    class FlakyStorage(FakeMediaStorage):
        async def destroy(self, public_id: str) -> DestroyResult:
            if public_id == "cms/hero":
                raise MediaStorageError("Media provider error: timeout")
            return await super().destroy(public_id)

    storage = FlakyStorage()
    app.state.media_storage = storage
    payload = {
        "images": [
            {"imageUrl": HERO_URL},
            {"imageUrl": "https://res.cloudinary.com/demo/image/upload/v1/cms/logo.png"},
        ]
    }
    resp = await delete(client, "/images", payload, admin_headers)
    results = resp.json()["data"]["results"]
    assert results[0]["error"] == "Media provider error: timeout"
    assert results[1]["success"] is True
    assert storage.destroyed == ["cms/logo"]


@pytest.mark.asyncio
async def test_delete_images_all_failed(
    client: AsyncClient, media_storage: FakeMediaStorage, admin_headers: dict[str, str]
) -> None:
    payload = {"images": [{"imageUrl": "https://cdn.example.com/a.png"}]}
    resp = await delete(client, "/images", payload, admin_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_delete_images_limits_batch_size(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    payload = {"images": [{"imageUrl": HERO_URL}] * 11}
    resp = await delete(client, "/images", payload, admin_headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "images"
