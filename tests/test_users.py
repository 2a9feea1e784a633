"""Integration tests for /api/users (admin only)."""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.models import Role
from tests.factories import make_user


@pytest_asyncio.fixture
async def many_users(db: AsyncSession, admin_user: object) -> AsyncSession:
    db.add_all(
        [
            make_user(name="Alice Editor", email="alice@example.com"),
            make_user(name="Bob Editor", email="bob@example.com"),
            make_user(name="Carol Admin", email="carol@example.com", role=Role.ADMIN),
        ]
    )
    await db.commit()
    return db


@pytest.mark.asyncio
async def test_users_require_admin(client: AsyncClient, user_headers: dict[str, str]) -> None:
    assert (await client.get("/api/users")).status_code == 401
    assert (await client.get("/api/users", headers=user_headers)).status_code == 403


@pytest.mark.asyncio
async def test_list_users_filters_by_role(
    client: AsyncClient, many_users: None, admin_headers: dict[str, str]
) -> None:
    admins = await client.get("/api/users", params={"role": "admin"}, headers=admin_headers)
    everyone = await client.get("/api/users", params={"role": "all"}, headers=admin_headers)
    assert admins.json()["pagination"]["total"] == 2
    assert {user["role"] for user in admins.json()["data"]} == {"ADMIN"}
    assert everyone.json()["pagination"]["total"] == 4


@pytest.mark.asyncio
async def test_list_users_search(
    client: AsyncClient, many_users: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/users", params={"q": "editor"}, headers=admin_headers)
    names = sorted(user["name"] for user in resp.json()["data"])
    assert names == ["Alice Editor", "Bob Editor"]


@pytest.mark.asyncio
async def test_create_update_delete_user(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/users",
        json={
            "name": "Dana",
            "email": "dana@example.com",
            "password": "secret99",
            "role": "ADMIN",
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201
    user_id = resp.json()["data"]["id"]
    assert resp.json()["data"]["role"] == "ADMIN"

    resp = await client.put(
        f"/api/users/{user_id}", json={"role": "USER"}, headers=admin_headers
    )
    assert resp.json()["data"]["role"] == "USER"

    resp = await client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert resp.json()["message"] == "User deleted successfully"
    assert (await client.get(f"/api/users/{user_id}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_update_user_email_taken(
    client: AsyncClient, many_users: None, admin_headers: dict[str, str]
) -> None:
    listing = await client.get("/api/users", params={"q": "alice"}, headers=admin_headers)
    alice_id = listing.json()["data"][0]["id"]
    resp = await client.put(
        f"/api/users/{alice_id}", json={"email": "bob@example.com"}, headers=admin_headers
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_bulk_delete(
    client: AsyncClient, many_users: None, admin_headers: dict[str, str]
) -> None:
    listing = await client.get("/api/users", params={"q": "editor"}, headers=admin_headers)
    ids = [user["id"] for user in listing.json()["data"]]

    resp = await client.post(
        "/api/users/bulk-delete", json={"ids": [*ids, 9999]}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"] == {"deletedCount": 2}
    assert resp.json()["message"] == "2 user(s) deleted successfully"


@pytest.mark.asyncio
async def test_bulk_delete_nothing_found(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/users/bulk-delete", json={"ids": [9998]}, headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_bulk_delete_requires_ids(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/users/bulk-delete", json={"ids": []}, headers=admin_headers)
    assert resp.status_code == 400
