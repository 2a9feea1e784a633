"""Integration tests for /api/categories."""

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.models import Category
from tests.factories import make_category
from tests.seeds import category_count


@pytest.mark.asyncio
async def test_list_categories_computes_project_count(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/categories")
    assert resp.status_code == 200
    rows = {row["id"]: row for row in resp.json()["data"]}
    assert rows["web"]["projectCount"] == 8
    assert rows["mobile"]["projectCount"] == 4


@pytest.mark.asyncio
async def test_list_categories_default_order_is_label(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/categories")
    assert [row["label"] for row in resp.json()["data"]] == ["Mobile Apps", "Web Development"]


@pytest.mark.asyncio
async def test_get_category_flattens_project_relations(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/categories/mobile")
    data = resp.json()["data"]
    assert len(data["projects"]) == 4
    assert all(project["technologies"] == ["Swift"] for project in data["projects"])


@pytest.mark.asyncio
async def test_get_category_rejects_malformed_id(client: AsyncClient) -> None:
    resp = await client.get("/api/categories/Not_A_Slug")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_category(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await client.post(
        "/api/categories", json={"id": "ai", "label": "Machine Learning"}, headers=admin_headers
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["id"] == "ai"
    assert data["count"] == 0


@pytest.mark.asyncio
async def test_create_duplicate_category_conflicts(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/categories", json={"id": "web", "label": "Web again"}, headers=admin_headers
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Category ID already exists"


@pytest.mark.asyncio
async def test_update_category_label(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.put(
        "/api/categories/web", json={"label": "Web Platforms"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["label"] == "Web Platforms"


@pytest.mark.asyncio
async def test_delete_category_in_use(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.delete("/api/categories/web", headers=admin_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Cannot delete category with existing projects"
    assert body["projectCount"] == 8


@pytest.mark.asyncio
async def test_delete_empty_category(
    client: AsyncClient, db: AsyncSession, admin_headers: dict[str, str]
) -> None:
    db.add(make_category(id="empty", label="Empty"))
    await db.commit()

    resp = await client.delete("/api/categories/empty", headers=admin_headers)
    assert resp.status_code == 200
    assert (await client.get("/api/categories/empty")).status_code == 404


@pytest.mark.asyncio
async def test_recalculate_repairs_stale_counts(
    client: AsyncClient, seeded_projects: AsyncSession, admin_headers: dict[str, str]
) -> None:
    await seeded_projects.execute(update(Category).values(count=0))
    await seeded_projects.commit()

    resp = await client.post("/api/categories/recalculate", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data == {"updated": 2, "counts": {"mobile": 4, "web": 8}}
    assert await category_count(seeded_projects, "web") == 8


@pytest.mark.asyncio
async def test_recalculate_requires_admin(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/categories/recalculate", headers=user_headers)
    assert resp.status_code == 403
