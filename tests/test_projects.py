"""Integration tests for /api/projects."""

from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.listing import MAX_PAGE
from cms_api.models import Project, Role
from cms_api.security import create_access_token
from tests.seeds import category_count, technology_named


def project_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Analytics Portal",
        "subtitle": "Dashboards for operations",
        "categoryId": "web",
        "type": "Web Application",
        "description": "Self-service reporting for the operations team.",
        "technologies": ["React", "Python", "Kafka"],
        "features": ["SSO", "Exports"],
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_list_projects_second_page(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.get("/api/projects", params={"page": 2, "limit": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}
    assert len(body["data"]) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("limit, expected", [(0, 1), (1000, 100), (-4, 1)])
async def test_list_projects_clamps_limit(
    client: AsyncClient, seeded_projects: None, limit: int, expected: int
) -> None:
    resp = await client.get("/api/projects", params={"limit": limit})
    assert resp.status_code == 200
    assert resp.json()["pagination"]["limit"] == expected


@pytest.mark.asyncio
async def test_list_projects_page_below_one_is_first_page(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"page": 0})
    assert resp.json()["pagination"]["page"] == 1


@pytest.mark.asyncio
async def test_list_projects_huge_page_is_empty(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"page": "10000000000000000000", "limit": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"] == []
    assert body["pagination"]["page"] == MAX_PAGE
    assert body["pagination"]["total"] == 12


@pytest.mark.asyncio
async def test_list_projects_filters_by_category(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"category": "mobile"})
    body = resp.json()
    assert body["pagination"]["total"] == 4
    assert {item["categoryId"] for item in body["data"]} == {"mobile"}


@pytest.mark.asyncio
async def test_list_projects_filters_by_status(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.get("/api/projects", params={"status": "LIVE"})
    body = resp.json()
    assert body["pagination"]["total"] == 4
    assert {item["status"] for item in body["data"]} == {"LIVE"}


@pytest.mark.asyncio
async def test_list_projects_unknown_status_is_rejected(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"status": "SHIPPED"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "status"


@pytest.mark.asyncio
async def test_list_projects_search_accepts_q_and_search(
    client: AsyncClient, seeded_projects: None
) -> None:
    by_q = await client.get("/api/projects", params={"q": "mobile project"})
    by_search = await client.get("/api/projects", params={"search": "MOBILE PROJECT"})
    assert by_q.json()["pagination"]["total"] == 4
    assert by_search.json()["pagination"]["total"] == 4


@pytest.mark.asyncio
async def test_list_projects_sorts_by_title(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.get("/api/projects", params={"sort": "title:asc", "limit": 3})
    titles = [item["title"] for item in resp.json()["data"]]
    assert titles == ["Mobile Project 01", "Mobile Project 02", "Mobile Project 03"]


@pytest.mark.asyncio
async def test_list_projects_unknown_sort_falls_back_to_default(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"sort": "password:asc"})
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 12


@pytest.mark.asyncio
async def test_list_projects_returns_flat_relation_arrays(
    client: AsyncClient, seeded_projects: None
) -> None:
    resp = await client.get("/api/projects", params={"q": "Web Project 01"})
    project = resp.json()["data"][0]
    assert sorted(project["technologies"]) == ["Python", "React"]
    assert project["features"] == []
    assert project["category"] == {"id": "web", "label": "Web Development"}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_get_project_not_found(client: AsyncClient) -> None:
    resp = await client.get("/api/projects/999")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Project not found"}


@pytest.mark.asyncio
async def test_get_project_twice_returns_identical_json(
    client: AsyncClient, seeded_projects: AsyncSession
) -> None:
    # Blog posts are the exception: reading one counts a view
    project_id = (await seeded_projects.execute(select(Project.id).limit(1))).scalar_one()

    first = await client.get(f"/api/projects/{project_id}")
    second = await client.get(f"/api/projects/{project_id}")
    assert first.status_code == 200
    assert first.content == second.content


@pytest.mark.asyncio
async def test_get_project_rejects_non_positive_id(client: AsyncClient) -> None:
    resp = await client.get("/api/projects/0")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_project_statistics(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.get("/api/projects/statistics")
    data = resp.json()["data"]
    assert data["totalProjects"] == 12
    by_status = {row["status"]: row["count"] for row in data["projectsByStatus"]}
    assert by_status == {"BETA": 4, "DEVELOPMENT": 4, "LIVE": 4}
    by_category = {row["categoryId"]: row["count"] for row in data["projectsByCategory"]}
    assert by_category == {"mobile": 4, "web": 8}
    assert len(data["recentProjects"]) == 5


@pytest.mark.asyncio
async def test_project_categories(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.get("/api/projects/categories")
    labels = [category["label"] for category in resp.json()["data"]]
    assert labels == ["Mobile Apps", "Web Development"]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_create_project_round_trips_relations(
    client: AsyncClient, seeded_projects: AsyncSession, admin_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/projects", json=project_payload(), headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Project created successfully"
    data = body["data"]
    assert sorted(data["technologies"]) == ["Kafka", "Python", "React"]
    assert sorted(data["features"]) == ["Exports", "SSO"]
    assert data["status"] == "DEVELOPMENT"
    assert data["createdAt"] is not None

    # Unknown names are created, known ones reused
    assert await technology_named(seeded_projects, "Kafka") is not None
    assert await category_count(seeded_projects, "web") == 9


@pytest.mark.asyncio
async def test_create_project_missing_field_names_it(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    payload = project_payload()
    del payload["title"]
    resp = await client.post("/api/projects", json=payload, headers=admin_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert "title" in [error["field"] for error in body["errors"]]


@pytest.mark.asyncio
async def test_create_project_unknown_category(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/projects", json=project_payload(categoryId="games"), headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "categoryId"


@pytest.mark.asyncio
async def test_update_project_empty_body(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.put("/api/projects/1", json={}, headers=admin_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert body["errors"] == [
        {"field": "body", "message": "At least one field must be provided for update"}
    ]


@pytest.mark.asyncio
async def test_update_project_moves_category_count(
    client: AsyncClient, seeded_projects: AsyncSession, admin_headers: dict[str, str]
) -> None:
    resp = await client.put(
        "/api/projects/1", json={"categoryId": "mobile"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["category"]["id"] == "mobile"
    assert await category_count(seeded_projects, "web") == 7
    assert await category_count(seeded_projects, "mobile") == 5


@pytest.mark.asyncio
async def test_update_project_replaces_technologies(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.put(
        "/api/projects/1", json={"technologies": ["Go"]}, headers=admin_headers
    )
    assert resp.json()["data"]["technologies"] == ["Go"]


@pytest.mark.asyncio
async def test_update_project_sets_and_clears_metrics(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.put(
        "/api/projects/1", json={"metrics": {"users": "10k+"}}, headers=admin_headers
    )
    assert resp.json()["data"]["metrics"]["users"] == "10k+"

    resp = await client.put("/api/projects/1", json={"metrics": None}, headers=admin_headers)
    assert resp.json()["data"]["metrics"] is None


@pytest.mark.asyncio
async def test_delete_project_decrements_category(
    client: AsyncClient, seeded_projects: AsyncSession, admin_headers: dict[str, str]
) -> None:
    resp = await client.delete("/api/projects/1", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Project deleted successfully"}
    assert (await client.get("/api/projects/1")).status_code == 404
    assert await category_count(seeded_projects, "web") == 7


@pytest.mark.asyncio
async def test_add_image_appends_after_last(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    url = "/api/projects/1/images"
    first = await client.post(
        url, json={"url": "https://cdn.example.com/a.png"}, headers=admin_headers
    )
    second = await client.post(
        url, json={"url": "https://cdn.example.com/b.png"}, headers=admin_headers
    )
    assert first.status_code == 201
    assert second.json()["data"]["order"] == first.json()["data"]["order"] + 1

    image_id = second.json()["data"]["id"]
    resp = await client.delete(f"/api/projects/images/{image_id}", headers=admin_headers)
    assert resp.status_code == 200
    project = (await client.get("/api/projects/1")).json()["data"]
    assert [image["url"] for image in project["images"]] == ["https://cdn.example.com/a.png"]


@pytest.mark.asyncio
async def test_add_and_delete_review(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/projects/2/reviews",
        json={"author": "Dana", "content": "Great work", "rating": 5},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    review_id = resp.json()["data"]["id"]

    project = (await client.get("/api/projects/2")).json()["data"]
    assert [review["author"] for review in project["reviews"]] == ["Dana"]

    resp = await client.delete(f"/api/projects/reviews/{review_id}", headers=admin_headers)
    assert resp.status_code == 200
    resp = await client.delete(f"/api/projects/reviews/{review_id}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_review_rating_out_of_range(
    client: AsyncClient, seeded_projects: None, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/projects/2/reviews",
        json={"author": "Dana", "content": "Great work", "rating": 6},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "rating"


# ---------------------------------------------------------------------------
# Auth gate
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_create_project_without_token(client: AsyncClient, seeded_projects: None) -> None:
    resp = await client.post("/api/projects", json=project_payload())
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_create_project_as_regular_user(
    client: AsyncClient, seeded_projects: None, user_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/projects", json=project_payload(), headers=user_headers)
    assert resp.status_code == 403
    assert "ADMIN" in resp.json()["message"]


@pytest.mark.asyncio
async def test_create_project_with_expired_token(
    client: AsyncClient, seeded_projects: None, admin_user: Any
) -> None:
    token = create_access_token(
        user_id=admin_user.id, email=admin_user.email, role=Role.ADMIN, expires_in=-10
    )
    resp = await client.post(
        "/api/projects", json=project_payload(), headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Token expired"


@pytest.mark.asyncio
async def test_token_for_deleted_user(client: AsyncClient, seeded_projects: None) -> None:
    token = create_access_token(user_id=4242, email="gone@example.com", role=Role.ADMIN)
    resp = await client.post(
        "/api/projects", json=project_payload(), headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "User no longer exists"
