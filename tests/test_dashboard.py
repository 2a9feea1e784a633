"""Integration tests for /api/dashboard."""

from collections import Counter

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_dashboard_requires_admin(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    assert (await client.get("/api/dashboard/stats")).status_code == 401
    resp = await client.get("/api/dashboard/stats", headers=user_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_on_empty_database(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/dashboard/stats", headers=admin_headers)
    data = resp.json()["data"]
    assert data["totalProjects"] == 0
    assert data["averageRating"] == 0.0
    assert data["projectsByStatus"] == {}
    assert data["technologyUsage"] == []
    assert data["recentActivities"] == []


@pytest.mark.asyncio
async def test_dashboard_aggregates(
    client: AsyncClient,
    seeded_projects: None,
    seeded_clients: None,
    seeded_blog: None,
    admin_headers: dict[str, str],
) -> None:
    resp = await client.get("/api/dashboard/stats", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]

    assert data["totalProjects"] == 12
    assert data["totalBlogPosts"] == 3
    assert data["totalClients"] == 3
    assert data["activeClients"] == 2
    assert data["averageRating"] == 4.5
    assert data["projectsByStatus"] == {"BETA": 4, "DEVELOPMENT": 4, "LIVE": 4}
    assert data["projectStats"] == {
        "totalProjects": 12,
        "completedProjects": 4,
        "inProgressProjects": 8,
    }
    assert data["technologyUsage"] == [
        {"name": "React", "count": 8},
        {"name": "Python", "count": 4},
        {"name": "Swift", "count": 4},
    ]


@pytest.mark.asyncio
async def test_dashboard_recent_activities(
    client: AsyncClient,
    seeded_projects: None,
    seeded_clients: None,
    seeded_blog: None,
    admin_headers: dict[str, str],
) -> None:
    resp = await client.get("/api/dashboard/stats", headers=admin_headers)
    activities = resp.json()["data"]["recentActivities"]

    assert len(activities) == 8
    assert Counter(activity["type"] for activity in activities) == {
        "project": 3,
        "blog": 3,
        "testimonial": 2,
    }
    blog_titles = {a["title"] for a in activities if a["type"] == "blog"}
    assert "New Blog Post: Draft Notes" not in blog_titles
    testimonial = next(a for a in activities if a["type"] == "testimonial")
    assert testimonial["title"].startswith("New Testimonial from ")
    assert testimonial["description"].endswith("...")
