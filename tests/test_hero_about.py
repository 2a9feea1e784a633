"""Integration tests for /api/hero and /api/about."""

from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.models import CompanyInfo, CompanyStat, CompanyValue, SocialMedia


def hero_section(title: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "welcomeText": "Welcome to",
        "mainTitle": title,
        "highlightText": "digital products",
        "description": "We design and ship software.",
    }
    payload.update(overrides)
    return payload


def company_info(name: str) -> CompanyInfo:
    return CompanyInfo(
        company_name=name,
        founded_year="2015",
        mission="Build useful software.",
        vision="Software everyone can use.",
        about_header="About us",
        about_subheader="A small product studio.",
        story_text="Started in a garage.",
    )


# ---------------------------------------------------------------------------
# Hero
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_hero_empty(client: AsyncClient) -> None:
    resp = await client.get("/api/hero")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"hero": None, "socialMedia": []}


@pytest.mark.asyncio
async def test_creating_active_section_deactivates_others(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    first = await client.post(
        "/api/hero/sections", json=hero_section("Studio One"), headers=admin_headers
    )
    assert first.status_code == 201
    assert first.json()["message"] == "Hero section created successfully"

    second = await client.post(
        "/api/hero/sections", json=hero_section("Studio Two"), headers=admin_headers
    )
    assert second.json()["data"]["isActive"] is True

    listed = await client.get(
        "/api/hero/sections", params={"isActive": "true"}, headers=admin_headers
    )
    assert [row["mainTitle"] for row in listed.json()["data"]] == ["Studio Two"]

    hero = await client.get("/api/hero")
    assert hero.json()["data"]["hero"]["mainTitle"] == "Studio Two"


@pytest.mark.asyncio
async def test_inactive_section_leaves_active_one(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    await client.post("/api/hero/sections", json=hero_section("Live"), headers=admin_headers)
    await client.post(
        "/api/hero/sections",
        json=hero_section("Draft", isActive=False),
        headers=admin_headers,
    )
    hero = await client.get("/api/hero")
    assert hero.json()["data"]["hero"]["mainTitle"] == "Live"


@pytest.mark.asyncio
async def test_activating_section_by_update(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    live = await client.post(
        "/api/hero/sections", json=hero_section("Live"), headers=admin_headers
    )
    draft = await client.post(
        "/api/hero/sections",
        json=hero_section("Draft", isActive=False),
        headers=admin_headers,
    )
    draft_id = draft.json()["data"]["id"]

    resp = await client.put(
        f"/api/hero/sections/{draft_id}", json={"isActive": True}, headers=admin_headers
    )
    assert resp.json()["message"] == "Hero section updated successfully"

    old = await client.get(f"/api/hero/sections/{live.json()['data']['id']}", headers=admin_headers)
    assert old.json()["data"]["isActive"] is False
    hero = await client.get("/api/hero")
    assert hero.json()["data"]["hero"]["id"] == draft_id


@pytest.mark.asyncio
async def test_sections_are_admin_only(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    assert (await client.get("/api/hero/sections")).status_code == 401
    assert (await client.get("/api/hero/sections", headers=user_headers)).status_code == 403


@pytest.mark.asyncio
async def test_hero_social_links_active_in_order(client: AsyncClient, db: AsyncSession) -> None:
    db.add_all(
        [
            SocialMedia(name="GitHub", url="https://github.com/studio", order=2),
            SocialMedia(name="LinkedIn", url="https://linkedin.com/studio", order=1),
            SocialMedia(name="MySpace", url="https://myspace.com/studio", is_active=False),
        ]
    )
    await db.commit()

    resp = await client.get("/api/hero")
    links = resp.json()["data"]["socialMedia"]
    assert [link["name"] for link in links] == ["LinkedIn", "GitHub"]


@pytest.mark.asyncio
async def test_social_media_rejects_bad_url(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    resp = await client.post(
        "/api/hero/social-media",
        json={"name": "GitHub", "url": "github.com/studio"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "url"


# ---------------------------------------------------------------------------
# About
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_main_company_info_missing(client: AsyncClient) -> None:
    resp = await client.get("/api/about/company-info/main")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Company info not found"


@pytest.mark.asyncio
async def test_main_company_info_is_first_created(
    client: AsyncClient, db: AsyncSession
) -> None:
    db.add(company_info("Original Studio"))
    await db.flush()
    db.add(company_info("Renamed Studio"))
    await db.commit()

    resp = await client.get("/api/about/company-info/main")
    assert resp.json()["data"]["companyName"] == "Original Studio"


@pytest.mark.asyncio
async def test_complete_about_page(client: AsyncClient, db: AsyncSession) -> None:
    db.add(company_info("Studio"))
    db.add_all(
        [
            CompanyValue(
                icon="heart", title="Care", description="We care.", color="red", order=2
            ),
            CompanyValue(
                icon="bolt", title="Speed", description="We ship.", color="yellow", order=1
            ),
            CompanyStat(icon="users", number="40+", label="Clients", order=0),
        ]
    )
    await db.commit()

    resp = await client.get("/api/about/complete")
    data = resp.json()["data"]
    assert data["companyInfo"]["companyName"] == "Studio"
    assert [value["title"] for value in data["companyValues"]] == ["Speed", "Care"]
    assert data["timelineItems"] == []
    assert data["companyStats"][0]["number"] == "40+"


@pytest.mark.asyncio
async def test_timeline_item_crud(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    payload = {
        "year": "2019",
        "title": "First office",
        "description": "Moved downtown.",
        "achievement": "Team of ten",
        "extendedDescription": "We signed the lease in spring.",
    }
    resp = await client.post("/api/about/timeline-items", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["message"] == "Timeline item created successfully"
    item_id = resp.json()["data"]["id"]

    resp = await client.put(
        f"/api/about/timeline-items/{item_id}", json={"order": 3}, headers=admin_headers
    )
    assert resp.json()["data"]["order"] == 3

    resp = await client.delete(f"/api/about/timeline-items/{item_id}", headers=admin_headers)
    assert resp.json()["message"] == "Timeline item deleted successfully"
