"""Service, statistic and contact card endpoints."""

from fastapi import APIRouter

from cms_api.crud import mount_crud
from cms_api.listing import FilterSpec, ListRules, SortOrder, SortSpec, parse_bool
from cms_api.models import Contact, Feature, Service, Statistic, Technology
from cms_api.resource import IdRelation, NameRelation, Resource
from cms_api.schemas.content import (
    ContactCreate,
    ContactRead,
    ContactUpdate,
    StatisticCreate,
    StatisticRead,
    StatisticUpdate,
)
from cms_api.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate

SERVICES = Resource(
    name="Service",
    model=Service,
    read=ServiceRead,
    create=ServiceCreate,
    update=ServiceUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "title": "title", "createdAt": "created_at"},
        default_sort=SortSpec("id", SortOrder.ASC),
        search_fields=("title", "subtitle", "description"),
    ),
    relations=(
        NameRelation("features", Feature),
        IdRelation("technologies", Technology, "Technology"),
    ),
    loads=("features", "technologies"),
)

STATISTICS = Resource(
    name="Statistic",
    model=Statistic,
    read=StatisticRead,
    create=StatisticCreate,
    update=StatisticUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "order": "order", "label": "label", "createdAt": "created_at"},
        default_sort=SortSpec("order", SortOrder.ASC),
        filters={"isActive": FilterSpec("is_active", cast=parse_bool)},
        search_fields=("label", "number"),
    ),
)

CONTACTS = Resource(
    name="Contact",
    model=Contact,
    read=ContactRead,
    create=ContactCreate,
    update=ContactUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "title": "title", "createdAt": "created_at"},
        default_sort=SortSpec("id", SortOrder.ASC),
        search_fields=("title", "color"),
    ),
)

services_router = mount_crud(APIRouter(prefix="/services", tags=["services"]), SERVICES)
statistics_router = mount_crud(APIRouter(prefix="/statistics", tags=["statistics"]), STATISTICS)
contacts_router = mount_crud(APIRouter(prefix="/contacts", tags=["contacts"]), CONTACTS)
