"""Generic CRUD business logic.

One set of operations for every resource described by a ``Resource``.
Validation has already happened in the schema layer; these functions check
references, replace relation sets and flush. Rows are re-read after each
write so server-side timestamps and relations are loaded before
serialization.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.exceptions import (
    DependencyInUseError,
    FieldError,
    InvalidReferenceError,
    NotFoundError,
)
from cms_api.listing import RawListParams, resolve
from cms_api.logging import get_logger
from cms_api.repositories import base as repo
from cms_api.resource import IdRelation, NameRelation, Resource
from cms_api.schemas.common import UpdateModel
from cms_api.schemas.pagination import Paginated

logger = get_logger(__name__)


async def list_rows(
    db: AsyncSession,
    resource: Resource,
    params: RawListParams,
    where: Sequence[ColumnElement[bool]] = (),
) -> Paginated[Any]:
    query = resolve(params, resource.rules)
    return await repo.fetch_page(
        db,
        resource.model,
        query,
        search_fields=resource.rules.search_fields,
        where=where,
        options=resource.options(),
    )


async def get_row(db: AsyncSession, resource: Resource, pk: object, fresh: bool = False) -> Any:
    row = await repo.get_by_pk(db, resource.model, pk, resource.options(), fresh=fresh)
    if row is None:
        raise NotFoundError(resource.name, pk)
    return row


async def check_references(
    db: AsyncSession, resource: Resource, values: dict[str, Any]
) -> None:
    errors: list[FieldError] = []
    for reference in resource.references:
        value = values.get(reference.field)
        if value is None:
            continue
        if await repo.get_by_pk(db, reference.target, value) is None:
            errors.append(FieldError(reference.field, f"{reference.label} not found"))
    if errors:
        raise InvalidReferenceError(f"Invalid reference: {errors[0].message}", errors)


async def apply_relations(
    db: AsyncSession, resource: Resource, row: Any, values: dict[str, Any]
) -> None:
    """Replace every relation set present in ``values``."""
    for relation in resource.relations:
        if relation.field not in values or values[relation.field] is None:
            continue
        requested = values[relation.field]
        if isinstance(relation, NameRelation):
            related = await repo.rows_by_name(db, relation.target, requested)
        elif isinstance(relation, IdRelation):
            related, missing = await repo.rows_by_id(db, relation.target, requested)
            if missing:
                ids = ", ".join(map(str, missing))
                raise InvalidReferenceError(
                    f"{relation.label} not found: {ids}",
                    [FieldError(relation.field, f"Unknown {relation.label} ids: {ids}")],
                )
        setattr(row, relation.field, related)


def column_values(payload: BaseModel, resource: Resource) -> dict[str, Any]:
    return payload.model_dump(exclude_none=True, exclude=set(resource.relation_fields))


async def create_row(db: AsyncSession, resource: Resource, payload: BaseModel) -> Any:
    values = resource.prepared(column_values(payload, resource))
    await check_references(db, resource, values)
    row = resource.model(**values)
    relations = payload.model_dump(include=set(resource.relation_fields))
    await apply_relations(db, resource, row, relations)
    await repo.add(db, row)
    pk = repo.primary_key(resource.model).key
    logger.info("resource_created", resource=resource.name, id=getattr(row, pk))
    return await get_row(db, resource, getattr(row, pk), fresh=True)


async def update_row(
    db: AsyncSession, resource: Resource, pk: object, payload: UpdateModel
) -> Any:
    row = await get_row(db, resource, pk)
    changes = payload.changes()
    relations = {
        field: changes.pop(field) for field in resource.relation_fields if field in changes
    }
    changes = resource.prepared(changes)
    await check_references(db, resource, changes)
    for field, value in changes.items():
        setattr(row, field, value)
    await apply_relations(db, resource, row, relations)
    await db.flush()
    logger.info("resource_updated", resource=resource.name, id=pk, fields=sorted(changes))
    return await get_row(db, resource, pk, fresh=True)


async def check_dependents(db: AsyncSession, resource: Resource, pk: object) -> None:
    """Refuse the delete while any dependent row exists; every count is reported."""
    counts: dict[str, int] = {}
    in_use: list[str] = []
    for dependents in resource.dependents:
        count = await repo.count_rows(db, dependents.source, [dependents.column == pk])
        counts[dependents.count_key] = count
        if count:
            in_use.append(dependents.label)
    if in_use:
        message = f"Cannot delete {resource.name.lower()} with existing {' or '.join(in_use)}"
        raise DependencyInUseError(message, error=message, **counts)


async def delete_row(db: AsyncSession, resource: Resource, pk: object) -> None:
    row = await get_row(db, resource, pk)
    await check_dependents(db, resource, pk)
    await repo.delete(db, row)
    logger.info("resource_deleted", resource=resource.name, id=pk)
