"""Generic data-access helpers shared by every repository.

Pure query functions: each takes a session and returns models or scalars.
Writes flush but never commit; the session dependency owns the transaction.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import ColumnElement, Select, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption

from cms_api.listing import FilterClause, ListQuery, Match, SortOrder, SortSpec
from cms_api.schemas.pagination import Paginated


def column(model: type[Any], attribute: str) -> InstrumentedAttribute[Any]:
    return getattr(model, attribute)  # type: ignore[no-any-return]


def primary_key(model: type[Any]) -> Any:
    return inspect(model).primary_key[0]


def filter_condition(model: type[Any], clause: FilterClause) -> ColumnElement[bool]:
    target = column(model, clause.attribute)
    if clause.match is Match.IEXACT:
        return func.lower(target) == str(clause.value).lower()
    if clause.match is Match.CONTAINS:
        return target.icontains(str(clause.value), autoescape=True)
    return target == clause.value


def search_condition(
    model: type[Any], fields: Iterable[str], term: str
) -> ColumnElement[bool]:
    """Case-insensitive substring match on any field; ``%`` and ``_`` match literally."""
    return or_(*(column(model, name).icontains(term, autoescape=True) for name in fields))


def conditions(
    model: type[Any],
    query: ListQuery,
    search_fields: Sequence[str] = (),
    where: Sequence[ColumnElement[bool]] = (),
) -> list[ColumnElement[bool]]:
    """All predicates a listing applies: fixed ``where``, filters, then search."""
    result = list(where)
    result.extend(filter_condition(model, clause) for clause in query.filters)
    if query.search and search_fields:
        result.append(search_condition(model, search_fields, query.search))
    return result


def apply_sort[S: Select[Any]](stmt: S, model: type[Any], sort: SortSpec) -> S:
    target = column(model, sort.field)
    ordering = target.desc() if sort.order is SortOrder.DESC else target.asc()
    # Primary key as tiebreaker so pages never overlap
    return stmt.order_by(ordering, primary_key(model))


async def count_rows(
    db: AsyncSession, model: type[Any], predicates: Sequence[ColumnElement[bool]] = ()
) -> int:
    stmt = select(func.count()).select_from(model).where(*predicates)
    result = await db.execute(stmt)
    return result.scalar_one()


async def fetch_page[M](
    db: AsyncSession,
    model: type[M],
    query: ListQuery,
    *,
    search_fields: Sequence[str] = (),
    where: Sequence[ColumnElement[bool]] = (),
    options: Sequence[ExecutableOption] = (),
) -> Paginated[M]:
    """Return one page of ``model`` plus the total for the same predicate.

    Both statements run on the request's session, one after the other: an
    AsyncSession does not allow overlapping statements.
    """
    predicates = conditions(model, query, search_fields, where)
    stmt = select(model).where(*predicates).options(*options)
    stmt = apply_sort(stmt, model, query.sort).offset(query.page.offset).limit(query.page.limit)
    result = await db.execute(stmt)
    items = list(result.scalars().unique().all())
    total = await count_rows(db, model, predicates)
    return Paginated(items=items, total=total, page=query.page.page, limit=query.page.limit)


async def get_one[M](
    db: AsyncSession,
    model: type[M],
    *predicates: ColumnElement[bool],
    options: Sequence[ExecutableOption] = (),
    fresh: bool = False,
) -> M | None:
    """Return the single row matching ``predicates``.

    ``fresh`` re-reads attributes already present in the identity map, which
    picks up server-side defaults and relation changes after a flush.
    """
    stmt = select(model).where(*predicates).options(*options)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalars().unique().one_or_none()


async def get_by_pk[M](
    db: AsyncSession,
    model: type[M],
    pk: object,
    options: Sequence[ExecutableOption] = (),
    fresh: bool = False,
) -> M | None:
    return await get_one(db, model, primary_key(model) == pk, options=options, fresh=fresh)


async def list_all[M](
    db: AsyncSession,
    model: type[M],
    *predicates: ColumnElement[bool],
    order_by: Sequence[Any] = (),
    limit: int | None = None,
    options: Sequence[ExecutableOption] = (),
) -> list[M]:
    stmt = select(model).where(*predicates).options(*options).order_by(*order_by)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def add(db: AsyncSession, row: Any) -> None:
    db.add(row)
    await db.flush()


async def delete(db: AsyncSession, row: Any) -> None:
    await db.delete(row)
    await db.flush()


async def rows_by_name[M](db: AsyncSession, model: type[M], names: Iterable[str]) -> list[M]:
    """Connect-or-create: existing rows for ``names``, new rows for the rest.

    Duplicate names collapse; the returned order follows first occurrence.
    """
    wanted = list(dict.fromkeys(name.strip() for name in names if name.strip()))
    if not wanted:
        return []
    name_column = column(model, "name")
    result = await db.execute(select(model).where(name_column.in_(wanted)))
    existing = {row.name: row for row in result.scalars().all()}  # type: ignore[attr-defined]
    rows: list[M] = []
    for name in wanted:
        row = existing.get(name)
        if row is None:
            row = model(name=name)
            db.add(row)
        rows.append(row)
    await db.flush()
    return rows


async def rows_by_id[M](
    db: AsyncSession, model: type[M], ids: Iterable[int]
) -> tuple[list[M], list[int]]:
    """Rows for ``ids`` in request order, plus the ids that do not exist."""
    wanted = list(dict.fromkeys(ids))
    if not wanted:
        return [], []
    result = await db.execute(select(model).where(primary_key(model).in_(wanted)))
    found = {row.id: row for row in result.scalars().all()}  # type: ignore[attr-defined]
    missing = [pk for pk in wanted if pk not in found]
    return [found[pk] for pk in wanted if pk in found], missing
