"""Pagination, sort, filter and include resolution for list endpoints.

Turns raw query-string values into typed specs that repositories translate
into SQL. Nothing here touches the database.

- page defaults to 1 and is coerced into [1, MAX_PAGE]
- limit defaults to 10 and is clamped to [1, 100]; out-of-range values are
  clamped, never rejected
- sort is ``field:direction``; unknown fields or directions fall back to the
  resource default
- filters are equality or case-insensitive equality; search is an OR of
  case-insensitive substring matches
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from cms_api.exceptions import FieldError, ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_SEARCH_LENGTH = 100
# Keeps the row offset inside a signed 64-bit integer
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class Match(StrEnum):
    EXACT = "exact"
    IEXACT = "iexact"
    CONTAINS = "contains"


@dataclass(frozen=True)
class PageSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class FilterSpec:
    """How one query-string key maps onto a model attribute."""

    attribute: str
    match: Match = Match.EXACT
    cast: Callable[[str], object] = str


@dataclass(frozen=True)
class FilterClause:
    attribute: str
    match: Match
    value: object


@dataclass(frozen=True)
class ListRules:
    """Per-resource listing rules.

    ``sort_fields`` maps the public sort name (camelCase, as clients send it)
    to the model attribute; ``search_fields`` are the text columns ``q`` is
    matched against.
    """

    sort_fields: Mapping[str, str]
    default_sort: SortSpec
    filters: Mapping[str, FilterSpec] = field(default_factory=dict)
    search_fields: tuple[str, ...] = ()
    default_limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class ListQuery:
    page: PageSpec
    sort: SortSpec
    filters: tuple[FilterClause, ...] = ()
    search: str | None = None


@dataclass(frozen=True)
class RawListParams:
    """Query-string values exactly as the client sent them."""

    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    search: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Ok[T]:
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


type ParseResult[T] = Ok[T] | Err


def resolve_page(
    page: int | None, limit: int | None, default_limit: int = DEFAULT_LIMIT
) -> PageSpec:
    resolved_page = min(max(page if page is not None else DEFAULT_PAGE, 1), MAX_PAGE)
    resolved_limit = limit if limit is not None else default_limit
    resolved_limit = min(max(resolved_limit, 1), MAX_LIMIT)
    return PageSpec(page=resolved_page, limit=resolved_limit)


def parse_sort(raw: str | None, allowed: Mapping[str, str], default: SortSpec) -> SortSpec:
    """Parse ``field:direction`` against an allow-list.

    A missing direction means ascending. Anything not on the allow-list
    yields ``default``; the result always names a model attribute.
    """
    if not raw:
        return default
    name, _, direction = raw.strip().partition(":")
    attribute = allowed.get(name.strip())
    if attribute is None:
        return default
    direction = direction.strip().lower() or SortOrder.ASC
    if direction not in (SortOrder.ASC, SortOrder.DESC):
        return default
    return SortSpec(field=attribute, order=SortOrder(direction))


def resolve_filters(
    raw: Mapping[str, str], specs: Mapping[str, FilterSpec]
) -> tuple[FilterClause, ...]:
    clauses: list[FilterClause] = []
    errors: list[FieldError] = []
    for key, spec in specs.items():
        value = raw.get(key)
        if value is None or value.strip() == "":
            continue
        try:
            typed = spec.cast(value.strip())
        except ValueError:
            errors.append(FieldError(key, f"Invalid value for {key}"))
            continue
        clauses.append(FilterClause(attribute=spec.attribute, match=spec.match, value=typed))
    if errors:
        raise ValidationError(errors)
    return tuple(clauses)


def resolve_search(raw: str | None) -> str | None:
    if raw is None:
        return None
    term = raw.strip()
    if not term:
        return None
    if len(term) > MAX_SEARCH_LENGTH:
        raise ValidationError(
            [FieldError("q", f"Search query must not exceed {MAX_SEARCH_LENGTH} characters")]
        )
    return term


def resolve(params: RawListParams, rules: ListRules) -> ListQuery:
    """Resolve raw query values into a ``ListQuery`` for one resource."""
    return ListQuery(
        page=resolve_page(params.page, params.limit, rules.default_limit),
        sort=parse_sort(params.sort, rules.sort_fields, rules.default_sort),
        filters=resolve_filters(params.extra, rules.filters),
        search=resolve_search(params.search) if rules.search_fields else None,
    )


def parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(value)


def parse_include[E: StrEnum](raw: str | None, options: type[E]) -> ParseResult[frozenset[E]]:
    """Parse a comma-separated ``include`` value into enum members."""
    if not raw:
        return Ok(frozenset())
    members: set[E] = set()
    for token in raw.split(","):
        name = token.strip()
        if not name:
            continue
        try:
            members.add(options(name))
        except ValueError:
            allowed = ", ".join(member.value for member in options)
            return Err(f"Include parameter can only contain: {allowed}")
    return Ok(frozenset(members))
