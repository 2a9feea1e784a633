"""Declarative description of a CRUD resource.

A ``Resource`` holds everything the generic service and router need to
serve one entity: the model, its request/response schemas, listing rules,
many-to-many relations, foreign keys to check before a write, rows that
block a delete, and which relationships to eager-load for reads.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from sqlalchemy import Column
from sqlalchemy.orm import InstrumentedAttribute, selectinload
from sqlalchemy.sql.base import ExecutableOption

from cms_api.listing import ListRules
from cms_api.schemas.common import UpdateModel


@dataclass(frozen=True)
class NameRelation:
    """Many-to-many set given as names; unknown names are created."""

    field: str
    target: type[Any]


@dataclass(frozen=True)
class IdRelation:
    """Many-to-many set given as ids; unknown ids are rejected."""

    field: str
    target: type[Any]
    label: str


@dataclass(frozen=True)
class Reference:
    """Scalar foreign key that must point at an existing row."""

    field: str
    target: type[Any]
    label: str


@dataclass(frozen=True)
class Dependents:
    """Rows whose foreign key ``column`` blocks deleting the parent.

    ``column`` is a mapped attribute or a join-table column. ``label`` is the
    plural noun used in the message; the error envelope carries the count
    under ``count_key``.
    """

    column: InstrumentedAttribute[Any] | Column[Any]
    label: str
    count_key: str

    @property
    def source(self) -> Any:
        if isinstance(self.column, Column):
            return self.column.table
        return self.column.class_


type Relation = NameRelation | IdRelation

# Adjusts column values before they are written (e.g. derives a slug)
type Prepare = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class Resource:
    name: str
    model: type[Any]
    read: type[BaseModel]
    create: type[BaseModel]
    update: type[UpdateModel]
    rules: ListRules
    relations: tuple[Relation, ...] = ()
    references: tuple[Reference, ...] = ()
    dependents: tuple[Dependents, ...] = ()
    loads: tuple[str, ...] = ()
    prepare: Prepare | None = None
    key: type[int] | type[str] = int

    @property
    def relation_fields(self) -> frozenset[str]:
        return frozenset(relation.field for relation in self.relations)

    def options(self) -> list[ExecutableOption]:
        return [selectinload(getattr(self.model, name)) for name in self.loads]

    def prepared(self, values: dict[str, Any]) -> dict[str, Any]:
        return self.prepare(values) if self.prepare is not None else values
