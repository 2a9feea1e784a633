"""Shared request/response building blocks.

Field types here encode the declarative rules every resource schema reuses:
trimmed strings with length bounds, URLs, slugs and name lists.
"""

from datetime import datetime
from typing import Annotated, ClassVar, Self

from pydantic import (
    AfterValidator,
    BeforeValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    model_validator,
)
from pydantic.alias_generators import to_camel

EMPTY_UPDATE_MESSAGE = "At least one field must be provided for update"

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    _http_url.validate_python(value)
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _names(value: object) -> object:
    """Flatten related rows to their ``name`` so relations read as string arrays."""
    if isinstance(value, list | tuple | set):
        return [getattr(item, "name", item) for item in value]
    return value


def text(min_length: int = 1, max_length: int = 255) -> StringConstraints:
    """Trimmed string bounded by ``min_length``/``max_length``."""
    return StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)


ShortText = Annotated[str, text(1, 100)]
Text = Annotated[str, text(1, 255)]
LongText = Annotated[str, text(1, 2000)]
Body = Annotated[str, text(1, 50_000)]
Url = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=500), AfterValidator(_check_url)
]
Slug = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$"
    ),
]
NameList = Annotated[list[ShortText], Field(max_length=50)]
PositiveId = Annotated[int, Field(gt=0)]
OptionalUrl = Annotated[Url | None, BeforeValidator(_blank_to_none)]
NameArray = Annotated[list[str], BeforeValidator(_names)]
IdList = Annotated[list[PositiveId], Field(max_length=50)]
DisplayOrder = Annotated[int, Field(ge=0, le=10_000)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadModel(CamelModel):
    """Response schema built straight from ORM rows."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TimestampedRead(ReadModel):
    created_at: datetime
    updated_at: datetime


class UpdateModel(CamelModel):
    """Partial update body.

    Only the fields present in the request are applied. A body with no fields
    is rejected, and ``null`` is only accepted for the columns listed in
    ``nullable``.
    """

    nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _require_changes(self) -> Self:
        if not self.model_fields_set:
            raise ValueError(EMPTY_UPDATE_MESSAGE)
        cleared = sorted(
            name
            for name in self.model_fields_set - self.nullable
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self

    def changes(self) -> dict[str, object]:
        """Fields present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
