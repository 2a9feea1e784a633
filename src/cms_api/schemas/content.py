"""Statistic and contact card schemas."""

from typing import Annotated

from pydantic import Field

from cms_api.schemas.common import (
    CamelModel,
    DisplayOrder,
    ShortText,
    TimestampedRead,
    UpdateModel,
    text,
)

Icon = Annotated[str, text(2, 50)]
Number = Annotated[str, text(1, 20)]
Label = Annotated[str, text(2, 100)]
ContactTitle = Annotated[str, text(2, 100)]
Details = Annotated[list[Annotated[str, text(1, 255)]], Field(min_length=1, max_length=10)]
Href = Annotated[str, text(0, 500)]


class StatisticCreate(CamelModel):
    icon: Icon
    number: Number
    label: Label
    order: DisplayOrder = 0
    is_active: bool = True


class StatisticUpdate(UpdateModel):
    icon: Icon | None = None
    number: Number | None = None
    label: Label | None = None
    order: DisplayOrder | None = None
    is_active: bool | None = None


class StatisticRead(TimestampedRead):
    id: int
    icon: str
    number: str
    label: str
    order: int
    is_active: bool


class ContactCreate(CamelModel):
    title: ContactTitle
    details: Details
    color: ShortText
    href: Href | None = None


class ContactUpdate(UpdateModel):
    nullable = frozenset({"href"})

    title: ContactTitle | None = None
    details: Details | None = None
    color: ShortText | None = None
    href: Href | None = None


class ContactRead(TimestampedRead):
    id: int
    title: str
    details: list[str]
    color: str
    href: str | None
