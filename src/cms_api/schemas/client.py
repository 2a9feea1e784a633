"""Client and testimonial schemas."""

from typing import Annotated

from pydantic import Field

from cms_api.schemas.common import (
    CamelModel,
    LongText,
    OptionalUrl,
    PositiveId,
    ReadModel,
    Text,
    TimestampedRead,
    UpdateModel,
    text,
)

ClientName = Annotated[str, text(2, 100)]
Industry = Annotated[str, text(2, 50)]
Rating = Annotated[int, Field(ge=1, le=5)]


class ClientCreate(CamelModel):
    name: ClientName
    industry: Industry
    image: OptionalUrl = None
    is_active: bool = True


class ClientUpdate(UpdateModel):
    nullable = frozenset({"image"})

    name: ClientName | None = None
    industry: Industry | None = None
    image: OptionalUrl = None
    is_active: bool | None = None


class ClientRead(TimestampedRead):
    id: int
    name: str
    industry: str
    image: str | None
    is_active: bool


class TestimonialCreate(CamelModel):
    author: Text
    role: Text | None = None
    company: Text | None = None
    content: LongText
    rating: Rating | None = None
    avatar: OptionalUrl = None
    project_id: PositiveId | None = None
    client_id: PositiveId | None = None


class TestimonialUpdate(UpdateModel):
    nullable = frozenset({"role", "company", "rating", "avatar", "project_id", "client_id"})

    author: Text | None = None
    role: Text | None = None
    company: Text | None = None
    content: LongText | None = None
    rating: Rating | None = None
    avatar: OptionalUrl = None
    project_id: PositiveId | None = None
    client_id: PositiveId | None = None


class TestimonialProject(ReadModel):
    id: int
    title: str


class TestimonialClient(ReadModel):
    id: int
    name: str


class TestimonialRead(TimestampedRead):
    id: int
    author: str
    role: str | None
    company: str | None
    content: str
    rating: int | None
    avatar: str | None
    project_id: int | None
    client_id: int | None
    project: TestimonialProject | None
    client: TestimonialClient | None
