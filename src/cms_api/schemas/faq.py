"""FAQ schemas."""

from typing import Annotated

from cms_api.schemas.common import (
    CamelModel,
    ShortText,
    Slug,
    TimestampedRead,
    UpdateModel,
    text,
)

Question = Annotated[str, text(5, 500)]
Answer = Annotated[str, text(5, 5000)]


class FaqCategoryCreate(CamelModel):
    id: Slug
    name: ShortText
    icon: ShortText


class FaqCategoryUpdate(UpdateModel):
    name: ShortText | None = None
    icon: ShortText | None = None


class FaqCategoryRead(TimestampedRead):
    id: str
    name: str
    icon: str


class FaqItemCreate(CamelModel):
    category_id: Slug
    question: Question
    answer: Answer
    popular: bool = False


class FaqItemUpdate(UpdateModel):
    category_id: Slug | None = None
    question: Question | None = None
    answer: Answer | None = None
    popular: bool | None = None


class FaqItemRead(TimestampedRead):
    id: int
    category_id: str
    question: str
    answer: str
    popular: bool


class FaqGroup(CamelModel):
    category: FaqCategoryRead
    items: list[FaqItemRead]


class FaqCategoryCount(CamelModel):
    category_id: str
    count: int


class FaqStats(CamelModel):
    total_items: int
    total_categories: int
    popular_items: int
    items_by_category: list[FaqCategoryCount]
