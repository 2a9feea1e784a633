"""About-us content schemas."""

from typing import Annotated

from cms_api.schemas.common import (
    CamelModel,
    DisplayOrder,
    LongText,
    OptionalUrl,
    ShortText,
    Text,
    TimestampedRead,
    UpdateModel,
    text,
)

Year = Annotated[str, text(4, 10)]
Number = Annotated[str, text(1, 50)]
Story = Annotated[str, text(1, 10_000)]


class CompanyValueCreate(CamelModel):
    icon: ShortText
    title: Text
    description: LongText
    color: ShortText
    order: DisplayOrder = 0


class CompanyValueUpdate(UpdateModel):
    icon: ShortText | None = None
    title: Text | None = None
    description: LongText | None = None
    color: ShortText | None = None
    order: DisplayOrder | None = None


class CompanyValueRead(TimestampedRead):
    id: int
    icon: str
    title: str
    description: str
    color: str
    order: int


class TimelineItemCreate(CamelModel):
    year: Year
    title: Text
    description: LongText
    achievement: Text
    extended_description: Story
    order: DisplayOrder = 0


class TimelineItemUpdate(UpdateModel):
    year: Year | None = None
    title: Text | None = None
    description: LongText | None = None
    achievement: Text | None = None
    extended_description: Story | None = None
    order: DisplayOrder | None = None


class TimelineItemRead(TimestampedRead):
    id: int
    year: str
    title: str
    description: str
    achievement: str
    extended_description: str
    order: int


class CompanyStatCreate(CamelModel):
    icon: ShortText
    number: Number
    label: ShortText
    order: DisplayOrder = 0


class CompanyStatUpdate(UpdateModel):
    icon: ShortText | None = None
    number: Number | None = None
    label: ShortText | None = None
    order: DisplayOrder | None = None


class CompanyStatRead(TimestampedRead):
    id: int
    icon: str
    number: str
    label: str
    order: int


class CompanyInfoCreate(CamelModel):
    company_name: Text
    previous_name: Text | None = None
    founded_year: Year
    mission: LongText
    vision: LongText
    about_header: Text
    about_subheader: LongText
    journey_title: Text | None = None
    story_text: Story
    hero_image_url: OptionalUrl = None


class CompanyInfoUpdate(UpdateModel):
    nullable = frozenset({"previous_name", "journey_title", "hero_image_url"})

    company_name: Text | None = None
    previous_name: Text | None = None
    founded_year: Year | None = None
    mission: LongText | None = None
    vision: LongText | None = None
    about_header: Text | None = None
    about_subheader: LongText | None = None
    journey_title: Text | None = None
    story_text: Story | None = None
    hero_image_url: OptionalUrl = None


class CompanyInfoRead(TimestampedRead):
    id: int
    company_name: str
    previous_name: str | None
    founded_year: str
    mission: str
    vision: str
    about_header: str
    about_subheader: str
    journey_title: str | None
    story_text: str
    hero_image_url: str | None


class AboutUsData(CamelModel):
    company_info: CompanyInfoRead | None
    company_values: list[CompanyValueRead]
    timeline_items: list[TimelineItemRead]
    company_stats: list[CompanyStatRead]
