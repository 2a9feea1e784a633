"""Hero section and social media schemas."""

from typing import Annotated

from cms_api.schemas.common import (
    CamelModel,
    DisplayOrder,
    OptionalUrl,
    ShortText,
    Text,
    TimestampedRead,
    UpdateModel,
    Url,
    text,
)

Description = Annotated[str, text(1, 2000)]


class HeroSectionCreate(CamelModel):
    welcome_text: Text
    main_title: Text
    highlight_text: Text
    description: Description
    logo: OptionalUrl = None
    image: OptionalUrl = None
    alt_text: Text | None = None
    is_active: bool = True


class HeroSectionUpdate(UpdateModel):
    nullable = frozenset({"logo", "image", "alt_text"})

    welcome_text: Text | None = None
    main_title: Text | None = None
    highlight_text: Text | None = None
    description: Description | None = None
    logo: OptionalUrl = None
    image: OptionalUrl = None
    alt_text: Text | None = None
    is_active: bool | None = None


class HeroSectionRead(TimestampedRead):
    id: int
    welcome_text: str
    main_title: str
    highlight_text: str
    description: str
    logo: str | None
    image: str | None
    alt_text: str | None
    is_active: bool


class SocialMediaCreate(CamelModel):
    name: ShortText
    url: Url
    is_active: bool = True
    order: DisplayOrder = 0


class SocialMediaUpdate(UpdateModel):
    name: ShortText | None = None
    url: Url | None = None
    is_active: bool | None = None
    order: DisplayOrder | None = None


class SocialMediaRead(TimestampedRead):
    id: int
    name: str
    url: str
    is_active: bool
    order: int


class HeroData(CamelModel):
    """Public hero payload: the active section and its active social links."""

    hero: HeroSectionRead | None
    social_media: list[SocialMediaRead]
