"""Service schemas.

Features are connected (or created) by name; technologies are connected by
id and unknown ids are rejected.
"""

from typing import Annotated

from pydantic import Field

from cms_api.schemas.common import (
    CamelModel,
    IdList,
    NameArray,
    ReadModel,
    ShortText,
    TimestampedRead,
    UpdateModel,
    text,
)

Title = Annotated[str, text(2, 200)]
Subtitle = Annotated[str, text(2, 300)]
Description = Annotated[str, text(10, 5000)]
FeatureNames = Annotated[list[Annotated[str, text(1, 200)]], Field(max_length=50)]


class ServiceCreate(CamelModel):
    icon: ShortText
    title: Title
    subtitle: Subtitle
    description: Description
    color: ShortText
    features: FeatureNames = []
    technologies: IdList = []


class ServiceUpdate(UpdateModel):
    icon: ShortText | None = None
    title: Title | None = None
    subtitle: Subtitle | None = None
    description: Description | None = None
    color: ShortText | None = None
    features: FeatureNames | None = None
    technologies: IdList | None = None


class ServiceTechnology(ReadModel):
    id: int
    name: str
    icon: str | None


class ServiceRead(TimestampedRead):
    id: int
    icon: str
    title: str
    subtitle: str
    description: str
    color: str
    features: NameArray
    technologies: list[ServiceTechnology]
