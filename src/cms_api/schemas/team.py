"""Team member schemas."""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import EmailStr, Field, model_validator

from cms_api.schemas.common import (
    CamelModel,
    TimestampedRead,
    UpdateModel,
    Url,
    text,
)

Name = Annotated[str, text(2, 100)]
Skill = Annotated[str, text(1, 100)]


class MetaField(StrEnum):
    """Team member columns whose distinct values can be listed."""

    DEPARTMENTS = "departments"
    POSITIONS = "positions"
    SPECIALITIES = "specialities"


class SocialLinks(CamelModel):
    linkedin: Url | None = None
    twitter: Url | None = None
    github: Url | None = None
    email: EmailStr | None = None
    website: Url | None = None

    @model_validator(mode="after")
    def _at_least_one(self) -> "SocialLinks":
        if not self.model_fields_set:
            raise ValueError("At least one social media link must be provided")
        return self


class Achievement(CamelModel):
    title: Annotated[str, text(1, 255)]
    description: Annotated[str, text(1, 1000)]
    date: Annotated[str, text(1, 50)]
    type: Literal["award", "certification", "project", "recognition"] | None = None


class TeamMemberCreate(CamelModel):
    name: Name
    position: Name
    department: Name
    bio: Annotated[str, text(1, 2000)]
    avatar: Annotated[Url, Field(max_length=255)]
    skills: Annotated[list[Skill], Field(min_length=1, max_length=20)]
    experience: Annotated[str, text(1, 50)]
    projects: Annotated[str, text(1, 1000)]
    speciality: Name
    social: SocialLinks
    gradient: Annotated[str, text(3, 100)]
    icon: Annotated[str, text(1, 50)]
    achievements: Annotated[list[Achievement], Field(max_length=10)] = []


class TeamMemberUpdate(UpdateModel):
    name: Name | None = None
    position: Name | None = None
    department: Name | None = None
    bio: Annotated[str, text(1, 2000)] | None = None
    avatar: Annotated[Url, Field(max_length=255)] | None = None
    skills: Annotated[list[Skill], Field(min_length=1, max_length=20)] | None = None
    experience: Annotated[str, text(1, 50)] | None = None
    projects: Annotated[str, text(1, 1000)] | None = None
    speciality: Name | None = None
    social: SocialLinks | None = None
    gradient: Annotated[str, text(3, 100)] | None = None
    icon: Annotated[str, text(1, 50)] | None = None
    achievements: Annotated[list[Achievement], Field(max_length=10)] | None = None

    def changes(self) -> dict[str, object]:
        # JSON columns store the wire shape
        values = super().changes()
        if self.social is not None:
            values["social"] = self.social.model_dump(exclude_none=True)
        if self.achievements is not None:
            values["achievements"] = [
                item.model_dump(exclude_none=True) for item in self.achievements
            ]
        return values


class TeamMemberRead(TimestampedRead):
    id: int
    name: str
    position: str
    department: str
    bio: str
    avatar: str
    skills: list[str]
    experience: str
    projects: str
    speciality: str
    social: dict[str, str]
    gradient: str
    icon: str
    achievements: list[dict[str, str]]
