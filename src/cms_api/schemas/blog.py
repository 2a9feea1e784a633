"""Blog schemas: posts, categories, tags, authors and comments."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import EmailStr, Field

from cms_api.schemas.common import (
    Body,
    CamelModel,
    IdList,
    LongText,
    NameArray,
    OptionalUrl,
    PositiveId,
    ReadModel,
    ShortText,
    Text,
    TimestampedRead,
    UpdateModel,
    text,
)

ReadTime = Annotated[int, Field(ge=1, le=600)]


class StatsAction(StrEnum):
    LIKE = "like"
    UNLIKE = "unlike"
    SHARE = "share"


class PopularPeriod(StrEnum):
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"


# Authors
class AuthorCreate(CamelModel):
    name: ShortText
    email: EmailStr
    role: ShortText | None = None
    bio: LongText | None = None
    avatar: OptionalUrl = None


class AuthorUpdate(UpdateModel):
    nullable = frozenset({"role", "bio", "avatar"})

    name: ShortText | None = None
    email: EmailStr | None = None
    role: ShortText | None = None
    bio: LongText | None = None
    avatar: OptionalUrl = None


class AuthorRead(TimestampedRead):
    id: int
    name: str
    email: str
    role: str | None
    bio: str | None
    avatar: str | None


# Categories
class BlogCategoryCreate(CamelModel):
    name: ShortText
    description: LongText | None = None
    icon: ShortText | None = None
    color: ShortText | None = None


class BlogCategoryUpdate(UpdateModel):
    nullable = frozenset({"description", "icon", "color"})

    name: ShortText | None = None
    description: LongText | None = None
    icon: ShortText | None = None
    color: ShortText | None = None


class BlogCategoryRead(TimestampedRead):
    id: int
    name: str
    slug: str
    description: str | None
    icon: str | None
    color: str | None


class BlogCategoryListItem(BlogCategoryRead):
    post_count: int = 0


# Tags
class TagCreate(CamelModel):
    name: ShortText


class TagUpdate(UpdateModel):
    name: ShortText | None = None


class TagRead(TimestampedRead):
    id: int
    name: str
    slug: str


# Posts
class PostCreate(CamelModel):
    title: Text
    excerpt: LongText
    content: Body
    image: OptionalUrl = None
    featured: bool = False
    published: bool = False
    read_time: ReadTime | None = None
    author_id: PositiveId
    category_id: PositiveId
    tags: IdList = []


class PostUpdate(UpdateModel):
    nullable = frozenset({"image", "read_time"})

    title: Text | None = None
    excerpt: LongText | None = None
    content: Body | None = None
    image: OptionalUrl = None
    featured: bool | None = None
    published: bool | None = None
    read_time: ReadTime | None = None
    author_id: PositiveId | None = None
    category_id: PositiveId | None = None
    tags: IdList | None = None


class PostStatsRead(ReadModel):
    views: int
    likes: int
    comments: int
    shares: int


class PostAuthor(ReadModel):
    id: int
    name: str
    avatar: str | None


class PostCategory(ReadModel):
    id: int
    name: str
    slug: str


class PostRead(TimestampedRead):
    id: int
    title: str
    slug: str
    excerpt: str
    content: str
    image: str | None
    featured: bool
    published: bool
    published_at: datetime | None
    read_time: int | None
    author: PostAuthor
    category: PostCategory
    tags: NameArray
    stats: PostStatsRead | None


class StatsUpdate(CamelModel):
    action: StatsAction


# Comments
class CommentCreate(CamelModel):
    author_name: ShortText
    author_email: EmailStr
    content: Annotated[str, text(1, 5000)]
    parent_id: PositiveId | None = None


class CommentLeaf(ReadModel):
    id: int
    post_id: int
    parent_id: int | None
    author_name: str
    content: str
    created_at: datetime


class CommentReply(CommentLeaf):
    replies: list[CommentLeaf]


class CommentRead(CommentLeaf):
    replies: list[CommentReply]
