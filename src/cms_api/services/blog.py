"""Blog business logic: posts, their stats and comments, and taxonomy.

Slugs are derived from titles and names. Every post carries one stats row;
views, likes, shares and the comment counter are moved with single UPDATE
statements inside the request transaction.
"""

import re
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import ColumnElement, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms_api.exceptions import FieldError, InvalidReferenceError, NotFoundError, ValidationError
from cms_api.listing import (
    FilterSpec,
    ListRules,
    RawListParams,
    SortOrder,
    SortSpec,
    parse_bool,
    resolve,
    resolve_page,
)
from cms_api.logging import get_logger
from cms_api.models import (
    BlogAuthor,
    BlogCategory,
    BlogComment,
    BlogPost,
    BlogPostStats,
    BlogTag,
)
from cms_api.repositories import base as repo
from cms_api.resource import Dependents, IdRelation, Reference, Resource
from cms_api.schemas.blog import (
    AuthorCreate,
    AuthorRead,
    AuthorUpdate,
    BlogCategoryCreate,
    BlogCategoryRead,
    BlogCategoryUpdate,
    CommentCreate,
    PopularPeriod,
    PostCreate,
    PostRead,
    PostUpdate,
    StatsAction,
    TagCreate,
    TagRead,
    TagUpdate,
)
from cms_api.schemas.pagination import Paginated
from cms_api.services import crud

logger = get_logger(__name__)

SLUG_MAX_LENGTH = 100
FEATURED_LIMIT = 3
LIST_LIMIT = 5

PERIODS = {
    PopularPeriod.DAY: timedelta(hours=24),
    PopularPeriod.WEEK: timedelta(days=7),
    PopularPeriod.MONTH: timedelta(days=30),
}


def slugify(text: str) -> str:
    """Lowercase ``text`` and join its alphanumeric runs with hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")[:SLUG_MAX_LENGTH].rstrip("-")


def with_slug(values: dict[str, Any]) -> dict[str, Any]:
    """Derive ``slug`` from ``name`` whenever the name is written."""
    if "name" not in values:
        return values
    slug = slugify(values["name"])
    if not slug:
        raise ValidationError([FieldError("name", "Name must contain letters or digits")])
    return {**values, "slug": slug}


BLOG_CATEGORIES = Resource(
    name="Category",
    model=BlogCategory,
    read=BlogCategoryRead,
    create=BlogCategoryCreate,
    update=BlogCategoryUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "createdAt": "created_at"},
        default_sort=SortSpec("name", SortOrder.ASC),
        search_fields=("name", "description"),
    ),
    dependents=(Dependents(BlogPost.category_id, "posts", "postCount"),),
    prepare=with_slug,
)

TAGS = Resource(
    name="Tag",
    model=BlogTag,
    read=TagRead,
    create=TagCreate,
    update=TagUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "createdAt": "created_at"},
        default_sort=SortSpec("name", SortOrder.ASC),
        search_fields=("name",),
    ),
    prepare=with_slug,
)

AUTHORS = Resource(
    name="Author",
    model=BlogAuthor,
    read=AuthorRead,
    create=AuthorCreate,
    update=AuthorUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "createdAt": "created_at"},
        default_sort=SortSpec("name", SortOrder.ASC),
        search_fields=("name", "email", "role"),
    ),
    dependents=(Dependents(BlogPost.author_id, "posts", "postCount"),),
)

POSTS = Resource(
    name="Post",
    model=BlogPost,
    read=PostRead,
    create=PostCreate,
    update=PostUpdate,
    rules=ListRules(
        sort_fields={
            "publishedAt": "published_at",
            "createdAt": "created_at",
            "title": "title",
        },
        default_sort=SortSpec("published_at", SortOrder.DESC),
        filters={
            "published": FilterSpec("published", cast=parse_bool),
            "featured": FilterSpec("featured", cast=parse_bool),
        },
        search_fields=("title", "excerpt", "content"),
    ),
    relations=(IdRelation("tags", BlogTag, "Tag"),),
    references=(
        Reference("author_id", BlogAuthor, "Author"),
        Reference("category_id", BlogCategory, "Category"),
    ),
    loads=("author", "category", "tags", "stats"),
)

COMMENT_RULES = ListRules(
    sort_fields={"createdAt": "created_at"},
    default_sort=SortSpec("created_at", SortOrder.DESC),
    default_limit=20,
)

_PUBLISHED = BlogPost.published.is_(True)


def _now() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------
async def list_categories(db: AsyncSession, params: RawListParams) -> Paginated[BlogCategory]:
    """Categories with ``postCount`` computed from the posts table."""
    result = await crud.list_rows(db, BLOG_CATEGORIES, params)
    ids = [category.id for category in result.items]
    counts = await db.execute(
        select(BlogPost.category_id, func.count())
        .where(BlogPost.category_id.in_(ids))
        .group_by(BlogPost.category_id)
    )
    by_category = dict(counts.tuples().all())
    for category in result.items:
        category.post_count = by_category.get(category.id, 0)  # type: ignore[attr-defined]
    return result


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
async def unique_slug(db: AsyncSession, title: str, post_id: int | None = None) -> str:
    """Slug for ``title``, suffixed ``-2``, ``-3``... when already taken."""
    base = slugify(title)
    if not base:
        raise ValidationError([FieldError("title", "Title must contain letters or digits")])
    stmt = select(BlogPost.slug).where(
        or_(BlogPost.slug == base, BlogPost.slug.like(f"{base}-%"))
    )
    if post_id is not None:
        stmt = stmt.where(BlogPost.id != post_id)
    taken = set((await db.execute(stmt)).scalars().all())
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


async def list_posts(
    db: AsyncSession, params: RawListParams, where: tuple[ColumnElement[bool], ...] = ()
) -> Paginated[BlogPost]:
    return await crud.list_rows(db, POSTS, params, where=where)


async def list_published(
    db: AsyncSession, params: RawListParams, *where: ColumnElement[bool]
) -> Paginated[BlogPost]:
    return await list_posts(db, params, (_PUBLISHED, *where))


async def posts_by_tag(
    db: AsyncSession, params: RawListParams, tag_id: int
) -> Paginated[BlogPost]:
    return await list_published(db, params, BlogPost.tags.any(BlogTag.id == tag_id))


async def _latest(
    db: AsyncSession, limit: int | None, default: int, *where: ColumnElement[bool]
) -> list[BlogPost]:
    return await repo.list_all(
        db,
        BlogPost,
        _PUBLISHED,
        *where,
        order_by=(BlogPost.published_at.desc(), BlogPost.id.desc()),
        limit=resolve_page(None, limit, default).limit,
        options=POSTS.options(),
    )


async def featured_posts(db: AsyncSession, limit: int | None = None) -> list[BlogPost]:
    return await _latest(db, limit, FEATURED_LIMIT, BlogPost.featured.is_(True))


async def recent_posts(db: AsyncSession, limit: int | None = None) -> list[BlogPost]:
    return await _latest(db, limit, LIST_LIMIT)


async def popular_posts(
    db: AsyncSession, period: PopularPeriod, limit: int | None = None
) -> list[BlogPost]:
    """Published posts ordered by views, within ``period`` of publication."""
    stmt = (
        select(BlogPost)
        .join(BlogPostStats, BlogPostStats.post_id == BlogPost.id)
        .where(_PUBLISHED)
        .options(*POSTS.options())
        .order_by(BlogPostStats.views.desc(), BlogPost.id.desc())
        .limit(resolve_page(None, limit, LIST_LIMIT).limit)
    )
    window = PERIODS.get(period)
    if window is not None:
        stmt = stmt.where(BlogPost.published_at >= _now() - window)
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_post(db: AsyncSession, post_id: int, fresh: bool = False) -> BlogPost:
    return await crud.get_row(db, POSTS, post_id, fresh=fresh)  # type: ignore[no-any-return]


async def _ensure_stats(db: AsyncSession, post: BlogPost) -> None:
    if post.stats is None:
        post.stats = BlogPostStats()
        await db.flush()


async def _bump(db: AsyncSession, post_id: int, **values: ColumnElement[Any]) -> None:
    await db.execute(
        update(BlogPostStats)
        .where(BlogPostStats.post_id == post_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


async def _viewed(db: AsyncSession, post: BlogPost) -> BlogPost:
    await _ensure_stats(db, post)
    await _bump(db, post.id, views=BlogPostStats.views + 1)
    return await get_post(db, post.id, fresh=True)


async def view_post(db: AsyncSession, post_id: int) -> BlogPost:
    """Read a post and count the view."""
    return await _viewed(db, await get_post(db, post_id))


async def view_post_by_slug(db: AsyncSession, slug: str) -> BlogPost:
    post = await repo.get_one(db, BlogPost, BlogPost.slug == slug, options=POSTS.options())
    if post is None:
        raise NotFoundError("Post", slug)
    return await _viewed(db, post)


async def update_stats(db: AsyncSession, post_id: int, action: StatsAction) -> BlogPostStats:
    post = await get_post(db, post_id)
    await _ensure_stats(db, post)
    match action:
        case StatsAction.LIKE:
            await _bump(db, post_id, likes=BlogPostStats.likes + 1)
        case StatsAction.UNLIKE:
            likes = case((BlogPostStats.likes > 0, BlogPostStats.likes - 1), else_=0)
            await _bump(db, post_id, likes=likes)
        case StatsAction.SHARE:
            await _bump(db, post_id, shares=BlogPostStats.shares + 1)
    post = await get_post(db, post_id, fresh=True)
    return post.stats


async def create_post(db: AsyncSession, payload: PostCreate) -> BlogPost:
    values = crud.column_values(payload, POSTS)
    await crud.check_references(db, POSTS, values)
    post = BlogPost(**values, slug=await unique_slug(db, payload.title))
    if post.published:
        post.published_at = _now()
    post.stats = BlogPostStats()
    await crud.apply_relations(db, POSTS, post, {"tags": payload.tags})
    await repo.add(db, post)
    logger.info("post_created", post_id=post.id, slug=post.slug)
    return await get_post(db, post.id, fresh=True)


async def update_post(db: AsyncSession, post_id: int, payload: PostUpdate) -> BlogPost:
    """Partial update; a new title regenerates the slug, first publish stamps the date."""
    post = await get_post(db, post_id)
    changes = payload.changes()
    relations = {"tags": changes.pop("tags")} if "tags" in changes else {}
    await crud.check_references(db, POSTS, changes)
    if "title" in changes and changes["title"] != post.title:
        changes["slug"] = await unique_slug(db, changes["title"], post_id)
    if changes.get("published") and post.published_at is None:
        changes["published_at"] = _now()
    for field, value in changes.items():
        setattr(post, field, value)
    await crud.apply_relations(db, POSTS, post, relations)
    await db.flush()
    logger.info("post_updated", post_id=post_id, fields=sorted(changes))
    return await get_post(db, post_id, fresh=True)


async def delete_post(db: AsyncSession, post_id: int) -> None:
    post = await get_post(db, post_id)
    await repo.delete(db, post)
    logger.info("post_deleted", post_id=post_id)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
async def list_comments(
    db: AsyncSession, post_id: int, params: RawListParams
) -> Paginated[BlogComment]:
    """Top-level comments of a post, newest first, with two levels of replies."""
    await get_post(db, post_id)
    replies = selectinload(BlogComment.replies)
    return await repo.fetch_page(
        db,
        BlogComment,
        resolve(params, COMMENT_RULES),
        where=(BlogComment.post_id == post_id, BlogComment.parent_id.is_(None)),
        options=(replies.selectinload(BlogComment.replies),),
    )


async def create_comment(db: AsyncSession, post_id: int, payload: CommentCreate) -> BlogComment:
    post = await get_post(db, post_id)
    if payload.parent_id is not None:
        parent = await repo.get_by_pk(db, BlogComment, payload.parent_id)
        if parent is None or parent.post_id != post_id:
            raise InvalidReferenceError(
                "Invalid parent comment",
                [FieldError("parentId", "Parent comment not found on this post")],
            )
    comment = BlogComment(post_id=post_id, **payload.model_dump())
    await repo.add(db, comment)
    await _ensure_stats(db, post)
    await _bump(db, post_id, comments=BlogPostStats.comments + 1)
    await db.refresh(comment)
    logger.info("comment_created", post_id=post_id, comment_id=comment.id)
    return comment


async def _thread_size(db: AsyncSession, comment_id: int) -> int:
    """The comment plus every reply below it, at any depth."""
    total, frontier = 1, [comment_id]
    while frontier:
        result = await db.execute(
            select(BlogComment.id).where(BlogComment.parent_id.in_(frontier))
        )
        frontier = list(result.scalars().all())
        total += len(frontier)
    return total


async def delete_comment(db: AsyncSession, comment_id: int) -> None:
    """Delete a comment with its replies and lower the post's counter by all of them."""
    comment = await repo.get_by_pk(db, BlogComment, comment_id)
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    post_id = comment.post_id
    removed = await _thread_size(db, comment_id)
    await repo.delete(db, comment)
    remaining = case(
        (BlogPostStats.comments > removed, BlogPostStats.comments - removed), else_=0
    )
    await _bump(db, post_id, comments=remaining)
    logger.info("comment_deleted", post_id=post_id, comment_id=comment_id, removed=removed)
