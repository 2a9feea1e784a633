"""Blog endpoints.

Reads, post stats and comment creation are public; every write to posts,
taxonomy and comments lives under ``/blogs/admin`` behind the admin guard.
"""

from dataclasses import replace
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query

from cms_api.crud import READS, WRITES, CrudRoute, SearchTerm, mount_crud
from cms_api.dependencies import DB, ItemId, ListParams, admin_guard
from cms_api.models import BlogPost
from cms_api.schemas.blog import (
    BlogCategoryListItem,
    CommentCreate,
    CommentLeaf,
    CommentRead,
    PopularPeriod,
    PostCreate,
    PostRead,
    PostStatsRead,
    PostUpdate,
    StatsUpdate,
)
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, listing, many, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.services import blog as blog_service

Limit = Annotated[int | None, Query()]
PostSlug = Annotated[str, Path(min_length=1, max_length=120)]

router = APIRouter(prefix="/blogs", tags=["blog"])
posts = APIRouter(prefix="/posts")


@posts.get("", response_model=PaginatedResponse[PostRead])
async def list_posts(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    """Paginated posts; ``published`` and ``featured`` filter, ``q`` searches."""
    result = await blog_service.list_posts(db, params)
    return listing(PostRead, result)


@posts.get("/featured", response_model=ApiResponse[list[PostRead]])
async def featured_posts(db: DB, limit: Limit = None) -> ApiResponse[list[PostRead]]:
    return many(PostRead, await blog_service.featured_posts(db, limit))


@posts.get("/popular", response_model=ApiResponse[list[PostRead]])
async def popular_posts(
    db: DB, limit: Limit = None, period: PopularPeriod = PopularPeriod.WEEK
) -> ApiResponse[list[PostRead]]:
    return many(PostRead, await blog_service.popular_posts(db, period, limit))


@posts.get("/recent", response_model=ApiResponse[list[PostRead]])
async def recent_posts(db: DB, limit: Limit = None) -> ApiResponse[list[PostRead]]:
    return many(PostRead, await blog_service.recent_posts(db, limit))


@posts.get("/search", response_model=PaginatedResponse[PostRead])
async def search_posts(db: DB, params: ListParams, q: SearchTerm) -> PaginatedResponse[Any]:
    result = await blog_service.list_published(db, replace(params, search=q))
    return listing(PostRead, result, query=q.strip())


@posts.get("/slug/{slug}", response_model=ApiResponse[PostRead])
async def get_post_by_slug(db: DB, slug: PostSlug) -> ApiResponse[PostRead]:
    return single(PostRead, await blog_service.view_post_by_slug(db, slug))


@posts.get("/category/{category_id}", response_model=PaginatedResponse[PostRead])
async def posts_by_category(
    db: DB, params: ListParams, category_id: ItemId
) -> PaginatedResponse[Any]:
    result = await blog_service.list_published(db, params, BlogPost.category_id == category_id)
    return listing(PostRead, result)


@posts.get("/tag/{tag_id}", response_model=PaginatedResponse[PostRead])
async def posts_by_tag(db: DB, params: ListParams, tag_id: ItemId) -> PaginatedResponse[Any]:
    result = await blog_service.posts_by_tag(db, params, tag_id)
    return listing(PostRead, result)


@posts.get("/author/{author_id}", response_model=PaginatedResponse[PostRead])
async def posts_by_author(
    db: DB, params: ListParams, author_id: ItemId
) -> PaginatedResponse[Any]:
    result = await blog_service.list_published(db, params, BlogPost.author_id == author_id)
    return listing(PostRead, result)


@posts.get("/{post_id}", response_model=ApiResponse[PostRead])
async def get_post(db: DB, post_id: ItemId) -> ApiResponse[PostRead]:
    """Single post; each read counts as a view."""
    return single(PostRead, await blog_service.view_post(db, post_id))


@posts.patch("/{post_id}/stats", response_model=ApiResponse[PostStatsRead])
async def update_post_stats(
    db: DB, post_id: ItemId, payload: StatsUpdate
) -> ApiResponse[PostStatsRead]:
    stats = await blog_service.update_stats(db, post_id, payload.action)
    return single(PostStatsRead, stats, "Post stats updated successfully")


@posts.get("/{post_id}/comments", response_model=PaginatedResponse[CommentRead])
async def list_comments(db: DB, params: ListParams, post_id: ItemId) -> PaginatedResponse[Any]:
    result = await blog_service.list_comments(db, post_id, params)
    return listing(CommentRead, result)


@posts.post("/{post_id}/comments", response_model=ApiResponse[CommentLeaf], status_code=201)
async def create_comment(
    db: DB, post_id: ItemId, payload: CommentCreate
) -> ApiResponse[CommentLeaf]:
    comment = await blog_service.create_comment(db, post_id, payload)
    return single(CommentLeaf, comment, "Comment created successfully")


categories = APIRouter(prefix="/categories")


@categories.get("", response_model=PaginatedResponse[BlogCategoryListItem])
async def list_categories(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    result = await blog_service.list_categories(db, params)
    return listing(BlogCategoryListItem, result)


mount_crud(categories, blog_service.BLOG_CATEGORIES, routes=READS - {CrudRoute.LIST})

router.include_router(posts)
router.include_router(categories)
router.include_router(mount_crud(APIRouter(prefix="/tags"), blog_service.TAGS, routes=READS))
router.include_router(
    mount_crud(APIRouter(prefix="/authors"), blog_service.AUTHORS, routes=READS)
)

# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
admin = APIRouter(prefix="/admin", dependencies=[Depends(admin_guard)])


@admin.post("/posts", response_model=ApiResponse[PostRead], status_code=201)
async def create_post(db: DB, payload: PostCreate) -> ApiResponse[PostRead]:
    post = await blog_service.create_post(db, payload)
    return single(PostRead, post, "Post created successfully")


@admin.put("/posts/{post_id}", response_model=ApiResponse[PostRead])
async def update_post(db: DB, post_id: ItemId, payload: PostUpdate) -> ApiResponse[PostRead]:
    post = await blog_service.update_post(db, post_id, payload)
    return single(PostRead, post, "Post updated successfully")


@admin.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(db: DB, post_id: ItemId) -> MessageResponse:
    await blog_service.delete_post(db, post_id)
    return MessageResponse(message="Post deleted successfully")


@admin.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(db: DB, comment_id: ItemId) -> MessageResponse:
    await blog_service.delete_comment(db, comment_id)
    return MessageResponse(message="Comment deleted successfully")


for prefix, resource in (
    ("/categories", blog_service.BLOG_CATEGORIES),
    ("/tags", blog_service.TAGS),
    ("/authors", blog_service.AUTHORS),
):
    admin.include_router(mount_crud(APIRouter(prefix=prefix), resource, routes=WRITES))

router.include_router(admin)
