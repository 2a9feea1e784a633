"""Factory functions for creating model instances in tests."""

from datetime import UTC, datetime

from cms_api.media import DestroyResult
from cms_api.models import (
    BlogAuthor,
    BlogCategory,
    BlogPost,
    BlogPostStats,
    Category,
    Client,
    Project,
    ProjectStatus,
    Role,
    Technology,
    Testimonial,
    User,
)
from cms_api.security import create_access_token, hash_password

PASSWORD = "password123"
# bcrypt is slow on purpose; hash once per session
PASSWORD_HASH = hash_password(PASSWORD)


class FakeMediaStorage:
    """Records destroyed public ids; ``results`` overrides the outcome per id."""

    def __init__(self) -> None:
        self.destroyed: list[str] = []
        self.results: dict[str, str] = {}

    async def destroy(self, public_id: str) -> DestroyResult:
        self.destroyed.append(public_id)
        result = self.results.get(public_id, "ok")
        return DestroyResult(result=result, invalidated=result == "ok")


def make_user(
    *,
    name: str = "Jane Doe",
    email: str = "jane@example.com",
    role: Role = Role.USER,
    password_hash: str = PASSWORD_HASH,
) -> User:
    return User(name=name, email=email, role=role, password_hash=password_hash)


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


def make_category(*, id: str = "web", label: str = "Web Development", count: int = 0) -> Category:
    return Category(id=id, label=label, count=count)


def make_technology(*, name: str = "React", description: str | None = None) -> Technology:
    return Technology(name=name, description=description)


def make_project(
    *,
    title: str = "Storefront",
    category_id: str = "web",
    status: ProjectStatus = ProjectStatus.LIVE,
    year: str | None = "2024",
    technologies: list[Technology] | None = None,
) -> Project:
    return Project(
        title=title,
        subtitle=f"{title} subtitle",
        category_id=category_id,
        type="Web Application",
        description=f"{title} description",
        year=year,
        status=status,
        technologies=technologies or [],
    )


def make_client(*, name: str = "Acme", industry: str = "Retail", is_active: bool = True) -> Client:
    return Client(name=name, industry=industry, is_active=is_active)


def make_testimonial(
    *,
    author: str = "Sam Rivera",
    content: str = "Delivered on time and on budget.",
    rating: int | None = 5,
    project_id: int | None = None,
    client_id: int | None = None,
) -> Testimonial:
    return Testimonial(
        author=author,
        content=content,
        rating=rating,
        project_id=project_id,
        client_id=client_id,
    )


def make_blog_author(*, name: str = "Ada Writer", email: str = "ada@example.com") -> BlogAuthor:
    return BlogAuthor(name=name, email=email)


def make_blog_category(*, name: str = "Engineering", slug: str = "engineering") -> BlogCategory:
    return BlogCategory(name=name, slug=slug)


def make_post(
    *,
    title: str,
    author_id: int,
    category_id: int,
    published: bool = True,
    featured: bool = False,
    published_at: datetime | None = None,
    views: int = 0,
) -> BlogPost:
    slug = title.lower().replace(" ", "-")
    if published and published_at is None:
        published_at = datetime(2024, 5, 1, tzinfo=UTC)
    return BlogPost(
        title=title,
        slug=slug,
        excerpt=f"{title} excerpt",
        content=f"{title} content",
        featured=featured,
        published=published,
        published_at=published_at,
        author_id=author_id,
        category_id=category_id,
        stats=BlogPostStats(views=views),
    )
