"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_api.db.session import Base


class Role(StrEnum):
    USER = "USER"
    ADMIN = "ADMIN"


class ProjectStatus(StrEnum):
    DEVELOPMENT = "DEVELOPMENT"
    BETA = "BETA"
    LIVE = "LIVE"
    ARCHIVED = "ARCHIVED"
    MAINTENANCE = "MAINTENANCE"


class ImageType(StrEnum):
    SCREENSHOT = "SCREENSHOT"
    MOCKUP = "MOCKUP"
    LOGO = "LOGO"
    DIAGRAM = "DIAGRAM"
    OTHER = "OTHER"


class Timestamped:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


# ---------------------------------------------------------------------------
# Join tables (many-to-many)
# ---------------------------------------------------------------------------
project_technologies = Table(
    "project_technologies",
    Base.metadata,
    Column("project_id", ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("technology_id", ForeignKey("technologies.id", ondelete="CASCADE"), primary_key=True),
)

project_features = Table(
    "project_features",
    Base.metadata,
    Column("project_id", ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("feature_id", ForeignKey("features.id", ondelete="CASCADE"), primary_key=True),
)

service_technologies = Table(
    "service_technologies",
    Base.metadata,
    Column("service_id", ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
    Column("technology_id", ForeignKey("technologies.id", ondelete="CASCADE"), primary_key=True),
)

service_features = Table(
    "service_features",
    Base.metadata,
    Column("service_id", ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
    Column("feature_id", ForeignKey("features.id", ondelete="CASCADE"), primary_key=True),
)

blog_post_tags = Table(
    "blog_post_tags",
    Base.metadata,
    Column("post_id", ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Timestamped, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, native_enum=False, length=10), default=Role.USER
    )


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------
class Category(Timestamped, Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    label: Mapped[str] = mapped_column(String(100))
    # Denormalized project count; maintained alongside project writes
    count: Mapped[int] = mapped_column(default=0)

    projects: Mapped[list["Project"]] = relationship(
        back_populates="category", passive_deletes=True
    )


class Technology(Timestamped, Base):
    __tablename__ = "technologies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    icon: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)

    projects: Mapped[list["Project"]] = relationship(
        secondary=project_technologies, back_populates="technologies", passive_deletes=True
    )
    services: Mapped[list["Service"]] = relationship(
        secondary=service_technologies, back_populates="technologies", passive_deletes=True
    )


class Feature(Timestamped, Base):
    __tablename__ = "features"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class Client(Timestamped, Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    industry: Mapped[str] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(default=True)


class Project(Timestamped, Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    subtitle: Mapped[str] = mapped_column(String(255))
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), index=True)
    type: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500))
    client: Mapped[str | None] = mapped_column(String(255))
    duration: Mapped[str | None] = mapped_column(String(100))
    year: Mapped[str | None] = mapped_column(String(10))
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus, native_enum=False, length=20), default=ProjectStatus.DEVELOPMENT
    )
    icon: Mapped[str | None] = mapped_column(String(100))
    color: Mapped[str | None] = mapped_column(String(100))

    category: Mapped["Category"] = relationship(back_populates="projects")
    technologies: Mapped[list["Technology"]] = relationship(
        secondary=project_technologies, back_populates="projects", passive_deletes=True
    )
    features: Mapped[list["Feature"]] = relationship(
        secondary=project_features, passive_deletes=True
    )
    metrics: Mapped["ProjectMetrics | None"] = relationship(
        cascade="all, delete-orphan", passive_deletes=True
    )
    links: Mapped["ProjectLinks | None"] = relationship(
        cascade="all, delete-orphan", passive_deletes=True
    )
    images: Mapped[list["ProjectImage"]] = relationship(
        cascade="all", order_by="ProjectImage.order", passive_deletes=True
    )
    reviews: Mapped[list["Testimonial"]] = relationship(
        back_populates="project", order_by="desc(Testimonial.created_at)", passive_deletes=True
    )


class ProjectMetrics(Timestamped, Base):
    __tablename__ = "project_metrics"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), unique=True
    )
    users: Mapped[str | None] = mapped_column(String(100))
    performance: Mapped[str | None] = mapped_column(String(100))
    rating: Mapped[str | None] = mapped_column(String(100))
    downloads: Mapped[str | None] = mapped_column(String(100))
    revenue: Mapped[str | None] = mapped_column(String(100))
    uptime: Mapped[str | None] = mapped_column(String(100))


class ProjectLinks(Timestamped, Base):
    __tablename__ = "project_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), unique=True
    )
    live: Mapped[str | None] = mapped_column(String(500))
    github: Mapped[str | None] = mapped_column(String(500))
    case: Mapped[str | None] = mapped_column(String(500))
    demo: Mapped[str | None] = mapped_column(String(500))
    docs: Mapped[str | None] = mapped_column(String(500))


class ProjectImage(Timestamped, Base):
    __tablename__ = "project_images"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    url: Mapped[str] = mapped_column(String(500))
    caption: Mapped[str | None] = mapped_column(String(255))
    order: Mapped[int] = mapped_column(default=0)
    type: Mapped[ImageType] = mapped_column(
        SAEnum(ImageType, native_enum=False, length=20), default=ImageType.SCREENSHOT
    )


class Testimonial(Timestamped, Base):
    __tablename__ = "testimonials"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="rating_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    author: Mapped[str] = mapped_column(String(255))
    role: Mapped[str | None] = mapped_column(String(255))
    company: Mapped[str | None] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)
    rating: Mapped[int | None]
    avatar: Mapped[str | None] = mapped_column(String(500))
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), index=True
    )
    client_id: Mapped[int | None] = mapped_column(ForeignKey("clients.id"), index=True)

    project: Mapped["Project | None"] = relationship(back_populates="reviews")
    client: Mapped["Client | None"] = relationship()


class TeamMember(Timestamped, Base):
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    position: Mapped[str] = mapped_column(String(100))
    department: Mapped[str] = mapped_column(String(100))
    bio: Mapped[str] = mapped_column(Text)
    avatar: Mapped[str] = mapped_column(String(500))
    skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    experience: Mapped[str] = mapped_column(String(50))
    projects: Mapped[str] = mapped_column(Text)
    speciality: Mapped[str] = mapped_column(String(100))
    social: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    gradient: Mapped[str] = mapped_column(String(100))
    icon: Mapped[str] = mapped_column(String(50))
    achievements: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)


class Service(Timestamped, Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(primary_key=True)
    icon: Mapped[str] = mapped_column(String(100))
    title: Mapped[str] = mapped_column(String(255))
    subtitle: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(100))

    features: Mapped[list["Feature"]] = relationship(
        secondary=service_features, passive_deletes=True
    )
    technologies: Mapped[list["Technology"]] = relationship(
        secondary=service_technologies, back_populates="services", passive_deletes=True
    )


class Statistic(Timestamped, Base):
    __tablename__ = "statistics"

    id: Mapped[int] = mapped_column(primary_key=True)
    icon: Mapped[str] = mapped_column(String(100))
    number: Mapped[str] = mapped_column(String(50))
    label: Mapped[str] = mapped_column(String(100))
    order: Mapped[int] = mapped_column(default=0)
    is_active: Mapped[bool] = mapped_column(default=True)


class Contact(Timestamped, Base):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    details: Mapped[list[str]] = mapped_column(JSON, default=list)
    color: Mapped[str] = mapped_column(String(100))
    href: Mapped[str | None] = mapped_column(String(500))


# ---------------------------------------------------------------------------
# Hero / About / FAQ
# ---------------------------------------------------------------------------
class HeroSection(Timestamped, Base):
    __tablename__ = "hero_sections"

    id: Mapped[int] = mapped_column(primary_key=True)
    welcome_text: Mapped[str] = mapped_column(String(255))
    main_title: Mapped[str] = mapped_column(String(255))
    highlight_text: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    logo: Mapped[str | None] = mapped_column(String(500))
    image: Mapped[str | None] = mapped_column(String(500))
    alt_text: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(default=True)


class SocialMedia(Timestamped, Base):
    __tablename__ = "social_media"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    url: Mapped[str] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(default=True)
    order: Mapped[int] = mapped_column(default=0)


class CompanyValue(Timestamped, Base):
    __tablename__ = "company_values"

    id: Mapped[int] = mapped_column(primary_key=True)
    icon: Mapped[str] = mapped_column(String(100))
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(100))
    order: Mapped[int] = mapped_column(default=0)


class TimelineItem(Timestamped, Base):
    __tablename__ = "timeline_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    year: Mapped[str] = mapped_column(String(10))
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    achievement: Mapped[str] = mapped_column(String(255))
    extended_description: Mapped[str] = mapped_column(Text)
    order: Mapped[int] = mapped_column(default=0)


class CompanyStat(Timestamped, Base):
    __tablename__ = "company_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    icon: Mapped[str] = mapped_column(String(100))
    number: Mapped[str] = mapped_column(String(50))
    label: Mapped[str] = mapped_column(String(100))
    order: Mapped[int] = mapped_column(default=0)


class CompanyInfo(Timestamped, Base):
    __tablename__ = "company_info"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_name: Mapped[str] = mapped_column(String(255))
    previous_name: Mapped[str | None] = mapped_column(String(255))
    founded_year: Mapped[str] = mapped_column(String(10))
    mission: Mapped[str] = mapped_column(Text)
    vision: Mapped[str] = mapped_column(Text)
    about_header: Mapped[str] = mapped_column(String(255))
    about_subheader: Mapped[str] = mapped_column(Text)
    journey_title: Mapped[str | None] = mapped_column(String(255))
    story_text: Mapped[str] = mapped_column(Text)
    hero_image_url: Mapped[str | None] = mapped_column(String(500))


class FaqCategory(Timestamped, Base):
    __tablename__ = "faq_categories"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    icon: Mapped[str] = mapped_column(String(100))


class FaqItem(Timestamped, Base):
    __tablename__ = "faq_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[str] = mapped_column(ForeignKey("faq_categories.id"), index=True)
    question: Mapped[str] = mapped_column(String(500))
    answer: Mapped[str] = mapped_column(Text)
    popular: Mapped[bool] = mapped_column(default=False)


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------
class BlogAuthor(Timestamped, Base):
    __tablename__ = "blog_authors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    role: Mapped[str | None] = mapped_column(String(100))
    bio: Mapped[str | None] = mapped_column(Text)
    avatar: Mapped[str | None] = mapped_column(String(500))


class BlogCategory(Timestamped, Base):
    __tablename__ = "blog_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(120), unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(100))
    color: Mapped[str | None] = mapped_column(String(100))


class BlogTag(Timestamped, Base):
    __tablename__ = "blog_tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(120), unique=True)


class BlogPost(Timestamped, Base):
    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(120), unique=True)
    excerpt: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500))
    featured: Mapped[bool] = mapped_column(default=False)
    published: Mapped[bool] = mapped_column(default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    read_time: Mapped[int | None]
    author_id: Mapped[int] = mapped_column(ForeignKey("blog_authors.id"), index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("blog_categories.id"), index=True)

    author: Mapped["BlogAuthor"] = relationship()
    category: Mapped["BlogCategory"] = relationship()
    tags: Mapped[list["BlogTag"]] = relationship(secondary=blog_post_tags, passive_deletes=True)
    stats: Mapped["BlogPostStats"] = relationship(
        cascade="all, delete-orphan", passive_deletes=True
    )
    comments: Mapped[list["BlogComment"]] = relationship(
        cascade="all", back_populates="post", passive_deletes=True
    )


class BlogPostStats(Timestamped, Base):
    __tablename__ = "blog_post_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("blog_posts.id", ondelete="CASCADE"), unique=True
    )
    views: Mapped[int] = mapped_column(default=0)
    likes: Mapped[int] = mapped_column(default=0)
    comments: Mapped[int] = mapped_column(default=0)
    shares: Mapped[int] = mapped_column(default=0)


class BlogComment(Timestamped, Base):
    __tablename__ = "blog_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("blog_posts.id", ondelete="CASCADE"), index=True
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("blog_comments.id", ondelete="CASCADE")
    )
    author_name: Mapped[str] = mapped_column(String(100))
    author_email: Mapped[str] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)

    post: Mapped["BlogPost"] = relationship(back_populates="comments")
    replies: Mapped[list["BlogComment"]] = relationship(
        cascade="all", order_by="BlogComment.created_at", passive_deletes=True
    )
