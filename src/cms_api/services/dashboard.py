"""Admin dashboard aggregates."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.models import (
    BlogPost,
    Client,
    Project,
    ProjectStatus,
    Technology,
    Testimonial,
    project_technologies,
)
from cms_api.repositories import base as repo
from cms_api.schemas.dashboard import Activity, DashboardStats, ProjectStats, TechnologyUsage

TOP_TECHNOLOGIES = 10
RECENT_ACTIVITIES = 8
EXCERPT_LENGTH = 50
IN_PROGRESS = (ProjectStatus.DEVELOPMENT, ProjectStatus.BETA)


async def technology_usage(
    db: AsyncSession, limit: int = TOP_TECHNOLOGIES
) -> list[TechnologyUsage]:
    """Technologies ranked by how many projects use them."""
    usage = func.count(project_technologies.c.project_id).label("usage")
    result = await db.execute(
        select(Technology.name, usage)
        .join(project_technologies, project_technologies.c.technology_id == Technology.id)
        .group_by(Technology.id, Technology.name)
        .order_by(usage.desc(), Technology.name)
        .limit(limit)
    )
    return [TechnologyUsage(name=name, count=count) for name, count in result.all()]


async def average_rating(db: AsyncSession) -> float:
    result = await db.execute(select(func.avg(Testimonial.rating)))
    average = result.scalar_one_or_none()
    return round(float(average), 1) if average is not None else 0.0


async def recent_activities(db: AsyncSession) -> list[Activity]:
    projects = await repo.list_all(
        db, Project, order_by=(Project.updated_at.desc(), Project.id.desc()), limit=3
    )
    posts = await repo.list_all(
        db,
        BlogPost,
        BlogPost.published.is_(True),
        order_by=(BlogPost.updated_at.desc(), BlogPost.id.desc()),
        limit=3,
    )
    testimonials = await repo.list_all(
        db, Testimonial, order_by=(Testimonial.created_at.desc(), Testimonial.id.desc()), limit=2
    )

    activities = [
        Activity(
            id=f"project-{project.id}",
            type="project",
            title=f"Project Updated: {project.title}",
            description=f"Status changed to {project.status}",
            timestamp=project.updated_at,
            status=project.status,
        )
        for project in projects
    ]
    activities += [
        Activity(
            id=f"blog-{post.id}",
            type="blog",
            title=f"New Blog Post: {post.title}",
            description="Published and live",
            timestamp=post.updated_at,
            status="Published",
        )
        for post in posts
    ]
    activities += [
        Activity(
            id=f"testimonial-{testimonial.id}",
            type="testimonial",
            title=f"New Testimonial from {testimonial.author}",
            description=testimonial.content[:EXCERPT_LENGTH] + "...",
            timestamp=testimonial.created_at,
        )
        for testimonial in testimonials
    ]
    activities.sort(key=lambda activity: activity.timestamp, reverse=True)
    return activities[:RECENT_ACTIVITIES]


async def get_stats(db: AsyncSession) -> DashboardStats:
    total_projects = await repo.count_rows(db, Project)
    by_status = await db.execute(
        select(Project.status, func.count()).group_by(Project.status).order_by(Project.status)
    )
    projects_by_status = {str(status): count for status, count in by_status.all()}
    completed = projects_by_status.get(ProjectStatus.LIVE, 0)
    in_progress = sum(projects_by_status.get(status, 0) for status in IN_PROGRESS)

    return DashboardStats(
        total_projects=total_projects,
        total_blog_posts=await repo.count_rows(db, BlogPost, [BlogPost.published.is_(True)]),
        total_clients=await repo.count_rows(db, Client),
        active_clients=await repo.count_rows(db, Client, [Client.is_active.is_(True)]),
        projects_by_status=projects_by_status,
        project_stats=ProjectStats(
            total_projects=total_projects,
            completed_projects=completed,
            in_progress_projects=in_progress,
        ),
        average_rating=await average_rating(db),
        technology_usage=await technology_usage(db),
        recent_activities=await recent_activities(db),
    )
