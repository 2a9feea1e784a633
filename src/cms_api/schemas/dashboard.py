"""Admin dashboard schemas."""

from datetime import datetime
from typing import Literal

from cms_api.schemas.common import CamelModel


class TechnologyUsage(CamelModel):
    name: str
    count: int


class ProjectStats(CamelModel):
    total_projects: int
    completed_projects: int
    in_progress_projects: int


class Activity(CamelModel):
    id: str
    type: Literal["project", "blog", "testimonial"]
    title: str
    description: str
    timestamp: datetime
    status: str | None = None


class DashboardStats(CamelModel):
    total_projects: int
    total_blog_posts: int
    total_clients: int
    active_clients: int
    projects_by_status: dict[str, int]
    project_stats: ProjectStats
    average_rating: float
    technology_usage: list[TechnologyUsage]
    recent_activities: list[Activity]
