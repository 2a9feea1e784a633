from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from cms_api.classifier import classify
from cms_api.config import settings
from cms_api.db.session import shutdown
from cms_api.dependencies import DB
from cms_api.exceptions import DomainError
from cms_api.logging import get_logger
from cms_api.media import build_storage
from cms_api.middleware import RequestIDMiddleware
from cms_api.rate_limit import InMemoryRateLimitStore, RateLimiter
from cms_api.routers import (
    about,
    auth,
    blogs,
    categories,
    clients,
    content,
    dashboard,
    faq,
    hero,
    media,
    projects,
    team,
    technologies,
    users,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup logs the mounted prefix; shutdown closes pooled database connections."""
    logger.info("app_started", api_prefix=settings.api_prefix)
    yield
    await shutdown()


app = FastAPI(title="Portfolio CMS API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Shared per-process state, swapped out by the test suite
app.state.rate_limiter = RateLimiter(
    InMemoryRateLimitStore(),
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
)
app.state.media_storage = build_storage()

for module_router in (
    auth.router,
    users.router,
    projects.router,
    categories.router,
    technologies.router,
    team.router,
    clients.clients_router,
    clients.testimonials_router,
    content.services_router,
    content.statistics_router,
    content.contacts_router,
    faq.router,
    hero.router,
    about.router,
    blogs.router,
    media.router,
    dashboard.router,
):
    app.include_router(module_router, prefix=settings.api_prefix)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one ``{field, message}`` item per violation."""
    return classify(exc, request.url.path)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return classify(exc, request.url.path)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations the services did not pre-check: 409 unique, 400 foreign key."""
    return classify(exc, request.url.path)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns generic error to client (no stack traces leaked)
    """
    return classify(exc, request.url.path)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint: verifies database connectivity.

    Returns 200 OK only if the database responds to a ping query.
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
