"""Media deletion schemas."""

from typing import Annotated

from pydantic import Field

from cms_api.schemas.common import CamelModel, ShortText, Url


class ImageRef(CamelModel):
    image_url: Url
    public_id: Annotated[str, Field(min_length=1, max_length=255)] | None = None


class ImageBatch(CamelModel):
    images: Annotated[list[ImageRef], Field(min_length=1, max_length=10)]


class DeletedImage(CamelModel):
    public_id: str
    image_url: str
    cache_invalidated: bool


class ImageOutcome(CamelModel):
    image_url: str
    public_id: str | None
    success: bool
    result: ShortText | None = None
    error: str | None = None


class BatchSummary(CamelModel):
    total: int
    successful: int
    failed: int


class BatchResult(CamelModel):
    summary: BatchSummary
    results: list[ImageOutcome]
