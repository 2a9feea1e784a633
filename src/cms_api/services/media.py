"""Image deletion at the media provider."""

from cms_api.exceptions import DomainError, FieldError, MediaStorageError, ValidationError
from cms_api.logging import get_logger
from cms_api.media import MediaStorage, extract_public_id
from cms_api.schemas.media import (
    BatchResult,
    BatchSummary,
    DeletedImage,
    ImageBatch,
    ImageOutcome,
    ImageRef,
)

logger = get_logger(__name__)

UNRESOLVED_MESSAGE = (
    "Unable to extract public_id from image URL. Please provide public_id explicitly."
)


def resolve_public_id(ref: ImageRef) -> str:
    public_id = ref.public_id or extract_public_id(ref.image_url)
    if public_id is None:
        raise ValidationError([FieldError("imageUrl", UNRESOLVED_MESSAGE)])
    return public_id


async def delete_image(storage: MediaStorage, ref: ImageRef) -> DeletedImage:
    public_id = resolve_public_id(ref)
    outcome = await storage.destroy(public_id)
    if outcome.result == "not found":
        raise MediaStorageError("Image not found in media storage", outcome.result)
    if not outcome.ok:
        raise MediaStorageError(f"Media provider returned: {outcome.result}", outcome.result)
    logger.info("image_deleted", public_id=public_id, invalidated=outcome.invalidated)
    return DeletedImage(
        public_id=public_id, image_url=ref.image_url, cache_invalidated=outcome.invalidated
    )


async def delete_images(storage: MediaStorage, batch: ImageBatch) -> BatchResult:
    """Delete each image in turn; one failure does not stop the rest."""
    results: list[ImageOutcome] = []
    for ref in batch.images:
        public_id = ref.public_id or extract_public_id(ref.image_url)
        if public_id is None:
            results.append(
                ImageOutcome(
                    image_url=ref.image_url,
                    public_id=None,
                    success=False,
                    error="Unable to extract public_id from URL",
                )
            )
            continue
        try:
            outcome = await storage.destroy(public_id)
        except DomainError as exc:
            results.append(
                ImageOutcome(
                    image_url=ref.image_url, public_id=public_id, success=False, error=exc.message
                )
            )
            continue
        results.append(
            ImageOutcome(
                image_url=ref.image_url,
                public_id=public_id,
                success=outcome.ok,
                result=outcome.result,
                error=None if outcome.ok else f"Media provider returned: {outcome.result}",
            )
        )

    successful = sum(1 for result in results if result.success)
    logger.info("images_deleted", total=len(results), successful=successful)
    return BatchResult(
        summary=BatchSummary(
            total=len(results), successful=successful, failed=len(results) - successful
        ),
        results=results,
    )
