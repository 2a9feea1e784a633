"""Media provider client.

Image deletion goes through the ``MediaStorage`` protocol. The Cloudinary
implementation calls the blocking SDK in the threadpool; tests inject a fake.
"""

import re
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from starlette.concurrency import run_in_threadpool

from cms_api.config import settings
from cms_api.exceptions import MediaStorageError
from cms_api.logging import get_logger

logger = get_logger(__name__)

_VERSION = re.compile(r"^v\d+$")
_TRANSFORMATION = re.compile(r"^[a-z]_")
_EXTENSION = re.compile(r"\.[^/.]+$")


@dataclass(frozen=True)
class DestroyResult:
    result: str
    invalidated: bool = False

    @property
    def ok(self) -> bool:
        return self.result == "ok"


class MediaStorage(Protocol):
    async def destroy(self, public_id: str) -> DestroyResult: ...


def extract_public_id(image_url: str) -> str | None:
    """Public id of a Cloudinary delivery URL, or None for other URLs.

    ``https://res.cloudinary.com/demo/image/upload/c_fill,w_300/v1712/cms/hero.png``
    yields ``cms/hero``: the version segment and leading transformation
    segments are skipped and the extension is dropped.
    """
    parsed = urlparse(image_url)
    if "cloudinary.com" not in (parsed.hostname or ""):
        return None
    parts = parsed.path.split("/")
    if "upload" not in parts:
        return None
    upload_index = parts.index("upload")
    tail = parts[upload_index + 1 :]
    if not tail:
        return None

    version_index = next((i for i, part in enumerate(tail) if _VERSION.match(part)), None)
    if version_index is not None:
        tail = tail[version_index + 1 :]
    else:
        while len(tail) > 1 and _TRANSFORMATION.match(tail[0]):
            tail = tail[1:]

    public_id = _EXTENSION.sub("", "/".join(part for part in tail if part))
    return public_id or None


class CloudinaryStorage:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str) -> None:
        self.configured = bool(cloud_name and api_key and api_secret)
        if self.configured:
            cloudinary.config(
                cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True
            )

    async def destroy(self, public_id: str) -> DestroyResult:
        if not self.configured:
            raise MediaStorageError("Media storage configuration is incomplete")
        try:
            response: dict[str, Any] = await run_in_threadpool(
                cloudinary.uploader.destroy,
                public_id,
                resource_type="image",
                invalidate=True,
                type="upload",
            )
        except CloudinaryError as exc:
            logger.warning("media_destroy_failed", public_id=public_id, error=str(exc))
            raise MediaStorageError(f"Media provider error: {exc}") from exc
        return DestroyResult(
            result=str(response.get("result", "")),
            invalidated=bool(response.get("invalidated", False)),
        )


def build_storage() -> CloudinaryStorage:
    return CloudinaryStorage(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
    )
