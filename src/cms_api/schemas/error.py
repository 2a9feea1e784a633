"""Error response schemas.

All error responses use the same envelope:
``{"success": false, "message": "...", "errors": [{"field": ..., "message": ...}]}``.
The classifier may add resource-specific top-level keys (``projectCount``,
``retryAfter``), which is why the model allows extras.
"""

from pydantic import BaseModel, ConfigDict


class ErrorItem(BaseModel):
    """One violated field with a human-readable message."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Top-level envelope returned by all error responses."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str
    errors: list[ErrorItem] | None = None
