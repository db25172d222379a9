"""Domain-specific exception hierarchy for the asset publisher."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class AssetPublisherError(Exception):
    """Base exception for known publisher failures."""


class ConfigError(AssetPublisherError):
    """Raised when required configuration is missing or invalid."""


class IngestionError(AssetPublisherError):
    """Terminal failure of one ingestion request.

    Every subclass maps to exactly one HTTP status. ``details`` carries the
    message of the underlying cause when there is one.
    """

    kind = "IngestionError"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class Unauthorized(IngestionError):
    """Raised when the shared admin secret is missing or wrong."""

    kind = "Unauthorized"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class RequestDecodeFailed(IngestionError):
    """Raised when the multipart body cannot be parsed."""

    kind = "RequestDecodeFailed"


class ValidationFailed(IngestionError):
    """Raised when a required field or the primary binary is missing."""

    kind = "ValidationFailed"
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = self.field
        return payload


class StorageUploadFailed(IngestionError):
    """Raised when the object store rejects or fails an upload."""

    kind = "StorageUploadFailed"

    def __init__(self, key: str, details: str):
        super().__init__("Upload failed", details=details)
        self.key = key


class MetadataPersistFailed(IngestionError):
    """Raised when the metadata row cannot be inserted.

    Objects uploaded earlier in the request stay in the store; their URLs are
    kept on ``orphaned_urls``.
    """

    kind = "MetadataPersistFailed"

    def __init__(self, details: str, orphaned_urls: Optional[Sequence[str]] = None):
        super().__init__("Metadata insert failed", details=details)
        self.orphaned_urls: List[str] = list(orphaned_urls or [])


class DuplicateAssetError(MetadataPersistFailed):
    """Raised when an asset with the same id already exists."""
