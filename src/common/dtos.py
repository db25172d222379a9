"""Shared DTOs used across publisher modules."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, BinaryIO, Callable, Dict, List, Optional

MODEL_CONTENT_TYPE = "model/gltf-binary"
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"


class StorageFolder:
    """Logical key prefixes inside the object store."""

    MODELS = "models"
    THUMBNAILS = "thumbnails"
    IMAGES = "images"


@dataclass(slots=True)
class FilePart:
    """One decoded file part of a multipart request."""

    filename: str
    content_type: Optional[str]
    stream: BinaryIO
    size: Optional[int] = None

    def read(self) -> bytes:
        self.stream.seek(0)
        return self.stream.read()

    def byte_count(self) -> int:
        if self.size is not None:
            return self.size
        position = self.stream.tell()
        end = self.stream.seek(0, os.SEEK_END)
        self.stream.seek(position)
        return end


@dataclass(slots=True)
class DecodedForm:
    """Scalar fields and file parts keyed by form field name.

    Every field is an ordered sequence; where a scalar is needed the first
    element wins.
    """

    fields: Dict[str, List[str]] = field(default_factory=dict)
    files: Dict[str, List[FilePart]] = field(default_factory=dict)
    closer: Optional[Callable[[], Awaitable[None]]] = field(default=None, repr=False, compare=False)

    def first_value(self, name: str) -> Optional[str]:
        values = self.fields.get(name) or []
        return values[0] if values else None

    def first_file(self, name: str) -> Optional[FilePart]:
        parts = self.files.get(name) or []
        return parts[0] if parts else None

    def files_for(self, name: str) -> List[FilePart]:
        return list(self.files.get(name) or [])

    async def close(self) -> None:
        """Release spooled temp files held by the parser."""
        if self.closer is not None:
            await self.closer()


@dataclass(slots=True)
class AssetRecord:
    """Represents one row of the ``models`` table."""

    id: str
    name: str
    category: str
    glb: str
    price: float = 0.0
    description: str = ""
    thumbnail: str = ""
    images: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "images": list(self.images),
            "glb": self.glb,
        }
        if self.created_at is not None:
            row["created_at"] = self.created_at
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AssetRecord":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            category=row["category"],
            glb=row["glb"],
            price=float(row.get("price") or 0),
            description=row.get("description") or "",
            thumbnail=row.get("thumbnail") or "",
            images=list(row.get("images") or []),
            created_at=_as_text(row.get("created_at")),
        )


@dataclass(slots=True)
class PublishedUrls:
    """Object URLs produced by one ingestion request."""

    glb: str
    thumbnail: str = ""
    images: List[str] = field(default_factory=list)

    def all(self) -> List[str]:
        urls = [self.glb]
        if self.thumbnail:
            urls.append(self.thumbnail)
        urls.extend(self.images)
        return urls


@dataclass(slots=True)
class IngestionResult:
    """Successful outcome of the ingestion pipeline."""

    record: AssetRecord
    urls: PublishedUrls
    message: str


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    isoformat = getattr(value, "isoformat", None)
    return isoformat() if callable(isoformat) else str(value)
