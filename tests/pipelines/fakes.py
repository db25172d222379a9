from __future__ import annotations

import io
from typing import Dict, List, Optional, Tuple

from src.common.dtos import AssetRecord, DecodedForm, FilePart
from src.common.errors import DuplicateAssetError, MetadataPersistFailed, StorageUploadFailed


class FakeObjectStore:
    """Records every durable write; can be told to fail on the n-th upload."""

    def __init__(self, fail_on_call: Optional[int] = None, bucket: str = "assets"):
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.attempted_keys: List[str] = []
        self._fail_on_call = fail_on_call
        self._bucket = bucket

    def upload(self, data, key: str, content_type: str) -> str:
        self.attempted_keys.append(key)
        if self._fail_on_call is not None and len(self.attempted_keys) == self._fail_on_call:
            raise StorageUploadFailed(key, "simulated store outage")
        payload = data if isinstance(data, bytes) else data.read()
        self.objects[key] = (payload, content_type)
        return f"https://{self._bucket}.s3.test-region.amazonaws.com/{key}"

    def keys_in(self, folder: str) -> List[str]:
        return [key for key in self.objects if key.startswith(f"{folder}/")]


class FakeRepository:
    """In-memory metadata store that enforces unique ids."""

    def __init__(self, error: Optional[Exception] = None):
        self.rows: Dict[str, AssetRecord] = {}
        self.insert_calls = 0
        self._error = error

    def insert(self, record: AssetRecord) -> AssetRecord:
        self.insert_calls += 1
        if self._error is not None:
            raise self._error
        if record.id in self.rows:
            raise DuplicateAssetError(
                'duplicate key value violates unique constraint "models_pkey"'
            )
        stored = AssetRecord(
            id=record.id,
            name=record.name,
            category=record.category,
            glb=record.glb,
            price=record.price,
            description=record.description,
            thumbnail=record.thumbnail,
            images=list(record.images),
            created_at="2026-01-01T00:00:00+00:00",
        )
        self.rows[record.id] = stored
        return stored


class FailingRepository(FakeRepository):
    def __init__(self, message: str = "connection refused"):
        super().__init__(error=MetadataPersistFailed(message))


class FakeDecoder:
    def __init__(self, form: Optional[DecodedForm] = None, error: Optional[Exception] = None):
        self.form = form or DecodedForm()
        self.error = error
        self.calls = 0

    async def decode(self, request) -> DecodedForm:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.form


class SequenceKeyDeriver:
    """Deterministic key deriver for assertions on exact keys."""

    def __init__(self) -> None:
        self.counter = 0

    def key_for(self, folder: str, filename: str) -> str:
        self.counter += 1
        return f"{folder}/{self.counter}-{filename}"


def file_part(
    filename: str, content: bytes = b"payload", content_type: Optional[str] = None
) -> FilePart:
    return FilePart(
        filename=filename,
        content_type=content_type,
        stream=io.BytesIO(content),
        size=len(content),
    )


def build_form(
    *,
    fields: Optional[Dict[str, str]] = None,
    glb: Optional[FilePart] = None,
    thumbnail: Optional[FilePart] = None,
    images: Optional[List[FilePart]] = None,
) -> DecodedForm:
    form = DecodedForm(fields={name: [value] for name, value in (fields or {}).items()})
    if glb is not None:
        form.files["glb"] = [glb]
    if thumbnail is not None:
        form.files["thumbnail"] = [thumbnail]
    if images:
        form.files["images"] = list(images)
    return form
