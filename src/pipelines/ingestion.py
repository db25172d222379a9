"""Request-scoped ingestion pipeline: authorize, decode, validate, upload, persist.

Stages run strictly in order and the first failure ends the request. Objects
already written when the metadata insert fails are left in the store (they
become orphans); nothing here deletes them.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import uuid4

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from ..common.dtos import (
    DEFAULT_IMAGE_CONTENT_TYPE,
    MODEL_CONTENT_TYPE,
    AssetRecord,
    DecodedForm,
    FilePart,
    IngestionResult,
    PublishedUrls,
    StorageFolder,
)
from ..common.errors import (
    DuplicateAssetError,
    MetadataPersistFailed,
    RequestDecodeFailed,
    Unauthorized,
    ValidationFailed,
)
from ..common.logging import bind_request_context, clear_request_context, get_logger
from ..common.repository import AssetRepository
from ..common.text import parse_price, slugify
from ..ingest.keys import KeyDeriver
from ..ingest.multipart import RequestDecoder
from ..ingest.object_store import ObjectStore

LOGGER = get_logger(__name__)

FALLBACK_MODEL_FILENAME = "model.glb"
FALLBACK_THUMBNAIL_FILENAME = "thumbnail.jpg"
FALLBACK_IMAGE_FILENAME = "image.jpg"


@dataclass(slots=True)
class AssetSubmission:
    """Validated scalar fields plus the file parts to publish."""

    id: str
    name: str
    category: str
    glb: FilePart
    price: float = 0.0
    description: str = ""
    thumbnail: Optional[FilePart] = None
    images: List[FilePart] = field(default_factory=list)


def validate_submission(form: DecodedForm) -> AssetSubmission:
    """Check required fields in a fixed order and report the first gap."""

    name = (form.first_value("name") or "").strip()
    if not name:
        raise ValidationFailed("name", "name is required")

    asset_id = (form.first_value("id") or "").strip() or slugify(name)
    if not asset_id:
        raise ValidationFailed("id", "id is required and could not be derived from name")

    category = (form.first_value("category") or "").strip()
    if not category:
        raise ValidationFailed("category", "category is required")

    price = parse_price(form.first_value("price"))
    if price < 0:
        raise ValidationFailed("price", "price must not be negative")

    glb = form.first_file("glb")
    if glb is None:
        raise ValidationFailed("glb", "GLB file is required")
    _require_content("glb", [glb])

    thumbnail = form.first_file("thumbnail")
    images = form.files_for("images")
    _require_content("thumbnail", [thumbnail] if thumbnail is not None else [])
    _require_content("images", images)

    return AssetSubmission(
        id=asset_id,
        name=name,
        category=category,
        glb=glb,
        price=price,
        description=form.first_value("description") or "",
        thumbnail=thumbnail,
        images=images,
    )


def _require_content(field_name: str, parts: List[FilePart]) -> None:
    for part in parts:
        if part.byte_count() <= 0:
            label = part.filename or field_name
            raise ValidationFailed(field_name, f"{label} is empty")


class IngestionOrchestrator:
    """Drives one submission from raw request to persisted record."""

    def __init__(
        self,
        *,
        admin_secret: str,
        decoder: RequestDecoder,
        object_store: ObjectStore,
        repository: AssetRepository,
        key_deriver: Optional[KeyDeriver] = None,
    ):
        self._admin_secret = admin_secret
        self._decoder = decoder
        self._object_store = object_store
        self._repository = repository
        self._key_deriver = key_deriver or KeyDeriver()

    async def ingest(self, request: Request, presented_secret: Optional[str]) -> IngestionResult:
        bind_request_context(request_id=uuid4().hex)
        try:
            return await self._run(request, presented_secret)
        finally:
            clear_request_context()

    async def _run(self, request: Request, presented_secret: Optional[str]) -> IngestionResult:
        self.authorize(presented_secret)
        LOGGER.info("ingestion.authorized")

        try:
            form = await self._decoder.decode(request)
        except RequestDecodeFailed as exc:
            LOGGER.warning("ingestion.decode_failed", error=exc.details)
            raise
        except ValidationFailed as exc:
            LOGGER.warning("ingestion.validation_failed", field=exc.field, error=exc.message)
            raise
        try:
            return await self._process(form)
        finally:
            await form.close()

    async def _process(self, form: DecodedForm) -> IngestionResult:
        LOGGER.info(
            "ingestion.decoded",
            fields=sorted(form.fields),
            files={name: len(parts) for name, parts in form.files.items()},
        )

        try:
            submission = validate_submission(form)
        except ValidationFailed as exc:
            LOGGER.warning("ingestion.validation_failed", field=exc.field, error=exc.message)
            raise
        bind_request_context(asset_id=submission.id)

        urls = await self._publish_files(submission)
        record = await self._persist(submission, urls)
        return IngestionResult(
            record=record,
            urls=urls,
            message=f'Model "{submission.name}" uploaded successfully!',
        )

    def authorize(self, presented_secret: Optional[str]) -> None:
        if not presented_secret or not hmac.compare_digest(
            presented_secret.encode("utf-8"), self._admin_secret.encode("utf-8")
        ):
            LOGGER.warning("ingestion.unauthorized", secret_present=bool(presented_secret))
            raise Unauthorized()

    async def _publish_files(self, submission: AssetSubmission) -> PublishedUrls:
        glb_url = await self._upload(
            submission.glb,
            StorageFolder.MODELS,
            FALLBACK_MODEL_FILENAME,
            MODEL_CONTENT_TYPE,
        )
        urls = PublishedUrls(glb=glb_url)

        if submission.thumbnail is not None:
            urls.thumbnail = await self._upload(
                submission.thumbnail,
                StorageFolder.THUMBNAILS,
                FALLBACK_THUMBNAIL_FILENAME,
                submission.thumbnail.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
            )

        for image in submission.images:
            urls.images.append(
                await self._upload(
                    image,
                    StorageFolder.IMAGES,
                    FALLBACK_IMAGE_FILENAME,
                    image.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
                )
            )
        return urls

    async def _upload(
        self, part: FilePart, folder: str, fallback_name: str, content_type: str
    ) -> str:
        key = self._key_deriver.key_for(folder, part.filename or fallback_name)
        part.stream.seek(0)
        url = await run_in_threadpool(self._object_store.upload, part.stream, key, content_type)
        LOGGER.info("ingestion.upload_succeeded", folder=folder, key=key)
        return url

    async def _persist(self, submission: AssetSubmission, urls: PublishedUrls) -> AssetRecord:
        record = AssetRecord(
            id=submission.id,
            name=submission.name,
            category=submission.category,
            glb=urls.glb,
            price=submission.price,
            description=submission.description,
            thumbnail=urls.thumbnail,
            images=list(urls.images),
        )
        try:
            persisted = await run_in_threadpool(self._repository.insert, record)
        except MetadataPersistFailed as exc:
            exc.orphaned_urls = urls.all()
            LOGGER.warning(
                "ingestion.orphaned_objects",
                error=exc.details,
                duplicate=isinstance(exc, DuplicateAssetError),
                orphaned_urls=exc.orphaned_urls,
            )
            raise
        LOGGER.info("ingestion.persisted", created_at=persisted.created_at)
        return persisted
