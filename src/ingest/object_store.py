"""Upload asset binaries to S3-compatible object storage."""

from __future__ import annotations

import io
from typing import Any, BinaryIO, Optional, Protocol, Union
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..common.config import AppConfig
from ..common.errors import StorageUploadFailed
from ..common.logging import get_logger

LOGGER = get_logger(__name__)

Payload = Union[bytes, BinaryIO]


class ObjectStore(Protocol):
    def upload(self, data: Payload, key: str, content_type: str) -> str: ...


class S3ObjectStore:
    """Single-attempt uploads into one bucket with public, predictable URLs."""

    def __init__(self, client: Any, bucket: str, host: str):
        self._client = client
        self._bucket = bucket
        self._host = host

    def upload(self, data: Payload, key: str, content_type: str) -> str:
        if _payload_length(data) == 0:
            raise StorageUploadFailed(key, "Refusing to upload an empty payload")
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            LOGGER.warning("storage.upload_failed", bucket=self._bucket, key=key, error=str(exc))
            raise StorageUploadFailed(key, str(exc)) from exc
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        encoded_key = quote(key.lstrip("/"), safe="/")
        return f"https://{self._bucket}.{self._host}/{encoded_key}"


def build_s3_client(config: AppConfig) -> Any:
    """Create a boto3 S3 client that never retries on its own."""

    session = boto3.session.Session(
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=config.aws_region,
    )
    return session.client(
        "s3",
        config=Config(retries={"total_max_attempts": 1, "mode": "standard"}),
    )


def build_object_store(config: AppConfig, client: Optional[Any] = None) -> S3ObjectStore:
    return S3ObjectStore(
        client or build_s3_client(config),
        bucket=config.aws_bucket,
        host=config.resolved_storage_host(),
    )


def _payload_length(data: Payload) -> int:
    if isinstance(data, (bytes, bytearray)):
        return len(data)
    position = data.tell()
    data.seek(0, io.SEEK_END)
    length = data.tell()
    data.seek(position)
    return length - position
