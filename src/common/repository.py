"""Supabase-backed repository for asset metadata."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from postgrest.exceptions import APIError as PostgrestAPIError

from .dtos import AssetRecord
from .errors import DuplicateAssetError, MetadataPersistFailed

UNIQUE_VIOLATION_CODE = "23505"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetRepository:
    """Insert-only helper that wraps the Supabase client.

    Uniqueness of ``id`` is left to the table's primary key; nothing is
    checked up front.
    """

    def __init__(
        self,
        client: Any,
        table: str = "models",
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._client = client
        self._table = table
        self._clock = clock

    def insert(self, record: AssetRecord) -> AssetRecord:
        payload = record.to_row()
        payload["created_at"] = self._clock().isoformat()
        response = self._execute(self._client.table(self._table).insert(payload))
        return AssetRecord.from_row(self._single(response.data))

    def _execute(self, builder: Any) -> Any:
        try:
            return builder.execute()
        except PostgrestAPIError as exc:
            raise _map_postgrest_error(exc) from exc
        except Exception as exc:  # pragma: no cover - network/runtime failures
            raise MetadataPersistFailed(str(exc)) from exc

    @staticmethod
    def _single(rows: Optional[Iterable[Dict[str, Any]]]) -> Dict[str, Any]:
        rows = list(rows or [])
        if not rows:
            raise MetadataPersistFailed("Supabase returned no rows for insert")
        return rows[0]


def _map_postgrest_error(error: PostgrestAPIError) -> MetadataPersistFailed:
    message = getattr(error, "message", None) or getattr(error, "details", None)
    text = str(message or error)
    if _is_unique_violation(error):
        return DuplicateAssetError(text)
    return MetadataPersistFailed(text)


def _is_unique_violation(error: PostgrestAPIError) -> bool:
    code = getattr(error, "code", None)
    if code is not None:
        return str(code) == UNIQUE_VIOLATION_CODE
    text = " ".join(
        str(getattr(error, attr, "") or "").lower()
        for attr in ("message", "details", "hint")
    )
    return "duplicate key" in text or "already exists" in text
