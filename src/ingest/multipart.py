"""Decode multipart asset submissions into fields and file parts."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

from starlette.datastructures import UploadFile
from starlette.requests import Request

from ..common.dtos import DecodedForm, FilePart
from ..common.errors import RequestDecodeFailed, ValidationFailed

MULTIPART_CONTENT_TYPE = "multipart/form-data"
DEFAULT_MAX_FILES = 100
DEFAULT_MAX_FIELDS = 100
TOO_MANY_FILES_PREFIX = "too many files"


class RequestDecoder(Protocol):
    async def decode(self, request: Request) -> DecodedForm: ...


class MultipartDecoder:
    """Wraps Starlette's form parser (python-multipart underneath).

    File parts larger than the spool threshold are written to temporary
    files by the parser, so big binaries never sit fully in memory.
    """

    def __init__(
        self,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        max_fields: int = DEFAULT_MAX_FIELDS,
    ):
        self._max_files = max_files
        self._max_fields = max_fields

    async def decode(self, request: Request) -> DecodedForm:
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith(MULTIPART_CONTENT_TYPE):
            raise RequestDecodeFailed(
                "Form parse error",
                details=f"Expected {MULTIPART_CONTENT_TYPE} body, got {content_type or 'nothing'}",
            )
        try:
            form = await request.form(max_files=self._max_files, max_fields=self._max_fields)
        except Exception as exc:
            detail = _describe(exc)
            if detail.lower().startswith(TOO_MANY_FILES_PREFIX):
                raise ValidationFailed(
                    "images",
                    f"At most {self._max_files} files may be submitted in one bundle",
                ) from exc
            raise RequestDecodeFailed("Form parse error", details=detail) from exc
        decoded = _to_decoded_form(form.multi_items())
        decoded.closer = form.close
        return decoded


def _to_decoded_form(items: List[tuple[str, Any]]) -> DecodedForm:
    fields: Dict[str, List[str]] = {}
    files: Dict[str, List[FilePart]] = {}
    for name, value in items:
        if isinstance(value, UploadFile):
            if _is_empty_part(value):
                continue
            files.setdefault(name, []).append(
                FilePart(
                    filename=value.filename or "",
                    content_type=value.content_type or None,
                    stream=value.file,
                    size=value.size,
                )
            )
        else:
            fields.setdefault(name, []).append(str(value))
    return DecodedForm(fields=fields, files=files)


def _is_empty_part(upload: UploadFile) -> bool:
    return not upload.filename and not upload.size


def _describe(exc: Exception) -> str:
    detail = getattr(exc, "detail", None) or getattr(exc, "message", None)
    return str(detail or exc)
