"""Client-side submission helpers used by the Streamlit upload page."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..common.config import ClientConfig
from ..common.text import slugify

CATEGORIES = (
    "cars",
    "bikes",
    "aircraft",
    "boats",
    "characters",
    "environments",
    "props",
    "other",
)
ADMIN_SECRET_HEADER = "x-admin-secret"
MODEL_FILE_TYPES = ("glb",)
IMAGE_FILE_TYPES = ("png", "jpg", "jpeg", "webp")


class SubmissionState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


STATUS_LABELS = {
    SubmissionState.IDLE: "Ready to upload",
    SubmissionState.UPLOADING: "Uploading...",
    SubmissionState.SUCCESS: "Upload complete",
    SubmissionState.ERROR: "Upload failed",
}

# Values accepted by st.status(state=...); idle has no running widget.
STATUS_WIDGET_STATES = {
    SubmissionState.UPLOADING: "running",
    SubmissionState.SUCCESS: "complete",
    SubmissionState.ERROR: "error",
}


@dataclass(slots=True)
class UploadedFile:
    name: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(slots=True)
class AssetDraft:
    """Form values and file selections collected from the user."""

    name: str
    category: str
    glb: Optional[UploadedFile]
    id: str = ""
    price: str = ""
    description: str = ""
    thumbnail: Optional[UploadedFile] = None
    images: List[UploadedFile] = field(default_factory=list)

    def resolved_id(self) -> str:
        return self.id.strip() or slugify(self.name)

    def missing_requirement(self) -> Optional[str]:
        if self.glb is None or not self.glb.name.lower().endswith(".glb"):
            return "Please select a .glb file"
        if not self.name.strip() or not self.category.strip():
            return "Name and category are required"
        return None

    def build_form_data(self) -> List[Tuple[str, str]]:
        return [
            ("id", self.resolved_id()),
            ("name", self.name),
            ("price", self.price),
            ("category", self.category),
            ("description", self.description),
        ]

    def build_files(self) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        files: List[Tuple[str, Tuple[str, bytes, str]]] = []
        if self.glb is not None:
            files.append(("glb", _file_tuple(self.glb, "model/gltf-binary")))
        if self.thumbnail is not None:
            files.append(("thumbnail", _file_tuple(self.thumbnail, "image/jpeg")))
        for image in self.images:
            files.append(("images", _file_tuple(image, "image/jpeg")))
        return files


@dataclass(slots=True)
class SubmissionOutcome:
    state: SubmissionState
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)


def submit_asset(
    draft: AssetDraft,
    config: ClientConfig,
    session: Optional[requests.Session] = None,
) -> SubmissionOutcome:
    """POST the draft as one multipart request and interpret the response."""

    problem = draft.missing_requirement()
    if problem:
        return SubmissionOutcome(SubmissionState.ERROR, problem)

    http = session or requests.Session()
    try:
        response = http.post(
            config.api_url,
            data=draft.build_form_data(),
            files=draft.build_files(),
            headers={ADMIN_SECRET_HEADER: config.admin_secret},
            timeout=config.timeout_seconds,
        )
    except requests.RequestException as exc:
        return SubmissionOutcome(SubmissionState.ERROR, f"Upload failed: {exc}")
    return interpret_response(response.status_code, _json_body(response))


def interpret_response(status_code: int, body: Dict[str, Any]) -> SubmissionOutcome:
    if 200 <= status_code < 300 and body.get("success"):
        return SubmissionOutcome(
            SubmissionState.SUCCESS,
            str(body.get("message") or "Upload complete"),
            body,
        )
    message = str(body.get("error") or f"Upload failed (HTTP {status_code})")
    return SubmissionOutcome(SubmissionState.ERROR, message, body)


def _json_body(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _file_tuple(upload: UploadedFile, fallback_type: str) -> Tuple[str, bytes, str]:
    return (upload.name, upload.content, upload.content_type or fallback_type)
