"""Streamlit page for publishing a 3D model bundle."""

from __future__ import annotations

import streamlit as st

from src.common.config import load_client_config
from src.common.errors import ConfigError
from src.common.logging import configure_logging, get_logger
from src.common.text import slugify
from src.ui.submission import (
    CATEGORIES,
    IMAGE_FILE_TYPES,
    MODEL_FILE_TYPES,
    STATUS_LABELS,
    STATUS_WIDGET_STATES,
    AssetDraft,
    SubmissionOutcome,
    SubmissionState,
    UploadedFile,
    submit_asset,
)

configure_logging()
LOGGER = get_logger(__name__)
st.set_page_config(page_title="Upload Model", page_icon="⬡")
st.title("Upload Model")
st.caption("Publish a GLB model with its thumbnail and gallery images.")

try:
    client_config = load_client_config()
except ConfigError as exc:
    st.error(str(exc))
    st.stop()


def _to_uploaded(upload) -> UploadedFile:
    return UploadedFile(name=upload.name, content=upload.getvalue(), content_type=upload.type)


name = st.text_input("Model name *", placeholder="Mustang GT500")
asset_id = st.text_input("Auto ID", value=slugify(name), placeholder="mustang-gt500")
price = st.number_input("Price (USD)", min_value=0.0, step=1.0, value=0.0)
category = st.selectbox("Category *", CATEGORIES, format_func=str.capitalize)
description = st.text_area("Description", placeholder="Brief description of the model...")

glb_upload = st.file_uploader("GLB file *", type=list(MODEL_FILE_TYPES))
thumbnail_upload = st.file_uploader("Thumbnail", type=list(IMAGE_FILE_TYPES))
image_uploads = st.file_uploader(
    "Gallery images", type=list(IMAGE_FILE_TYPES), accept_multiple_files=True
)

if "submission_outcome" not in st.session_state:
    st.session_state["submission_outcome"] = SubmissionOutcome(
        SubmissionState.IDLE, STATUS_LABELS[SubmissionState.IDLE]
    )

if st.button("Upload to S3 + Supabase", type="primary"):
    draft = AssetDraft(
        id=asset_id,
        name=name,
        price=str(price),
        category=category,
        description=description,
        glb=_to_uploaded(glb_upload) if glb_upload else None,
        thumbnail=_to_uploaded(thumbnail_upload) if thumbnail_upload else None,
        images=[_to_uploaded(upload) for upload in image_uploads or []],
    )
    problem = draft.missing_requirement()
    if problem:
        st.warning(problem)
        st.stop()

    state = SubmissionState.UPLOADING
    with st.status(STATUS_LABELS[state], state=STATUS_WIDGET_STATES[state], expanded=False) as status:
        outcome = submit_asset(draft, client_config)
        status.update(label=STATUS_LABELS[outcome.state], state=STATUS_WIDGET_STATES[outcome.state])
    st.session_state["submission_outcome"] = outcome
    LOGGER.info("ui.upload_finished", asset_id=draft.resolved_id(), state=outcome.state.value)

outcome = st.session_state["submission_outcome"]
if outcome.state is SubmissionState.IDLE:
    st.caption(outcome.message)
elif outcome.state is SubmissionState.SUCCESS:
    glb_url = outcome.payload.get("urls", {}).get("glb", "")
    st.success(outcome.message)
    st.caption(f"GLB → `{glb_url.rsplit('/', 1)[-1]}`")
    st.json(outcome.payload.get("model", {}))
else:
    st.error(outcome.message)
