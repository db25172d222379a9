"""Home page for the asset publisher control panel."""

from __future__ import annotations

from textwrap import dedent

import streamlit as st

from src.common.logging import configure_logging

configure_logging()
st.set_page_config(page_title="3D Asset Uploader", page_icon="⬡")
st.title("3D Asset Uploader")
st.write(
    "Use the sidebar to open the upload page. "
    "Every submission is published to S3 and recorded in Supabase in one request."
)

st.subheader("Available Pages")
st.markdown(
    """
- **Upload Model** — Submit a `.glb` model, an optional thumbnail and any number of gallery images.
  The ID defaults to a slug of the model name.
"""
)

st.subheader("Publishing Pipeline")
st.caption(
    "Stages run in order and the first failure ends the request. "
    "Files stored before a failed metadata insert stay in S3 as orphans."
)

PIPELINE_DIAGRAM = dedent(
    """
    digraph pipeline {
        rankdir=LR;
        node [shape=box, style="rounded,filled", fontname="Helvetica"];
        authorize [label="Authorize", fillcolor="#9ecae1", color="#3182bd"];
        decode [label="Decode form", fillcolor="#9ecae1", color="#3182bd"];
        validate [label="Validate", fillcolor="#c7e9c0", color="#31a354"];
        glb [label="models/", fillcolor="#fee391", color="#fec44f"];
        thumb [label="thumbnails/", fillcolor="#fee391", color="#fec44f"];
        images [label="images/", fillcolor="#fee391", color="#fec44f"];
        persist [label="Supabase models row", fillcolor="#d9d9d9", color="#636363"];
        failed [label="Error response", fillcolor="#fcbba1", color="#cb181d"];

        authorize -> decode -> validate -> glb -> thumb -> images -> persist;
        authorize -> failed [label="401", style="dashed"];
        validate -> failed [label="400", style="dashed"];
        glb -> failed [label="500", style="dashed"];
        persist -> failed [label="500 (orphans remain)", style="dashed"];
    }
    """
)
st.graphviz_chart(PIPELINE_DIAGRAM)

st.subheader("Getting Started")
st.write(
    "1. Start the API with `uvicorn src.api.app:create_app --factory`.\n"
    "2. Set `UPLOAD_API_URL` and `ADMIN_SECRET` for this app.\n"
    "3. Open Upload Model and submit a bundle."
)
