"""
Resume Ingestion - Streamlit frontend.
No business logic in layout; extraction, quality gate and parsing live in the ingestion package.
"""

import json
from typing import Optional

import streamlit as st

from resume_ingest.ingestion.pipeline import ingest_file
from resume_ingest.ingestion.resume_parser import parse_resume_text
from resume_ingest.schemas.extraction import IngestionErrorCode, IngestionResult
from resume_ingest.schemas.resume import StructuredResume

UPLOAD_TYPES = ["pdf", "docx", "txt"]

TIER_BADGE = {
    "good": "Good",
    "acceptable": "Acceptable",
    "poor": "Poor",
}


def _reset_state() -> None:
    st.session_state["result"] = None
    st.session_state["proceed_anyway"] = False
    st.session_state["error"] = None


def _render_diagnostics(result: IngestionResult) -> None:
    if not result.error or not result.error.diagnostics_report:
        return
    report = result.error.diagnostics_report
    with st.expander("Diagnostics"):
        st.code(report.render(), language="text")
        st.download_button(
            "Download diagnostics (JSON)",
            data=json.dumps(result.to_payload(), indent=2).encode("utf-8"),
            file_name="ingestion_diagnostics.json",
            mime="application/json",
            key="export_diagnostics",
        )


def _render_resume(resume: StructuredResume) -> None:
    st.subheader("Parsed resume")
    col_a, col_b = st.columns(2)
    with col_a:
        st.markdown(f"### {resume.name or 'Unnamed'}")
        st.caption(f"**Email:** {resume.email or 'n/a'} \u00b7 **Phone:** {resume.phone or 'n/a'}")
        st.caption(f"**Location:** {resume.location or 'n/a'}")
    with col_b:
        if resume.linkedin:
            st.caption(f"**LinkedIn:** {resume.linkedin}")
        if resume.website:
            st.caption(f"**Website:** {resume.website}")
    if resume.skills:
        badges = " ".join(f"`{s}`" for s in resume.skills[:20])
        st.markdown(badges)
    for section in resume.sections:
        with st.expander(section.title, expanded=False):
            st.text(section.content)


def _render_text(result: IngestionResult, parsed: Optional[StructuredResume]) -> None:
    if result.metadata:
        meta = result.metadata
        st.caption(
            f"**Format:** {meta.detected_format.value} \u00b7 **Strategy:** {meta.extraction_strategy_used} \u00b7 "
            f"**Quality:** {TIER_BADGE.get(meta.quality_tier.value, meta.quality_tier.value)} \u00b7 "
            f"**Time:** {meta.processing_time_ms:.0f} ms"
        )
    with st.expander("Extracted text", expanded=parsed is None):
        st.text(result.text)
    if parsed is not None:
        _render_resume(parsed)


def render_layout() -> None:
    """Streamlit page layout; the pipeline does the work, this only routes on the result."""
    st.set_page_config(page_title="Resume Ingestion", layout="wide")
    st.title("Resume Ingestion")
    st.markdown("*Upload a resume as PDF, DOCX or plain text to extract and structure its content.*")
    st.divider()

    if "result" not in st.session_state:
        _reset_state()

    uploaded = st.file_uploader("Resume file", type=UPLOAD_TYPES, key="resume_file", on_change=_reset_state)
    process_clicked = st.button("Process", type="primary", key="process_btn", disabled=uploaded is None)

    # ----- Run ingestion (only on button click) -----
    if process_clicked and uploaded is not None:
        with st.spinner("Extracting text\u2026"):
            try:
                st.session_state["result"] = ingest_file(
                    uploaded.getvalue(),
                    filename=uploaded.name,
                    mime_type=uploaded.type,
                )
                st.session_state["proceed_anyway"] = False
                st.session_state["error"] = None
            except Exception as e:
                st.session_state["error"] = f"Processing failed: {str(e)}"
                st.session_state["result"] = None

    if st.session_state.get("error"):
        st.error(st.session_state["error"])

    result: Optional[IngestionResult] = st.session_state.get("result")
    if result is None:
        if not st.session_state.get("error"):
            st.info("Choose a file, then click **Process**.")
        return

    st.subheader("Result")
    if result.success:
        st.success("Text extracted.")
        _render_text(result, parse_resume_text(result.text))
        return

    code = result.error.code if result.error else None
    message = result.error.message if result.error else "Unknown error."

    # Low quality: show the text with a warning and let the user decide
    if code == IngestionErrorCode.QUALITY_TOO_LOW:
        st.warning(message)
        col_a, col_b = st.columns(2)
        with col_a:
            if st.button("Use this text anyway", key="proceed_btn"):
                st.session_state["proceed_anyway"] = True
        with col_b:
            if st.button("Upload a different file", key="reupload_btn"):
                _reset_state()
                st.rerun()
        parsed = parse_resume_text(result.text) if st.session_state.get("proceed_anyway") else None
        _render_text(result, parsed)
        _render_diagnostics(result)
        return

    # Unsupported format or nothing extracted: block and ask for another file
    st.error(message)
    st.markdown("Please upload a different file.")
    _render_diagnostics(result)


if __name__ == "__main__":
    render_layout()
