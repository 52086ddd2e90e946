"""Assemble a diagnostics report from signals already computed by the pipeline. Performs no extraction."""

from typing import List, Optional, Sequence

from resume_ingest.config import LARGE_FILE_BYTES
from resume_ingest.errors import (
    REASON_CORRUPT,
    REASON_ENCRYPTED,
    REASON_NO_TEXT_LAYER,
    REASON_TIMEOUT,
)
from resume_ingest.ingestion.format_sniffer import format_from_filename, signature_ascii, signature_hex
from resume_ingest.schemas.diagnostics import AttemptSummary, DiagnosticsReport
from resume_ingest.schemas.extraction import AttemptOutcome, ExtractionAttempt, IngestionErrorCode
from resume_ingest.schemas.quality import QualityAssessment
from resume_ingest.schemas.upload import DetectedFormat, RawUpload

GUIDANCE_PLAIN_TEXT = "Try re-exporting the resume as plain text (.txt) and uploading that instead."
GUIDANCE_SUPPORTED_FORMATS = "Upload the resume as a PDF, DOCX or plain text file."
GUIDANCE_SCANNED_PDF = (
    "This PDF has no text layer (it looks scanned or image-only) and OCR is not supported. "
    "Export a text-based PDF from the original editor, or paste the text directly."
)
GUIDANCE_ENCRYPTED = "Remove the password protection from the PDF and upload it again."
GUIDANCE_RESAVE = "The file looks damaged. Open it in its editor, save a fresh copy and upload that."
GUIDANCE_SHORT = "Very little text was found. Make sure the file contains your full resume."
GUIDANCE_NOT_RESUME = "The text does not look like a resume. Check that the right file was uploaded."
GUIDANCE_FALLBACK = "Text was recovered with a degraded method; formatting and some words may be lost."
GUIDANCE_TIMEOUT = "Processing took too long. Try a smaller or simpler file."
GUIDANCE_LARGE = "Try compressing the document or removing embedded images."


def summarize_attempt(attempt: ExtractionAttempt) -> AttemptSummary:
    return AttemptSummary(
        strategy=attempt.strategy,
        outcome=attempt.outcome.value,
        elapsed_ms=round(attempt.elapsed_ms, 3),
        text_length=len(attempt.text),
        tier=attempt.assessment.tier.value if attempt.assessment else None,
        error_reason=attempt.error_reason,
        error_message=attempt.error_message,
    )


def _add(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


def build_diagnostics_report(
    upload: RawUpload,
    detected_format: DetectedFormat,
    attempts: Sequence[ExtractionAttempt] = (),
    assessment: Optional[QualityAssessment] = None,
    failure_code: Optional[IngestionErrorCode] = None,
    winning_strategy: Optional[str] = None,
) -> DiagnosticsReport:
    """
    Combine format detection, the extraction attempts, the winning candidate's quality
    assessment and actionable guidance into one report.
    """
    issues: List[str] = []
    guidance: List[str] = []

    declared = format_from_filename(upload.filename, upload.mime_type)
    mismatch = (
        declared != DetectedFormat.UNKNOWN
        and detected_format != DetectedFormat.UNKNOWN
        and declared != detected_format
    )

    # ---- File-level checks ----
    if upload.size == 0:
        _add(issues, "File is empty (0 bytes).")
    elif upload.size > LARGE_FILE_BYTES:
        _add(issues, f"File is very large ({upload.size / (1024 * 1024):.1f} MB).")
        _add(guidance, GUIDANCE_LARGE)
    if mismatch:
        _add(
            issues,
            f"Declared as {declared.value} but the content is {detected_format.value}; "
            "the content was used.",
        )
    if detected_format == DetectedFormat.UNKNOWN or failure_code == IngestionErrorCode.UNSUPPORTED_FORMAT:
        _add(issues, "The file content does not match any supported format.")
        _add(guidance, GUIDANCE_SUPPORTED_FORMATS)
    if detected_format == DetectedFormat.PDF and b"/Encrypt" in upload.data[:65536]:
        _add(issues, "PDF appears to be encrypted or password-protected.")
        _add(guidance, GUIDANCE_ENCRYPTED)

    # ---- Per-attempt failures ----
    for attempt in attempts:
        if attempt.outcome != AttemptOutcome.FAILED:
            continue
        reason = attempt.error_reason
        if reason == REASON_NO_TEXT_LAYER and detected_format == DetectedFormat.PDF:
            _add(issues, "No text layer was found in the PDF.")
            _add(guidance, GUIDANCE_SCANNED_PDF)
        elif reason == REASON_ENCRYPTED:
            _add(issues, "PDF appears to be encrypted or password-protected.")
            _add(guidance, GUIDANCE_ENCRYPTED)
        elif reason == REASON_CORRUPT:
            _add(issues, f"Strategy {attempt.strategy} could not read the file: {attempt.error_message}")
            _add(guidance, GUIDANCE_RESAVE)
        elif reason == REASON_TIMEOUT:
            _add(issues, "Extraction did not finish before the deadline.")
            _add(guidance, GUIDANCE_TIMEOUT)

    # ---- Quality of the winning candidate ----
    if assessment is not None:
        if assessment.garbled:
            if assessment.garbled_patterns:
                _add(issues, "Binary data leaked into the text (" + ", ".join(assessment.garbled_patterns) + ").")
            _add(issues, f"Text looks garbled ({assessment.garbled_ratio:.0%} unreadable characters).")
            _add(guidance, GUIDANCE_PLAIN_TEXT)
        if assessment.too_short:
            _add(issues, f"Only {assessment.char_count} characters of text were extracted.")
            _add(guidance, GUIDANCE_SHORT)
        if not assessment.looks_like_resume:
            _add(issues, "Few resume keywords were found.")
            _add(guidance, GUIDANCE_NOT_RESUME)

    fallback_won = any(a.strategy == winning_strategy and a.fallback for a in attempts)
    if fallback_won:
        _add(issues, f"Text came from the fallback strategy {winning_strategy}.")
        _add(guidance, GUIDANCE_FALLBACK)

    if failure_code in (IngestionErrorCode.EXTRACTION_FAILED, IngestionErrorCode.QUALITY_TOO_LOW):
        _add(guidance, GUIDANCE_PLAIN_TEXT)

    return DiagnosticsReport(
        filename=upload.filename,
        declared_mime_type=upload.mime_type,
        declared_format=declared,
        detected_format=detected_format,
        format_mismatch=mismatch,
        byte_size=upload.size,
        signature_hex=signature_hex(upload.data),
        signature_ascii=signature_ascii(upload.data),
        attempts=[summarize_attempt(a) for a in attempts],
        assessment=assessment,
        issues=issues,
        guidance=guidance,
    )
