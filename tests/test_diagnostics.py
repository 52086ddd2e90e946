"""Tests for the diagnostics reporter."""

from resume_ingest.errors import REASON_CORRUPT, REASON_ENCRYPTED, REASON_NO_TEXT_LAYER, REASON_TIMEOUT
from resume_ingest.ingestion import diagnostics
from resume_ingest.ingestion.diagnostics import (
    GUIDANCE_ENCRYPTED,
    GUIDANCE_FALLBACK,
    GUIDANCE_LARGE,
    GUIDANCE_PLAIN_TEXT,
    GUIDANCE_RESAVE,
    GUIDANCE_SCANNED_PDF,
    GUIDANCE_SHORT,
    GUIDANCE_SUPPORTED_FORMATS,
    GUIDANCE_TIMEOUT,
    build_diagnostics_report,
)
from resume_ingest.ingestion.quality import assess_quality
from resume_ingest.schemas.extraction import AttemptOutcome, ExtractionAttempt, IngestionErrorCode
from resume_ingest.schemas.upload import DetectedFormat, RawUpload


def _failed(strategy: str, reason: str, message: str = "boom") -> ExtractionAttempt:
    return ExtractionAttempt(
        strategy=strategy,
        outcome=AttemptOutcome.FAILED,
        error_reason=reason,
        error_message=message,
    )


def _produced(strategy: str, text: str, fallback: bool = False) -> ExtractionAttempt:
    qa = assess_quality(text)
    return ExtractionAttempt(
        strategy=strategy,
        text=text,
        outcome=AttemptOutcome.SUCCESS if qa.acceptable else AttemptOutcome.PARTIAL,
        assessment=qa,
        fallback=fallback,
    )


# ---------------------------------------------------------------------------
# File-level signals
# ---------------------------------------------------------------------------

def test_empty_upload():
    report = build_diagnostics_report(
        RawUpload(data=b"", filename="resume.pdf"),
        DetectedFormat.UNKNOWN,
        failure_code=IngestionErrorCode.UNSUPPORTED_FORMAT,
    )
    assert report.byte_size == 0
    assert "File is empty (0 bytes)." in report.issues
    assert GUIDANCE_SUPPORTED_FORMATS in report.guidance
    assert report.declared_format == DetectedFormat.PDF
    assert not report.format_mismatch


def test_declared_and_detected_format_mismatch():
    upload = RawUpload(data=b"Jane Doe\nEngineer", filename="resume.pdf", mime_type="application/pdf")
    report = build_diagnostics_report(upload, DetectedFormat.TXT)
    assert report.format_mismatch
    assert any(issue.startswith("Declared as pdf but the content is txt") for issue in report.issues)


def test_large_file(monkeypatch):
    monkeypatch.setattr(diagnostics, "LARGE_FILE_BYTES", 10)
    report = build_diagnostics_report(RawUpload(data=b"x" * 11), DetectedFormat.TXT)
    assert GUIDANCE_LARGE in report.guidance


def test_signature_is_recorded():
    report = build_diagnostics_report(RawUpload(data=b"PK\x03\x04rest"), DetectedFormat.DOCX)
    assert report.signature_hex == "504b030472657374"
    assert report.signature_ascii == "PK..rest"


# ---------------------------------------------------------------------------
# Attempt failures
# ---------------------------------------------------------------------------

def test_scanned_pdf_guidance():
    report = build_diagnostics_report(
        RawUpload(data=b"%PDF-1.4", filename="scan.pdf"),
        DetectedFormat.PDF,
        [_failed("pdf-text-layer", REASON_NO_TEXT_LAYER), _failed("pdf-raw-streams", REASON_NO_TEXT_LAYER)],
        failure_code=IngestionErrorCode.EXTRACTION_FAILED,
    )
    assert GUIDANCE_SCANNED_PDF in report.guidance
    assert GUIDANCE_PLAIN_TEXT in report.guidance
    assert [a.strategy for a in report.attempts] == ["pdf-text-layer", "pdf-raw-streams"]
    assert report.guidance.count(GUIDANCE_SCANNED_PDF) == 1


def test_encrypted_guidance_from_marker_and_attempt():
    report = build_diagnostics_report(
        RawUpload(data=b"%PDF-1.4 /Encrypt 5 0 R"),
        DetectedFormat.PDF,
        [_failed("pdf-text-layer", REASON_ENCRYPTED)],
    )
    assert report.guidance.count(GUIDANCE_ENCRYPTED) == 1


def test_corrupt_and_timeout_guidance():
    report = build_diagnostics_report(
        RawUpload(data=b"PK\x03\x04"),
        DetectedFormat.DOCX,
        [_failed("docx-xml", REASON_CORRUPT, "bad zip"), _failed("pipeline", REASON_TIMEOUT)],
    )
    assert GUIDANCE_RESAVE in report.guidance
    assert GUIDANCE_TIMEOUT in report.guidance
    assert any("bad zip" in issue for issue in report.issues)


# ---------------------------------------------------------------------------
# Winning candidate quality
# ---------------------------------------------------------------------------

def test_garbled_and_short_text():
    attempt = _produced("docx-binary-scan", "PK\x03\x04 short", fallback=True)
    report = build_diagnostics_report(
        RawUpload(data=b"PK\x03\x04"),
        DetectedFormat.DOCX,
        [attempt],
        assessment=attempt.assessment,
        failure_code=IngestionErrorCode.QUALITY_TOO_LOW,
        winning_strategy="docx-binary-scan",
    )
    assert any("zip-signature" in issue for issue in report.issues)
    assert GUIDANCE_PLAIN_TEXT in report.guidance
    assert GUIDANCE_SHORT in report.guidance
    assert GUIDANCE_FALLBACK in report.guidance
    assert report.assessment.tier.value == "poor"


def test_render_lists_attempts_and_guidance():
    attempt = _failed("text-utf8", REASON_CORRUPT, "not valid utf-8")
    report = build_diagnostics_report(
        RawUpload(data=b"\xff\xfe", filename="cv.txt"),
        DetectedFormat.TXT,
        [attempt],
        failure_code=IngestionErrorCode.EXTRACTION_FAILED,
    )
    rendered = report.render()
    assert rendered.startswith("File: cv.txt (2 bytes)")
    assert "  - text-utf8: failed, 0 chars" in rendered
    assert "error corrupt (not valid utf-8)" in rendered
    assert "What to try:" in rendered


def test_render_without_attempts():
    rendered = build_diagnostics_report(RawUpload(data=b"\x00\x01"), DetectedFormat.UNKNOWN).render()
    assert "File: (unnamed) (2 bytes)" in rendered
    assert "Extraction attempts: none" in rendered
