"""Resume ingestion: turn an uploaded PDF, DOCX or text file into clean text and a structured resume."""

from resume_ingest.errors import ExtractionError
from resume_ingest.ingestion import (
    assess_quality,
    build_diagnostics_report,
    detect_format,
    ingest_file,
    ingest_upload,
    ingest_upload_async,
    parse_resume_text,
)
from resume_ingest.schemas import (
    DetectedFormat,
    DiagnosticsReport,
    IngestionErrorCode,
    IngestionResult,
    QualityAssessment,
    QualityTier,
    RawUpload,
    StructuredResume,
)

__all__ = [
    "ingest_upload",
    "ingest_file",
    "ingest_upload_async",
    "detect_format",
    "assess_quality",
    "parse_resume_text",
    "build_diagnostics_report",
    "ExtractionError",
    "DetectedFormat",
    "DiagnosticsReport",
    "IngestionErrorCode",
    "IngestionResult",
    "QualityAssessment",
    "QualityTier",
    "RawUpload",
    "StructuredResume",
]
