"""Schema exports."""

from .diagnostics import AttemptSummary, DiagnosticsReport
from .extraction import (
    AttemptOutcome,
    ExtractionAttempt,
    IngestionError,
    IngestionErrorCode,
    IngestionMetadata,
    IngestionResult,
)
from .quality import TIER_ORDER, QualityAssessment, QualityTier
from .resume import ResumeSection, StructuredResume
from .upload import DetectedFormat, RawUpload

__all__ = [
    "AttemptOutcome",
    "AttemptSummary",
    "DetectedFormat",
    "DiagnosticsReport",
    "ExtractionAttempt",
    "IngestionError",
    "IngestionErrorCode",
    "IngestionMetadata",
    "IngestionResult",
    "QualityAssessment",
    "QualityTier",
    "RawUpload",
    "ResumeSection",
    "StructuredResume",
    "TIER_ORDER",
]
