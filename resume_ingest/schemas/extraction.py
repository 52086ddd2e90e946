"""Extraction attempt and pipeline result schemas."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .diagnostics import DiagnosticsReport
from .quality import QualityAssessment, QualityTier
from .upload import DetectedFormat


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class ExtractionAttempt(BaseModel):
    """One strategy invocation. Kept only for the lifetime of a pipeline run."""

    strategy: str = Field(..., description="Strategy name (e.g. pdf-text-layer, docx-xml)")
    text: str = Field(default="", description="Cleaned text produced by the strategy")
    elapsed_ms: float = Field(default=0.0, description="Wall time spent in the strategy")
    outcome: AttemptOutcome = Field(..., description="success, partial or failed")
    error_reason: Optional[str] = Field(default=None, description="ExtractionError reason when failed")
    error_message: Optional[str] = Field(default=None, description="Human-readable failure detail")
    assessment: Optional[QualityAssessment] = Field(default=None, description="Quality of the produced text")
    fallback: bool = Field(default=False, description="True for degraded fallback strategies")


class IngestionMetadata(BaseModel):
    detected_format: DetectedFormat
    extraction_strategy_used: str
    quality_tier: QualityTier
    processing_time_ms: float


class IngestionErrorCode(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported-format"
    EXTRACTION_FAILED = "extraction-failed"
    QUALITY_TOO_LOW = "quality-too-low"


class IngestionError(BaseModel):
    code: IngestionErrorCode
    message: str
    diagnostics_report: DiagnosticsReport


class IngestionResult(BaseModel):
    """Outcome of one pipeline run: text plus metadata, or an error with diagnostics."""

    success: bool = Field(..., description="True when text passed the quality gate")
    text: str = Field(default="", description="Accepted text, or best-effort text on quality-too-low")
    metadata: Optional[IngestionMetadata] = Field(default=None)
    error: Optional[IngestionError] = Field(default=None)
    attempts: List[ExtractionAttempt] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Render the external boundary shape: {text, metadata} or {error: {...}}."""
        if self.success and self.metadata is not None:
            return {"text": self.text, "metadata": self.metadata.model_dump(mode="json")}
        payload: Dict[str, Any] = {}
        if self.error is not None:
            payload["error"] = {
                "code": self.error.code.value,
                "message": self.error.message,
                "diagnostics_report": self.error.diagnostics_report.render(),
            }
        if self.text:
            # quality-too-low: caller may still use the text with a warning
            payload["text"] = self.text
        if self.metadata is not None:
            payload["metadata"] = self.metadata.model_dump(mode="json")
        return payload
