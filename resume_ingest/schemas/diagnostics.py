"""Diagnostics report schema surfaced to callers when extraction quality is poor."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .quality import QualityAssessment
from .upload import DetectedFormat


class AttemptSummary(BaseModel):
    """Condensed view of one extraction attempt (text itself omitted)."""

    strategy: str
    outcome: str
    elapsed_ms: float = 0.0
    text_length: int = 0
    tier: Optional[str] = None
    error_reason: Optional[str] = None
    error_message: Optional[str] = None


class DiagnosticsReport(BaseModel):
    """Aggregated signals from sniffing, extraction and quality analysis."""

    filename: str = Field(default="", description="Declared filename")
    declared_mime_type: Optional[str] = Field(default=None)
    declared_format: DetectedFormat = Field(default=DetectedFormat.UNKNOWN, description="Format implied by name/MIME")
    detected_format: DetectedFormat = Field(default=DetectedFormat.UNKNOWN, description="Format from byte signature")
    format_mismatch: bool = Field(default=False, description="Declared and detected formats disagree")
    byte_size: int = Field(default=0)
    signature_hex: str = Field(default="", description="First 8 bytes as hex")
    signature_ascii: str = Field(default="", description="First 8 bytes, non-printables as '.'")
    attempts: List[AttemptSummary] = Field(default_factory=list)
    assessment: Optional[QualityAssessment] = Field(default=None, description="Assessment of the winning candidate")
    issues: List[str] = Field(default_factory=list)
    guidance: List[str] = Field(default_factory=list)

    def render(self) -> str:
        """Human-readable multi-line report."""
        lines = [
            f"File: {self.filename or '(unnamed)'} ({self.byte_size} bytes)",
            f"Declared format: {self.declared_format.value}"
            + (f" [{self.declared_mime_type}]" if self.declared_mime_type else ""),
            f"Detected format: {self.detected_format.value} (signature {self.signature_hex or '-'} "
            f"'{self.signature_ascii}')",
        ]
        if self.attempts:
            lines.append("Extraction attempts:")
            for a in self.attempts:
                detail = f"  - {a.strategy}: {a.outcome}, {a.text_length} chars, {a.elapsed_ms:.1f} ms"
                if a.tier:
                    detail += f", quality {a.tier}"
                if a.error_reason:
                    detail += f", error {a.error_reason}"
                    if a.error_message and a.error_message != a.error_reason:
                        detail += f" ({a.error_message})"
                lines.append(detail)
        else:
            lines.append("Extraction attempts: none")
        if self.assessment is not None:
            qa = self.assessment
            lines.append(
                f"Quality: {qa.tier.value} (garbled ratio {qa.garbled_ratio:.1%}, "
                f"{qa.word_count} words, resume-like: {'yes' if qa.looks_like_resume else 'no'})"
            )
        if self.issues:
            lines.append("Issues:")
            lines.extend(f"  - {i}" for i in self.issues)
        if self.guidance:
            lines.append("What to try:")
            lines.extend(f"  - {g}" for g in self.guidance)
        return "\n".join(lines)
