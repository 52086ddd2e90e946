"""Quality assessment of extracted text."""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class QualityTier(str, Enum):
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


# Higher is better; used for ordering candidates
TIER_ORDER = {
    QualityTier.POOR: 0,
    QualityTier.ACCEPTABLE: 1,
    QualityTier.GOOD: 2,
}


class QualityAssessment(BaseModel):
    """Verdict of the quality analyzer on one candidate text."""

    model_config = ConfigDict(frozen=True)

    tier: QualityTier = Field(..., description="good, acceptable or poor")
    garbled_ratio: float = Field(..., description="Fraction of chars outside printable ASCII + tab/CR/LF")
    word_count: int = Field(default=0, description="Whitespace-separated tokens")
    char_count: int = Field(default=0, description="Length of the trimmed text")
    section_keywords: List[str] = Field(default_factory=list, description="Resume vocabulary terms found")
    looks_like_resume: bool = Field(default=False, description="Advisory resume-likeness flag")
    garbled: bool = Field(default=False, description="Ratio over threshold or a binary-leak pattern matched")
    garbled_patterns: List[str] = Field(default_factory=list, description="Names of matched binary-leak patterns")
    too_short: bool = Field(default=False, description="Trimmed text shorter than the minimum viable length")

    @property
    def acceptable(self) -> bool:
        return self.tier != QualityTier.POOR
