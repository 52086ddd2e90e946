"""Score extracted text for garbling, length and resume-likeness. Pure functions, no I/O."""

import re
from typing import List, Pattern, Tuple

from resume_ingest.config import GARBLED_RATIO_THRESHOLD, MIN_TEXT_LENGTH, RESUME_TERM_MIN_MATCHES
from resume_ingest.schemas.quality import TIER_ORDER, QualityAssessment, QualityTier

_ALLOWED_WHITESPACE = frozenset("\n\r\t")

# Any match forces tier = poor regardless of the garbled ratio
GARBLED_PATTERNS: List[Tuple[str, Pattern[str]]] = [
    ("zip-signature", re.compile("PK\x03\x04")),
    ("replacement-chars", re.compile("\ufffd{3,}")),
    ("nul-bytes", re.compile("\x00{3,}")),
    ("control-chars", re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]{5,}")),
    # Part names of an OOXML container read as text
    ("ooxml-part-names", re.compile(r"\[Content_Types\]\.xml|_rels/\.rels|docProps/|word/document\.xml")),
]

# Resume-indicative terms, matched case-insensitively by containment
RESUME_VOCABULARY: List[str] = [
    "resume",
    "cv",
    "curriculum vitae",
    "experience",
    "work experience",
    "employment",
    "education",
    "academic",
    "university",
    "college",
    "skills",
    "projects",
    "portfolio",
    "contact",
    "email",
    "phone",
    "summary",
    "profile",
    "objective",
    "references",
    "certifications",
    "awards",
    "languages",
]


def garbled_ratio(text: str) -> float:
    """Fraction of characters outside printable ASCII (0x20-0x7E) plus tab/CR/LF."""
    if not text:
        return 0.0
    bad = sum(1 for ch in text if not (" " <= ch <= "~" or ch in _ALLOWED_WHITESPACE))
    return bad / len(text)


def find_garbled_patterns(text: str) -> List[str]:
    return [name for name, pattern in GARBLED_PATTERNS if pattern.search(text or "")]


_VOCABULARY_LONGEST_FIRST = sorted(RESUME_VOCABULARY, key=len, reverse=True)


def find_resume_terms(text: str) -> List[str]:
    """
    Vocabulary terms present in the text, in vocabulary order. Longer terms are matched
    first and consume their span, so "work experience" is not also counted as "experience".
    """
    remaining = (text or "").lower()
    found = set()
    for term in _VOCABULARY_LONGEST_FIRST:
        if term in remaining:
            found.add(term)
            remaining = remaining.replace(term, "\n")
    return [term for term in RESUME_VOCABULARY if term in found]


def assess_quality(text: str) -> QualityAssessment:
    """Assign a quality tier to a candidate text. Same text, same assessment."""
    text = text or ""
    trimmed = text.strip()
    ratio = garbled_ratio(text)
    patterns = find_garbled_patterns(text)
    terms = find_resume_terms(text)

    garbled = ratio > GARBLED_RATIO_THRESHOLD or bool(patterns)
    too_short = len(trimmed) < MIN_TEXT_LENGTH
    looks_like_resume = len(terms) >= RESUME_TERM_MIN_MATCHES

    if garbled or too_short:
        tier = QualityTier.POOR
    elif ratio > 0 or not looks_like_resume:
        tier = QualityTier.ACCEPTABLE
    else:
        tier = QualityTier.GOOD

    return QualityAssessment(
        tier=tier,
        garbled_ratio=ratio,
        word_count=len(trimmed.split()),
        char_count=len(trimmed),
        section_keywords=terms,
        looks_like_resume=looks_like_resume,
        garbled=garbled,
        garbled_patterns=patterns,
        too_short=too_short,
    )


def quality_rank(assessment: QualityAssessment) -> Tuple[int, bool, bool, float, int]:
    """Ordering key: higher is better. Breaks ties between candidates of the same tier."""
    return (
        TIER_ORDER[assessment.tier],
        not assessment.garbled_patterns,
        assessment.looks_like_resume,
        -round(assessment.garbled_ratio, 6),
        assessment.word_count,
    )
