"""
Resume text parser: plain text → contact block + ordered titled sections.

Keyword and regex heuristics only. Every signal (email, phone, LinkedIn, website,
location, section keywords) is a named pattern so it can be tested on its own.
"""

import re
from typing import List, NamedTuple, Optional, Pattern

from resume_ingest.config import HEADER_WINDOW_LINES
from resume_ingest.schemas.resume import ResumeSection, StructuredResume
from resume_ingest.services.text_cleaner import normalize_line_endings
from resume_ingest.utils.helpers import EMAIL_PATTERN, dedupe_preserving_order, first_match
from resume_ingest.utils.logger import get_logger

logger = get_logger(__name__)

CATCH_ALL_TITLE = "Resume"

SECTION_KEYWORDS: List[str] = [
    "SUMMARY",
    "PROFILE",
    "OBJECTIVE",
    "EXPERIENCE",
    "WORK EXPERIENCE",
    "EMPLOYMENT HISTORY",
    "EDUCATION",
    "ACADEMIC BACKGROUND",
    "SKILLS",
    "TECHNICAL SKILLS",
    "CORE COMPETENCIES",
    "PROJECTS",
    "KEY PROJECTS",
    "CERTIFICATIONS",
    "CERTIFICATES",
    "AWARDS",
    "HONORS",
    "PUBLICATIONS",
    "LANGUAGES",
    "INTERESTS",
    "HOBBIES",
]
# Longest first so "TECHNICAL SKILLS: x" is titled "TECHNICAL SKILLS", not split at "SKILLS"
_KEYWORDS_LONGEST_FIRST = sorted(SECTION_KEYWORDS, key=len, reverse=True)

# Country code optional; 3+3+4 digit groups separated by space, dot, dash or wrapped in ()
PHONE_PATTERN: Pattern[str] = re.compile(
    r"(?<!\w)(?:\+?\d{1,3}[ .-]?)?(?:\(\d{3}\)|\d{3})[ .-]?\d{3}[ .-]?\d{4}(?!\d)"
)
LINKEDIN_PATTERN: Pattern[str] = re.compile(
    r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/in/[A-Za-z0-9_%-]+", re.IGNORECASE
)
WEBSITE_PATTERN: Pattern[str] = re.compile(
    r"https?://(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}(?:[/?#][^\s,;)]*)?", re.IGNORECASE
)
# Checked in this order; single-line matches only
LOCATION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"\b[A-Z][A-Za-z.'-]*(?: [A-Z][A-Za-z.'-]*)*, ?[A-Z]{2}\b"),
    re.compile(r"\b[A-Z][A-Za-z.'-]+(?: [A-Z][A-Za-z.'-]+)*, ?[A-Z][A-Za-z]+(?: [A-Z][A-Za-z]+)*\b"),
]

_BULLET = re.compile("^[\u2022\u25cf\u25aa\u25e6\u2023\u2043\u00b7*\\-\u2013]\\s*")
_SKILL_SEPARATORS = re.compile("[,;|\u2022\u00b7]")


class HeaderMatch(NamedTuple):
    title: str
    inline: str


def match_section_header(line: str) -> Optional[HeaderMatch]:
    """
    Header when the upper-cased line equals a keyword, or starts with one followed by ':' or
    a space. Title is the keyword span as written; anything after it is returned as inline text.
    """
    stripped = (line or "").strip()
    if not stripped:
        return None
    upper = stripped.upper()
    for kw in _KEYWORDS_LONGEST_FIRST:
        if upper == kw:
            return HeaderMatch(stripped, "")
        if upper.startswith(kw) and len(upper) > len(kw) and upper[len(kw)] in (":", " "):
            prefix = stripped[: len(kw)]
            title = prefix if prefix.upper() == kw else kw
            rest = stripped[len(kw):].strip()
            if rest.startswith(":"):
                rest = rest[1:].strip()
            return HeaderMatch(title.strip(), rest)
    return None


def is_section_header(line: str) -> bool:
    return match_section_header(line) is not None


def extract_email(text: str) -> Optional[str]:
    return first_match(EMAIL_PATTERN, text)


def extract_phone(text: str) -> Optional[str]:
    return first_match(PHONE_PATTERN, text)


def extract_linkedin(text: str) -> Optional[str]:
    return first_match(LINKEDIN_PATTERN, text)


def extract_website(text: str) -> Optional[str]:
    """First http(s) URL that is not a LinkedIn profile."""
    for m in WEBSITE_PATTERN.finditer(text or ""):
        url = m.group(0).rstrip(".")
        if not LINKEDIN_PATTERN.search(url):
            return url
    return None


def extract_location(text: str) -> Optional[str]:
    for pattern in LOCATION_PATTERNS:
        found = first_match(pattern, text)
        if found:
            return found
    return None


def split_skill_list(content: str) -> List[str]:
    """Skill items from a section body: one per bullet, or comma/semicolon/pipe separated."""
    items: List[str] = []
    for raw in (content or "").split("\n"):
        line = _BULLET.sub("", raw.strip())
        if not line:
            continue
        # "Languages: Python, Go" → "Python, Go"
        if ":" in line and not re.match(r"https?:", line):
            line = line.split(":", 1)[1]
        items.extend(part.strip(" .") for part in _SKILL_SEPARATORS.split(line))
    return dedupe_preserving_order([i for i in items if i])


def _skills_from_sections(sections: List[ResumeSection]) -> List[str]:
    for section in sections:
        title = section.title.upper()
        if "SKILL" in title or "COMPETENC" in title:
            return split_skill_list(section.content)
    return []


def _split_lines(text: str) -> List[str]:
    body = normalize_line_endings(text or "").strip()
    return body.split("\n") if body else []


def _catch_all(lines: List[str]) -> List[ResumeSection]:
    rest = lines[1:] if len(lines) > 1 else lines
    content = "\n".join(rest).strip()
    return [ResumeSection(title=CATCH_ALL_TITLE, content=content)] if content else []


def _segment(lines: List[str], start: int) -> List[ResumeSection]:
    sections: List[ResumeSection] = []
    title: Optional[str] = None
    body: List[str] = []

    def _close() -> None:
        if title is not None and body:
            sections.append(ResumeSection(title=title, content="\n".join(body)))

    for line in lines[start:]:
        header = match_section_header(line)
        if header is not None:
            _close()
            title, body = header.title, []
            if header.inline:
                body.append(header.inline)
            continue
        stripped = line.strip()
        if stripped and title is not None:
            body.append(stripped)
    _close()
    return sections


def _parse(text: str) -> StructuredResume:
    lines = _split_lines(text)
    if not lines:
        return StructuredResume()

    first = lines[0].strip()
    name = first if first and not is_section_header(first) else None

    window = "\n".join(lines[:HEADER_WINDOW_LINES])
    sections = _segment(lines, start=1 if name else 0)
    if not sections:
        sections = _catch_all(lines)

    return StructuredResume(
        name=name,
        email=extract_email(window),
        phone=extract_phone(window),
        location=extract_location(window),
        linkedin=extract_linkedin(window),
        website=extract_website(window),
        sections=sections,
        skills=_skills_from_sections(sections),
    )


def parse_resume_text(text: str) -> StructuredResume:
    """
    Parse plain resume text into a StructuredResume. Never raises: when no section
    header is found, the body after the first line becomes a single "Resume" section.
    """
    try:
        return _parse(text)
    except Exception as e:
        logger.exception("Resume parsing failed, falling back to a single section: %s", e)
        return StructuredResume(sections=_catch_all(_split_lines(text)))
