"""Clean and normalize extracted document text."""

import re
import unicodedata

from resume_ingest.config import MAX_TEXT_CHARS

_XML_ENTITIES = {
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&apos;": "'",
}


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_xml_entities(text: str) -> str:
    """Decode the five standard XML entities plus numeric character references."""
    if not text:
        return ""

    def _numeric(m: re.Match) -> str:
        raw = m.group(1)
        try:
            code = int(raw[1:], 16) if raw[:1] in ("x", "X") else int(raw)
            return chr(code)
        except (ValueError, OverflowError):
            return m.group(0)

    text = re.sub(r"&#([xX][0-9a-fA-F]+|\d+);", _numeric, text)
    for entity, char in _XML_ENTITIES.items():
        text = text.replace(entity, char)
    # &amp; last so "&amp;lt;" stays "&lt;"
    return text.replace("&amp;", "&")


def strip_markup(text: str) -> str:
    """Replace every tag with a space, keeping the text between tags."""
    if not text:
        return ""
    return re.sub(r"<[^>]+>", " ", text)


def collapse_whitespace(text: str) -> str:
    """Collapse spaces/tabs within lines, drop blank lines, trim."""
    lines = [re.sub(r"[ \t\f\v\u00a0]+", " ", line).strip() for line in normalize_line_endings(text).split("\n")]
    return "\n".join(line for line in lines if line)


def clean_extracted_text(text: str, max_chars: int = MAX_TEXT_CHARS) -> str:
    """
    Normalize unicode (NFC), line endings and runs of whitespace; truncate very long text.
    Control characters are left alone so the quality analyzer can still see them.
    """
    if not text or not text.strip():
        return ""
    t = unicodedata.normalize("NFC", text)
    t = normalize_line_endings(t)
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r" *\n *", "\n", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    t = t.strip()
    if len(t) > max_chars:
        t = t[:max_chars] + "\n\n[Content truncated.]"
    return t
