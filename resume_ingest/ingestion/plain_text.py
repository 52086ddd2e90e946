"""Decode plain-text uploads, probing encodings when UTF-8 fails."""

import codecs

from resume_ingest.errors import REASON_CORRUPT, REASON_EMPTY, ExtractionError
from resume_ingest.services.text_cleaner import normalize_line_endings

_BOM_ENCODINGS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

LEGACY_ENCODINGS = ("cp1252", "latin-1")


def decode_text(data: bytes) -> str:
    """Strict decode: BOM-declared encoding, otherwise UTF-8."""
    if not data:
        raise ExtractionError(REASON_EMPTY, "file is empty")
    encoding = "utf-8"
    for bom, enc in _BOM_ENCODINGS:
        if data.startswith(bom):
            encoding = enc
            break
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise ExtractionError(REASON_CORRUPT, f"not valid {encoding}: {e.reason} at byte {e.start}") from e
    return normalize_line_endings(text)


def decode_text_legacy(data: bytes) -> str:
    """Fallback decode for Windows/ISO-8859 encoded text. latin-1 accepts any byte sequence."""
    if not data:
        raise ExtractionError(REASON_EMPTY, "file is empty")
    for encoding in LEGACY_ENCODINGS:
        try:
            return normalize_line_endings(data.decode(encoding))
        except UnicodeDecodeError:
            continue
    raise ExtractionError(REASON_CORRUPT, "no legacy encoding could decode the file")
