"""Detect the real format of an upload from its leading bytes. Extension and MIME type are ignored."""

import unicodedata
from pathlib import PurePath
from typing import Optional

from resume_ingest.config import BINARY_RATIO_THRESHOLD, SNIFF_SAMPLE_BYTES
from resume_ingest.schemas.upload import DetectedFormat

SIGNATURE_LENGTH = 8
PDF_SIGNATURE = b"%PDF"
ZIP_SIGNATURE = b"PK"

_TEXT_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")

_EXTENSION_FORMATS = {
    ".pdf": DetectedFormat.PDF,
    ".docx": DetectedFormat.DOCX,
    ".txt": DetectedFormat.TXT,
    ".text": DetectedFormat.TXT,
    ".md": DetectedFormat.TXT,
}

_MIME_FORMATS = {
    "application/pdf": DetectedFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DetectedFormat.DOCX,
    "text/plain": DetectedFormat.TXT,
    "text/markdown": DetectedFormat.TXT,
}


def looks_like_text(data: bytes) -> bool:
    """
    True when the sample window is mostly printable.
    Counts control characters (other than tab/CR/LF) and undecodable bytes in the first
    SNIFF_SAMPLE_BYTES, decoded as UTF-8 with replacement.
    """
    if not data:
        return False
    if data.startswith(_TEXT_BOMS):
        return True
    sample = data[:SNIFF_SAMPLE_BYTES].decode("utf-8", errors="replace")
    if not sample:
        return False
    binary = 0
    for ch in sample:
        if ch in "\t\n\r":
            continue
        if ch == "\ufffd" or unicodedata.category(ch) == "Cc":
            binary += 1
    return binary / len(sample) < BINARY_RATIO_THRESHOLD


def detect_format(data: bytes) -> DetectedFormat:
    """Classify bytes as pdf, docx, txt or unknown. Never raises."""
    try:
        head = bytes(data[:SIGNATURE_LENGTH])
        if head.startswith(PDF_SIGNATURE):
            return DetectedFormat.PDF
        if head.startswith(ZIP_SIGNATURE):
            return DetectedFormat.DOCX
        if looks_like_text(data):
            return DetectedFormat.TXT
        return DetectedFormat.UNKNOWN
    except Exception:
        return DetectedFormat.UNKNOWN


def signature_hex(data: bytes) -> str:
    return bytes(data[:SIGNATURE_LENGTH]).hex()


def signature_ascii(data: bytes) -> str:
    return "".join(chr(b) if 32 <= b <= 126 else "." for b in bytes(data[:SIGNATURE_LENGTH]))


def format_from_filename(filename: str, mime_type: Optional[str] = None) -> DetectedFormat:
    """Format implied by the declared name or MIME type. A hint for diagnostics only."""
    suffix = PurePath((filename or "").strip()).suffix.lower()
    if suffix in _EXTENSION_FORMATS:
        return _EXTENSION_FORMATS[suffix]
    mime = (mime_type or "").split(";")[0].strip().lower()
    return _MIME_FORMATS.get(mime, DetectedFormat.UNKNOWN)
