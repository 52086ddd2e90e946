"""
Extract text from DOCX uploads (in-memory).

Two strategies:
  docx-xml          → locate the main document part (package relationships, then ZIP
                      part selectors) and strip its XML
  docx-binary-scan  → pull printable ASCII runs straight out of the raw bytes (lossy)
"""

import re
import zipfile
from io import BytesIO
from typing import Callable, List, Optional

import docx

from resume_ingest.config import BINARY_SCAN_MIN_RUN
from resume_ingest.errors import REASON_CORRUPT, REASON_EMPTY, ExtractionError
from resume_ingest.ingestion.quality import assess_quality, quality_rank
from resume_ingest.services.text_cleaner import (
    clean_extracted_text,
    collapse_whitespace,
    decode_xml_entities,
    strip_markup,
)
from resume_ingest.utils.logger import get_logger

logger = get_logger(__name__)

MAIN_DOCUMENT_PART = "word/document.xml"
CONTENT_TYPES_PART = "[Content_Types].xml"
MAIN_DOCUMENT_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"

PartSelector = Callable[[zipfile.ZipFile], Optional[str]]


def _select_literal_part(zf: zipfile.ZipFile) -> Optional[str]:
    return MAIN_DOCUMENT_PART if MAIN_DOCUMENT_PART in zf.namelist() else None


def _select_declared_part(zf: zipfile.ZipFile) -> Optional[str]:
    """Main document part as declared in [Content_Types].xml."""
    if CONTENT_TYPES_PART not in zf.namelist():
        return None
    content_types = zf.read(CONTENT_TYPES_PART).decode("utf-8", errors="replace")
    for tag in re.findall(r"<Override\b[^>]*>", content_types):
        part = re.search(r'PartName="([^"]+)"', tag)
        ctype = re.search(r'ContentType="([^"]+)"', tag)
        if part and ctype and ctype.group(1) == MAIN_DOCUMENT_CONTENT_TYPE:
            name = part.group(1).lstrip("/")
            if name in zf.namelist():
                return name
    return None


def _select_any_document_part(zf: zipfile.ZipFile) -> Optional[str]:
    candidates = sorted(n for n in zf.namelist() if re.fullmatch(r"word/document\d*\.xml", n))
    return candidates[0] if candidates else None


# Evaluated in order; first part found wins
PART_SELECTORS: List[PartSelector] = [
    _select_literal_part,
    _select_declared_part,
    _select_any_document_part,
]


def find_document_part(zf: zipfile.ZipFile) -> Optional[str]:
    for selector in PART_SELECTORS:
        name = selector(zf)
        if name:
            return name
    return None


def document_xml_to_text(xml: str) -> str:
    """
    Strip WordprocessingML down to text. Tags become spaces, paragraph ends and breaks
    become newlines, entities are decoded and horizontal whitespace is collapsed.
    """
    if not xml:
        return ""
    text = re.sub(r"<\?.*?\?>", " ", xml, flags=re.DOTALL)
    # Field codes and tracked deletions are not visible text
    text = re.sub(r"<w:(instrText|delText)\b[^>]*>.*?</w:\1>", " ", text, flags=re.DOTALL)
    text = re.sub(r"</w:p>|<w:br\b[^>]*>|<w:cr\b[^>]*>", "\n", text)
    text = re.sub(r"<w:tab\b[^>]*/>", "\t", text)
    text = strip_markup(text)
    text = decode_xml_entities(text)
    return collapse_whitespace(text)


def read_main_part_via_package(data: bytes) -> Optional[bytes]:
    """Main document part resolved through the package relationships (python-docx)."""
    try:
        document = docx.Document(BytesIO(data))
    except Exception as e:
        logger.debug("python-docx could not open the package, using part selectors: %s", e)
        return None
    return document.part.blob


def read_main_part_via_zip(data: bytes) -> bytes:
    """Main document part found by PART_SELECTORS over the raw ZIP listing."""
    try:
        with zipfile.ZipFile(BytesIO(data)) as zf:
            part = find_document_part(zf)
            if not part:
                raise ExtractionError(REASON_CORRUPT, "no main document part in container")
            return zf.read(part)
    except ExtractionError:
        raise
    except Exception as e:
        # BadZipFile, truncated archives, zlib.error from damaged deflate streams
        raise ExtractionError(REASON_CORRUPT, f"unreadable DOCX container: {e}") from e


def extract_docx_xml(data: bytes) -> str:
    """Structured strategy: text of the main document part of the container."""
    raw = read_main_part_via_package(data)
    if raw is None:
        raw = read_main_part_via_zip(data)

    try:
        xml = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ExtractionError(REASON_CORRUPT, f"document part is not UTF-8: {e.reason}") from e

    text = document_xml_to_text(xml)
    if not text:
        raise ExtractionError(REASON_EMPTY, "document part contains no text")
    return text


_PRINTABLE_RUN = re.compile(rb"[\x20-\x7e\t\r\n]{%d,}" % BINARY_SCAN_MIN_RUN)


def extract_docx_binary_scan(data: bytes) -> str:
    """
    Fallback strategy: contiguous printable ASCII runs longer than 3 bytes, space-joined.
    Shorter runs are noise and are dropped. Container part names stay in the output, so
    a scan of a compressed package is marked as a binary leak by the quality analyzer.
    """
    runs = [m.group(0).decode("ascii") for m in _PRINTABLE_RUN.finditer(data or b"")]
    text = re.sub(r"\s+", " ", " ".join(runs)).strip()
    if not text:
        raise ExtractionError(REASON_EMPTY, "no printable text runs found")
    return text


def extract_docx_text(data: bytes) -> str:
    """
    Try both DOCX strategies and return the text with the better quality.
    The structured strategy wins ties. Raises ExtractionError if neither produces text.
    """
    best_text: Optional[str] = None
    best_key = None
    last_error: Optional[ExtractionError] = None
    for name, strategy in (("docx-xml", extract_docx_xml), ("docx-binary-scan", extract_docx_binary_scan)):
        try:
            text = clean_extracted_text(strategy(data))
        except ExtractionError as e:
            logger.warning("DOCX strategy %s failed: %s", name, e)
            last_error = e
            continue
        if not text:
            continue
        key = quality_rank(assess_quality(text))
        if best_key is None or key > best_key:
            best_text, best_key = text, key
    if best_text is None:
        raise last_error or ExtractionError(REASON_EMPTY, "no text extracted from DOCX")
    return best_text
