"""
Extract text from PDF uploads (in-memory).

Two strategies:
  pdf-text-layer   → page-by-page text layer through an injected PdfEngine (pdfplumber by default)
  pdf-raw-streams  → inflate content streams and read the strings shown by text operators
"""

import re
import zlib
from abc import ABC, abstractmethod
from functools import lru_cache
from io import BytesIO
from typing import Iterable, Iterator, List, NamedTuple, Optional

import pdfplumber

from resume_ingest.config import PDF_LINE_TOLERANCE
from resume_ingest.errors import REASON_CORRUPT, REASON_ENCRYPTED, REASON_NO_TEXT_LAYER, ExtractionError
from resume_ingest.utils.logger import get_logger

logger = get_logger(__name__)


class TextRun(NamedTuple):
    """A piece of text as reported by the renderer, with its vertical position on the page."""

    text: str
    top: float


class PdfEngine(ABC):
    """Text-layer renderer. Construct once and inject; tests pass a fake."""

    name: str = "pdf-engine"

    @abstractmethod
    def iter_pages(self, data: bytes) -> Iterator[List[TextRun]]:
        """Yield the text runs of each page, in page order."""


class PdfPlumberEngine(PdfEngine):
    """Text layer via pdfplumber; runs are words in content-stream order."""

    name = "pdfplumber"

    def iter_pages(self, data: bytes) -> Iterator[List[TextRun]]:
        with pdfplumber.open(BytesIO(data)) as pdf:
            for page in pdf.pages:
                words = page.extract_words(use_text_flow=True, keep_blank_chars=False)
                yield [TextRun(w.get("text", ""), float(w.get("top", 0.0))) for w in words]


@lru_cache(maxsize=1)
def default_pdf_engine() -> PdfEngine:
    """Process-wide engine used when the caller does not inject one."""
    return PdfPlumberEngine()


def join_runs(runs: Iterable[TextRun], tolerance: float = PDF_LINE_TOLERANCE) -> str:
    """Space-join runs; start a new line when the vertical position moves past tolerance."""
    lines: List[str] = []
    current: List[str] = []
    last_top: Optional[float] = None
    for run in runs:
        text = (run.text or "").strip()
        if not text:
            continue
        if last_top is not None and abs(run.top - last_top) > tolerance and current:
            lines.append(" ".join(current))
            current = []
        current.append(text)
        last_top = run.top
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines)


def _is_password_error(exc: BaseException) -> bool:
    chain = [exc, exc.__cause__, exc.__context__, *[a for a in exc.args if isinstance(a, BaseException)]]
    for e in chain:
        if e is None:
            continue
        name = type(e).__name__.lower()
        if "password" in name or "encrypt" in name:
            return True
    return False


def extract_pdf_text(data: bytes, engine: Optional[PdfEngine] = None) -> str:
    """
    Text layer of every page, pages in order and separated by a blank line.
    Short text is returned as-is (the quality analyzer judges it); no text at all is an error.
    If the engine fails part-way, the pages read before the failure are kept.
    """
    engine = engine or default_pdf_engine()
    pages: List[str] = []
    try:
        for runs in engine.iter_pages(data):
            pages.append(join_runs(runs))
    except ExtractionError:
        raise
    except Exception as e:
        if any(p.strip() for p in pages):
            logger.warning(
                "%s failed after page %s, keeping the text read so far: %s", engine.name, len(pages), e
            )
        elif _is_password_error(e):
            raise ExtractionError(REASON_ENCRYPTED, "PDF is password-protected") from e
        else:
            raise ExtractionError(REASON_CORRUPT, f"{engine.name} could not read the PDF: {e}") from e

    texts = [p for p in pages if p.strip()]
    if not texts:
        raise ExtractionError(REASON_NO_TEXT_LAYER, f"{len(pages)} page(s), none with a text layer")
    logger.debug("Text layer found on %s of %s page(s)", len(texts), len(pages))
    return "\n\n".join(texts)


# ---- Raw content-stream fallback ----

_STREAM = re.compile(rb"(?<!end)stream\r?\n(.*?)endstream", re.DOTALL)
_TEXT_BLOCK = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
_LITERAL = r"\((?:\\.|[^\\)])*\)"
_TEXT_OP = re.compile(
    r"\[(?P<array>(?:" + _LITERAL + r"|[^\]()])*)\]\s*TJ"
    r"|(?P<string>" + _LITERAL + r")\s*(?P<op>Tj|'|\")"
    r"|(?P<tx>-?\d*\.?\d+)\s+(?P<ty>-?\d*\.?\d+)\s+T[dD]\b"
    r"|(?P<newline>T\*)",
    re.DOTALL,
)
_ARRAY_ITEM = re.compile(_LITERAL + r"|-?\d*\.?\d+", re.DOTALL)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "(": "(", ")": ")", "\\": "\\"}

# TJ kerning below this (thousandths of an em) is treated as a word gap
_TJ_SPACE_THRESHOLD = -200


def _unescape_pdf_string(literal: str) -> str:
    """Decode a PDF literal string body (without the outer parentheses)."""

    def _sub(m: re.Match) -> str:
        esc = m.group(1)
        if esc[0] in "01234567":
            return chr(int(esc, 8) & 0xFF)
        if esc in ("\n", "\r", "\r\n"):
            return ""
        return _ESCAPES.get(esc, esc)

    return re.sub(r"\\([0-7]{1,3}|\r\n|.)", _sub, literal, flags=re.DOTALL)


def _iter_content_streams(data: bytes) -> Iterator[str]:
    for m in _STREAM.finditer(data):
        body = m.group(1)
        try:
            body = zlib.decompressobj().decompress(body)
        except zlib.error:
            pass  # not Flate-encoded; scan as-is
        yield body.decode("latin-1")


def _text_from_block(block: str) -> str:
    out: List[str] = []
    for m in _TEXT_OP.finditer(block):
        if m.group("array") is not None:
            for item in _ARRAY_ITEM.finditer(m.group("array")):
                token = item.group(0)
                if token.startswith("("):
                    out.append(_unescape_pdf_string(token[1:-1]))
                elif float(token) < _TJ_SPACE_THRESHOLD:
                    out.append(" ")
        elif m.group("string") is not None:
            if m.group("op") in ("'", '"'):
                out.append("\n")
            out.append(_unescape_pdf_string(m.group("string")[1:-1]))
        elif m.group("ty") is not None:
            if float(m.group("ty")) != 0:
                out.append("\n")
            elif out and not out[-1].endswith((" ", "\n")):
                out.append(" ")
        elif m.group("newline"):
            out.append("\n")
    return "".join(out)


def extract_pdf_raw_streams(data: bytes) -> str:
    """
    Fallback strategy: read strings shown by Tj/TJ/'/" inside BT..ET blocks of every
    content stream. Works without a PDF parser; fonts with custom encodings come out garbled.
    """
    if b"/Encrypt" in (data or b""):
        raise ExtractionError(REASON_ENCRYPTED, "PDF is encrypted; content streams are unreadable")
    lines: List[str] = []
    for content in _iter_content_streams(data or b""):
        for block in _TEXT_BLOCK.finditer(content):
            text = _text_from_block(block.group(1))
            lines.extend(line.strip() for line in text.split("\n"))
    text = "\n".join(re.sub(r"[ \t]+", " ", line) for line in lines if line)
    if not text.strip():
        raise ExtractionError(REASON_NO_TEXT_LAYER, "no text operators found in content streams")
    return text
