"""Ordered extraction strategies per detected format. Primary first, degraded fallbacks after."""

from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional

from resume_ingest.ingestion.docx_extractor import extract_docx_binary_scan, extract_docx_xml
from resume_ingest.ingestion.pdf_extractor import PdfEngine, extract_pdf_raw_streams, extract_pdf_text
from resume_ingest.ingestion.plain_text import decode_text, decode_text_legacy
from resume_ingest.schemas.upload import DetectedFormat


@dataclass(frozen=True)
class Strategy:
    """One way of turning bytes into text. `extract` returns text or raises ExtractionError."""

    name: str
    extract: Callable[[bytes], str]
    fallback: bool = False


def strategies_for(fmt: DetectedFormat, pdf_engine: Optional[PdfEngine] = None) -> List[Strategy]:
    """Strategy chain for a format; empty for unknown formats."""
    if fmt == DetectedFormat.PDF:
        return [
            Strategy("pdf-text-layer", partial(extract_pdf_text, engine=pdf_engine)),
            Strategy("pdf-raw-streams", extract_pdf_raw_streams, fallback=True),
        ]
    if fmt == DetectedFormat.DOCX:
        return [
            Strategy("docx-xml", extract_docx_xml),
            Strategy("docx-binary-scan", extract_docx_binary_scan, fallback=True),
        ]
    if fmt == DetectedFormat.TXT:
        return [
            Strategy("text-utf8", decode_text),
            Strategy("text-legacy", decode_text_legacy, fallback=True),
        ]
    return []
