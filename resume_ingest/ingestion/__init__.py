"""Resume upload pipeline: format sniffing, PDF/DOCX/text extraction, quality gate, parsing, diagnostics."""

from .diagnostics import build_diagnostics_report
from .docx_extractor import extract_docx_binary_scan, extract_docx_text, extract_docx_xml
from .format_sniffer import detect_format
from .pdf_extractor import PdfEngine, PdfPlumberEngine, TextRun, extract_pdf_raw_streams, extract_pdf_text
from .pipeline import ingest_file, ingest_upload, ingest_upload_async
from .quality import assess_quality
from .resume_parser import parse_resume_text
from .strategies import Strategy, strategies_for

__all__ = [
    "ingest_upload",
    "ingest_file",
    "ingest_upload_async",
    "detect_format",
    "assess_quality",
    "parse_resume_text",
    "build_diagnostics_report",
    "extract_pdf_text",
    "extract_pdf_raw_streams",
    "extract_docx_xml",
    "extract_docx_binary_scan",
    "extract_docx_text",
    "PdfEngine",
    "PdfPlumberEngine",
    "TextRun",
    "Strategy",
    "strategies_for",
]
