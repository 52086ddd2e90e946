"""Shared fixtures: sample resume text and in-memory PDF/DOCX builders."""

import time
import zipfile
import zlib
from io import BytesIO
from typing import Iterator, List, Optional

import pytest
from docx import Document

from resume_ingest.ingestion.pdf_extractor import PdfEngine, TextRun

SAMPLE_RESUME = """Jane Doe
jane.doe@example.com | (415) 555-1234 | San Francisco, CA
linkedin.com/in/janedoe | https://janedoe.dev

SUMMARY
Backend engineer with eight years of experience building data platforms.

EXPERIENCE
- Senior Engineer, Acme Corp (2019 - present)
- Built ingestion services in Python
- Led a team of four engineers

EDUCATION
B.Sc. Computer Science, State University
Graduated with honors

SKILLS
Python, Go, SQL; Docker | Kubernetes

PROJECTS
Open source contributor to a resume parsing library
"""

CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/{part}" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

DOCUMENT_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>{body}</w:body></w:document>"
)


def paragraph_xml(*runs: str) -> str:
    return "<w:p>" + "".join(f"<w:r><w:t>{r}</w:t></w:r>" for r in runs) + "</w:p>"


class FakePdfEngine(PdfEngine):
    """Serves canned pages; optionally sleeps or raises to simulate renderer behavior."""

    name = "fake-engine"

    def __init__(self, pages: Optional[List[str]] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.pages = pages or []
        self.error = error
        self.delay = delay
        self.calls = 0

    def iter_pages(self, data: bytes) -> Iterator[List[TextRun]]:
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        for page in self.pages:
            yield [TextRun(line, float(i * 14)) for i, line in enumerate(page.split("\n"))]
        if self.error is not None:
            raise self.error


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: List[str], compress: bool = False, extra_trailer: str = "") -> bytes:
    """Single-page PDF showing `lines` in Helvetica, with a correct xref table."""
    ops = "".join(f"({_pdf_escape(line)}) Tj T*\n" for line in lines)
    content = f"BT\n/F1 12 Tf\n14 TL\n72 720 Td\n{ops}ET\n".encode("latin-1")
    stream_dict = f"<< /Length {len(content)} >>"
    if compress:
        content = zlib.compress(content)
        stream_dict = f"<< /Length {len(content)} /Filter /FlateDecode >>"

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        stream_dict.encode("ascii") + b"\nstream\n" + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
    ]

    out = BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n")
    xref_at = out.tell()
    out.write(f"xref\n0 {len(objects) + 1}\n".encode("ascii"))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(f"{offset:010d} 00000 n \n".encode("ascii"))
    trailer = f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R {extra_trailer}>>\nstartxref\n{xref_at}\n%%EOF\n"
    out.write(trailer.encode("ascii"))
    return out.getvalue()


def build_raw_docx(body_xml: str, part: str = "word/document.xml", compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Minimal DOCX container holding only content types and one document part."""
    buf = BytesIO()
    with zipfile.ZipFile(buf, "w", compression) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES_XML.format(part=part))
        zf.writestr(part, DOCUMENT_XML.format(body=body_xml))
    return buf.getvalue()


def build_docx(paragraphs: List[str]) -> bytes:
    """Real Word document written by python-docx."""
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def sample_resume_text() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def make_raw_docx():
    return build_raw_docx


@pytest.fixture
def make_docx():
    return build_docx


@pytest.fixture
def paragraph():
    return paragraph_xml


@pytest.fixture
def fake_engine():
    return FakePdfEngine


@pytest.fixture
def resume_pdf(make_pdf, sample_resume_text) -> bytes:
    return make_pdf([line for line in sample_resume_text.split("\n") if line.strip()])
