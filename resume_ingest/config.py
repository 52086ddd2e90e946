"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        return float(raw) if raw.strip() else default
    except ValueError:
        return default


LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Quality analysis
MIN_TEXT_LENGTH: int = _env_int("MIN_TEXT_LENGTH", 50)
GARBLED_RATIO_THRESHOLD: float = _env_float("GARBLED_RATIO_THRESHOLD", 0.15)
RESUME_TERM_MIN_MATCHES: int = _env_int("RESUME_TERM_MIN_MATCHES", 4)

# Format sniffing
SNIFF_SAMPLE_BYTES: int = 1024
BINARY_RATIO_THRESHOLD: float = 0.10

# Extraction
BINARY_SCAN_MIN_RUN: int = 4  # printable runs of length > 3 survive the binary scan
PDF_LINE_TOLERANCE: float = 5.0  # points of vertical drift still counted as the same line
MAX_TEXT_CHARS: int = _env_int("MAX_TEXT_CHARS", 50000)

# Resume parsing
HEADER_WINDOW_LINES: int = 10

# Diagnostics
LARGE_FILE_BYTES: int = 10 * 1024 * 1024

# Caller-side deadline for ingest_upload_async
INGESTION_TIMEOUT_SECONDS: float = _env_float("INGESTION_TIMEOUT_SECONDS", 30.0)
