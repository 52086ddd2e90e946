"""
Ingestion pipeline: sniff format → run strategy chain → quality gate → result.

Each strategy attempt is assessed; the first attempt reaching the acceptable tier wins.
If none does, the best-ranked candidate is returned with success=False and diagnostics.
Low-level exceptions never escape: they become failed ExtractionAttempts.
"""

import asyncio
import time
from typing import List, Optional, Sequence

from resume_ingest.config import INGESTION_TIMEOUT_SECONDS
from resume_ingest.errors import REASON_CORRUPT, REASON_EMPTY, REASON_TIMEOUT, ExtractionError
from resume_ingest.ingestion.diagnostics import build_diagnostics_report
from resume_ingest.ingestion.format_sniffer import detect_format
from resume_ingest.ingestion.pdf_extractor import PdfEngine
from resume_ingest.ingestion.quality import assess_quality, quality_rank
from resume_ingest.ingestion.strategies import Strategy, strategies_for
from resume_ingest.schemas.extraction import (
    AttemptOutcome,
    ExtractionAttempt,
    IngestionError,
    IngestionErrorCode,
    IngestionMetadata,
    IngestionResult,
)
from resume_ingest.schemas.quality import QualityTier
from resume_ingest.schemas.upload import DetectedFormat, RawUpload
from resume_ingest.services.text_cleaner import clean_extracted_text
from resume_ingest.utils.logger import get_logger

logger = get_logger(__name__)

MESSAGES = {
    IngestionErrorCode.UNSUPPORTED_FORMAT: "Unsupported file format. Upload a PDF, DOCX or plain text file.",
    IngestionErrorCode.EXTRACTION_FAILED: "Could not extract any text from the file.",
    IngestionErrorCode.QUALITY_TOO_LOW: "Text was extracted but looks unreliable; review it before continuing.",
}


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def run_strategy(strategy: Strategy, data: bytes) -> ExtractionAttempt:
    """Run one strategy and turn its result (or failure) into an ExtractionAttempt."""
    start = time.perf_counter()
    try:
        raw = strategy.extract(data)
    except ExtractionError as e:
        logger.warning("Strategy %s failed: %s", strategy.name, e)
        return ExtractionAttempt(
            strategy=strategy.name,
            outcome=AttemptOutcome.FAILED,
            elapsed_ms=_elapsed_ms(start),
            error_reason=e.reason,
            error_message=e.message,
            fallback=strategy.fallback,
        )
    except Exception as e:
        logger.exception("Strategy %s raised unexpectedly: %s", strategy.name, e)
        return ExtractionAttempt(
            strategy=strategy.name,
            outcome=AttemptOutcome.FAILED,
            elapsed_ms=_elapsed_ms(start),
            error_reason=REASON_CORRUPT,
            error_message=str(e) or type(e).__name__,
            fallback=strategy.fallback,
        )

    text = clean_extracted_text(raw or "")
    if not text:
        return ExtractionAttempt(
            strategy=strategy.name,
            outcome=AttemptOutcome.FAILED,
            elapsed_ms=_elapsed_ms(start),
            error_reason=REASON_EMPTY,
            error_message="strategy returned no text",
            fallback=strategy.fallback,
        )
    assessment = assess_quality(text)
    outcome = AttemptOutcome.SUCCESS if assessment.acceptable else AttemptOutcome.PARTIAL
    logger.info(
        "Strategy %s: %s chars, quality=%s, garbled_ratio=%.3f",
        strategy.name,
        len(text),
        assessment.tier.value,
        assessment.garbled_ratio,
    )
    return ExtractionAttempt(
        strategy=strategy.name,
        text=text,
        elapsed_ms=_elapsed_ms(start),
        outcome=outcome,
        assessment=assessment,
        fallback=strategy.fallback,
    )


def run_strategies(
    strategies: Sequence[Strategy],
    data: bytes,
    stop_on_acceptable: bool = True,
) -> List[ExtractionAttempt]:
    """Run strategies in order, stopping at the first acceptable-or-better result if asked."""
    attempts: List[ExtractionAttempt] = []
    for strategy in strategies:
        attempt = run_strategy(strategy, data)
        attempts.append(attempt)
        if stop_on_acceptable and attempt.outcome == AttemptOutcome.SUCCESS:
            break
    return attempts


def select_best_attempt(attempts: Sequence[ExtractionAttempt]) -> Optional[ExtractionAttempt]:
    """Best-ranked attempt that produced text; the earlier attempt wins ties."""
    candidates = [a for a in attempts if a.text and a.assessment is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda a: quality_rank(a.assessment))


def _failure(
    upload: RawUpload,
    fmt: DetectedFormat,
    code: IngestionErrorCode,
    attempts: List[ExtractionAttempt],
    best: Optional[ExtractionAttempt] = None,
    metadata: Optional[IngestionMetadata] = None,
) -> IngestionResult:
    report = build_diagnostics_report(
        upload,
        fmt,
        attempts,
        assessment=best.assessment if best else None,
        failure_code=code,
        winning_strategy=best.strategy if best else None,
    )
    return IngestionResult(
        success=False,
        text=best.text if best else "",
        metadata=metadata,
        error=IngestionError(code=code, message=MESSAGES[code], diagnostics_report=report),
        attempts=attempts,
    )


def ingest_upload(upload: RawUpload, pdf_engine: Optional[PdfEngine] = None) -> IngestionResult:
    """
    Run the full ingestion pipeline on one upload.
    Returns text plus metadata on success, or an error (unsupported-format,
    extraction-failed, quality-too-low) with a diagnostics report.
    """
    start = time.perf_counter()
    fmt = detect_format(upload.data)
    logger.info("Ingesting %s (%s bytes): detected format %s", upload.filename or "(unnamed)", upload.size, fmt.value)

    chain = strategies_for(fmt, pdf_engine=pdf_engine)
    if not chain:
        logger.warning("Unsupported format for %s", upload.filename or "(unnamed)")
        return _failure(upload, fmt, IngestionErrorCode.UNSUPPORTED_FORMAT, [])

    attempts = run_strategies(chain, upload.data)
    best = select_best_attempt(attempts)
    if best is None:
        logger.warning("All %s strategies failed for %s", len(attempts), upload.filename or "(unnamed)")
        return _failure(upload, fmt, IngestionErrorCode.EXTRACTION_FAILED, attempts)

    metadata = IngestionMetadata(
        detected_format=fmt,
        extraction_strategy_used=best.strategy,
        quality_tier=best.assessment.tier,
        processing_time_ms=_elapsed_ms(start),
    )
    if best.assessment.tier == QualityTier.POOR:
        logger.warning("Quality too low for %s (best strategy %s)", upload.filename or "(unnamed)", best.strategy)
        return _failure(upload, fmt, IngestionErrorCode.QUALITY_TOO_LOW, attempts, best=best, metadata=metadata)

    logger.info(
        "Ingestion finished: strategy=%s quality=%s time_ms=%.1f",
        best.strategy,
        best.assessment.tier.value,
        metadata.processing_time_ms,
    )
    return IngestionResult(success=True, text=best.text, metadata=metadata, attempts=attempts)


def ingest_file(
    data: bytes,
    filename: str = "",
    mime_type: Optional[str] = None,
    pdf_engine: Optional[PdfEngine] = None,
) -> IngestionResult:
    """Convenience wrapper building the RawUpload from its parts."""
    return ingest_upload(RawUpload(data=data, filename=filename, mime_type=mime_type), pdf_engine=pdf_engine)


async def ingest_upload_async(
    upload: RawUpload,
    timeout: Optional[float] = INGESTION_TIMEOUT_SECONDS,
    pdf_engine: Optional[PdfEngine] = None,
) -> IngestionResult:
    """
    Run ingest_upload in a worker thread under a deadline.
    On expiry the run is abandoned and reported as extraction-failed with a timeout attempt.
    """
    try:
        return await asyncio.wait_for(asyncio.to_thread(ingest_upload, upload, pdf_engine), timeout)
    except asyncio.TimeoutError:
        logger.warning("Ingestion of %s timed out after %ss", upload.filename or "(unnamed)", timeout)
        attempt = ExtractionAttempt(
            strategy="pipeline",
            outcome=AttemptOutcome.FAILED,
            elapsed_ms=(timeout or 0.0) * 1000.0,
            error_reason=REASON_TIMEOUT,
            error_message=f"no result within {timeout}s",
        )
        return _failure(upload, detect_format(upload.data), IngestionErrorCode.EXTRACTION_FAILED, [attempt])
