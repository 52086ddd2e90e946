"""Exceptions raised by extraction strategies."""

from typing import Optional

# Reasons a single extraction strategy can fail with
REASON_NO_TEXT_LAYER = "no-text-layer"
REASON_CORRUPT = "corrupt"
REASON_TIMEOUT = "timeout"
REASON_EMPTY = "empty"
REASON_ENCRYPTED = "encrypted"


class ExtractionError(Exception):
    """A strategy could not produce text. Never crosses the pipeline boundary."""

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        self.message = message or reason
        super().__init__(f"{reason}: {self.message}")
