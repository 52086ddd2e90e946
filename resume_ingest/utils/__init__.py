"""Utility exports."""

from .helpers import EMAIL_PATTERN, dedupe_preserving_order, first_match
from .logger import get_logger

__all__ = [
    "get_logger",
    "EMAIL_PATTERN",
    "first_match",
    "dedupe_preserving_order",
]
