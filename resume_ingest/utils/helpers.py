"""Helper utilities shared by the ingestion modules."""

import re
from typing import List, Optional, Pattern

EMAIL_PATTERN: Pattern[str] = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def first_match(pattern: Pattern[str], text: str) -> Optional[str]:
    """First match of a compiled pattern, stripped; None when absent."""
    if not text:
        return None
    m = pattern.search(text)
    return m.group(0).strip() if m else None


def dedupe_preserving_order(items: List[str]) -> List[str]:
    """Drop case-insensitive duplicates, keeping the first spelling."""
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        key = item.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(item.strip())
    return result
