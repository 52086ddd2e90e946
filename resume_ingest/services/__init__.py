"""Service exports."""

from .text_cleaner import (
    clean_extracted_text,
    collapse_whitespace,
    decode_xml_entities,
    normalize_line_endings,
    strip_markup,
)

__all__ = [
    "clean_extracted_text",
    "collapse_whitespace",
    "decode_xml_entities",
    "normalize_line_endings",
    "strip_markup",
]
