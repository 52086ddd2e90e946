"""Uploaded file schema and detected format enum."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DetectedFormat(str, Enum):
    """File format derived from byte signatures, never from the filename."""

    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"
    UNKNOWN = "unknown"


class RawUpload(BaseModel):
    """Raw file bytes as received at the system boundary. Filename and MIME type are untrusted hints."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="Raw file contents")
    filename: str = Field(default="", description="Declared filename (hint only)")
    mime_type: Optional[str] = Field(default=None, description="Declared MIME type (hint only)")

    @property
    def size(self) -> int:
        return len(self.data)
