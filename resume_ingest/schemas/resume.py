"""Structured resume produced by the resume text parser."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ResumeSection(BaseModel):
    title: str = Field(..., description="Header text as it appeared (colon stripped)")
    content: str = Field(default="", description="Section body, original line breaks kept")


class StructuredResume(BaseModel):
    """Contact block plus titled sections in source order."""

    name: Optional[str] = Field(default=None, description="First line of the document")
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, description="'City, ST' or 'City, Country'")
    linkedin: Optional[str] = Field(default=None, description="linkedin.com/in/<handle>")
    website: Optional[str] = Field(default=None, description="Personal site, never a LinkedIn URL")
    sections: List[ResumeSection] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list, description="Items split out of the skills section")

    def section(self, title: str) -> Optional[ResumeSection]:
        """First section whose title matches case-insensitively."""
        wanted = (title or "").strip().lower()
        for s in self.sections:
            if s.title.strip().lower() == wanted:
                return s
        return None
