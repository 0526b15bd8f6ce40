"""
Job data models — raw postings from connectors, and the stored job/employer rows.
"""

from typing import Optional
from pydantic import BaseModel, Field


class RawPosting(BaseModel):
    """A posting as extracted from one source, before identity or persistence."""

    title: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Employer name as shown by the source")
    location: str = Field(default="", description="Location text as shown by the source")
    url: str = Field(default="", description="Absolute URL of the posting")
    description: str = Field(default="", description="Full or partial description text")
    logo: str = Field(default="", description="Absolute URL of the employer logo")
    posted_at: Optional[str] = Field(default=None, description="ISO timestamp the job was posted")
    closing_date: Optional[str] = Field(default=None, description="ISO date applications close")
    raw_text_snippet: str = Field(default="", description="Raw text the posting was recognised from")
    employment_type: str = Field(default="", description="Graduate, Full-time, Contract, etc.")

    def dedup_key(self) -> str:
        """Content key used when the posting has no URL."""
        parts = (self.company, self.title, self.location)
        return "|".join(" ".join(p.lower().split()) for p in parts)


class JobPosting(BaseModel):
    """A row of the canonical jobs table."""

    id: str
    employer_id: Optional[str] = None
    employer_name: str = ""
    title: str = ""
    location: str = ""
    job_url: Optional[str] = None
    source_careers_url: Optional[str] = None
    employment_type: Optional[str] = None
    posted_at: Optional[str] = None
    closing_date: Optional[str] = None
    raw_text_snippet: Optional[str] = None
    description: Optional[str] = None
    source: str = ""
    first_seen_at: Optional[str] = None
    last_seen_at: Optional[str] = None


class Employer(BaseModel):
    """A row of the employer registry."""

    id: Optional[str] = None
    name: str
    careers_url: Optional[str] = None
    source: str = ""
    updated_at: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return bool(self.careers_url)
