"""Data models for content enrichment."""

from typing import Optional

from pydantic import BaseModel, Field


class LinkResolution(BaseModel):
    """Outcome of link resolution for a single article."""

    url: str = Field(..., description="Working url of the article")
    comments_url: Optional[str] = Field(None, description="Discussion url, if the article links elsewhere")
    scrape: bool = Field(False, description="Whether to fetch the url instead of using raw content")


class ExtractedContent(BaseModel):
    """Readable content extracted from an html document."""

    content: str = Field(..., description="Extracted html")
    text: str = Field(..., description="Extracted plain text")
    content_length: int = Field(0, description="Length of the plain text")


class ProcessedContent(BaseModel):
    """Enrichment result applied back onto an article."""

    url: str = Field(..., description="Resolved article url")
    content: str = Field(..., description="Extracted html")
    text: str = Field("", description="Extracted plain text")
    content_length: int = Field(0, description="Length of the plain text")
    comments_url: Optional[str] = Field(None, description="Discussion url")
    fetched: bool = Field(False, description="Whether content came from a remote fetch")


class EnrichmentStats(BaseModel):
    """Counters for an enrichment pass."""

    total: int = 0
    fetched: int = 0
    extracted: int = 0
    failed: int = 0

    def merge(self, other: "EnrichmentStats") -> None:
        self.total += other.total
        self.fetched += other.fetched
        self.extracted += other.extracted
        self.failed += other.failed
