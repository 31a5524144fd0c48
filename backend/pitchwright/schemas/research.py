from __future__ import annotations

from datetime import datetime

from pydantic import Field

from pitchwright.schemas.common import CamelModel


class SearchHit(CamelModel):
    title: str
    url: str
    snippet: str = ""
    relevance_score: float = 0.0


class RawDocument(CamelModel):
    """What a fetcher hands back for one URL, before normalization."""

    url: str
    title: str = ""
    text: str = ""
    image_count: int = 0
    link_count: int = 0


class ResearchSource(CamelModel):
    url: str
    title: str
    content: str
    fetched_at: datetime
    fetch_latency_ms: int
    word_count: int
    image_count: int = 0
    link_count: int = 0


class ResearchResult(CamelModel):
    sources: list[ResearchSource] = Field(default_factory=list)
    attempted: int = 0
    failed_urls: list[str] = Field(default_factory=list)
    timed_out_urls: list[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_urls or self.timed_out_urls)
