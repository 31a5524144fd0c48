import datetime
from typing import Any
from uuid import UUID

from pydantic import ConfigDict, Field

from pitchwright.models.pitch_deck import DeckStatus
from pitchwright.schemas.common import CamelModel
from pitchwright.schemas.insights import InsightSet
from pitchwright.schemas.request import Theme


class PitchDeckSummary(CamelModel):
    id: UUID
    kind: str
    title: str
    company_name: str
    status: str
    theme: str
    slide_count: int
    quality_degraded: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime | None

    model_config = ConfigDict(from_attributes=True)


class PitchDeckRead(PitchDeckSummary):
    description: str | None = None
    deck: dict[str, Any] | None = None
    content: dict[str, Any] | None = None


class StandardDeckCreate(CamelModel):
    """A template deck assembled by hand; no research or generation."""

    title: str = Field(min_length=1, max_length=255)
    company_name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    theme: Theme = Theme.modern
    content: dict[str, Any] = Field(default_factory=dict)


class PitchDeckUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: DeckStatus | None = None
    content: dict[str, Any] | None = None


class ResearchSourceRead(CamelModel):
    url: str
    title: str
    word_count: int
    fetch_latency_ms: int


class ResearchInsightsRead(CamelModel):
    company_name: str
    sources: list[ResearchSourceRead]
    sources_attempted: int
    failed_urls: list[str]
    insights: InsightSet
