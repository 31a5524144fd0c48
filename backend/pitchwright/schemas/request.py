"""
Request contract for a generation run and the immutable ``BusinessProfile``
the pipeline works from once the run has started.
"""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from pitchwright.schemas.common import CamelModel


class Theme(str, Enum):
    modern = "modern"
    corporate = "corporate"
    startup = "startup"
    creative = "creative"


class AspectRatio(str, Enum):
    standard = "16:9"
    classic = "4:3"
    widescreen = "widescreen"


class ResearchDepth(str, Enum):
    basic = "basic"
    comprehensive = "comprehensive"
    expert = "expert"


class PitchDeckRequest(CamelModel):
    company_name: str
    industry: str | None = None
    target_audience: str | None = None
    funding_stage: str | None = None
    business_type: str | None = None

    # Free-text business inputs
    description: str | None = None
    problem_statement: str | None = None
    solution: str | None = None
    target_market: str | None = None
    competitive_advantage: str | None = None
    traction: str | None = None

    # Financials
    funding_amount: str | None = None
    revenue: str | None = None
    team_size: int | None = Field(default=None, ge=0)

    specific_topics: list[str] = Field(default_factory=list)
    research_depth: ResearchDepth = ResearchDepth.basic
    theme: Theme = Theme.modern
    slide_aspect_ratio: AspectRatio = AspectRatio.standard

    @field_validator("company_name")
    @classmethod
    def company_name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("companyName must not be empty")
        return v

    @field_validator(
        "industry",
        "target_audience",
        "funding_stage",
        "business_type",
        "description",
        "problem_statement",
        "solution",
        "target_market",
        "competitive_advantage",
        "traction",
        "funding_amount",
        "revenue",
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("specific_topics")
    @classmethod
    def clean_topics(cls, v: list[str]) -> list[str]:
        # Keep user order, drop blanks and case-insensitive repeats
        seen: set[str] = set()
        topics = []
        for topic in v:
            topic = topic.strip()
            if topic and topic.lower() not in seen:
                seen.add(topic.lower())
                topics.append(topic)
        return topics

    def to_profile(self) -> BusinessProfile:
        return BusinessProfile.model_validate(self.model_dump())


class BusinessProfile(PitchDeckRequest):
    """Frozen snapshot of the request; nothing may change it during a run."""

    model_config = ConfigDict(frozen=True)
