from __future__ import annotations

from enum import Enum

from pydantic import Field

from pitchwright.schemas.common import CamelModel


class SlideType(str, Enum):
    title = "title"
    problem = "problem"
    solution = "solution"
    market = "market"
    product = "product"
    business_model = "business-model"
    traction = "traction"
    competition = "competition"
    go_to_market = "go-to-market"
    financials = "financials"
    team = "team"
    funding_ask = "funding-ask"
    benefits = "benefits"
    proof = "proof"
    vision = "vision"
    custom = "custom"


class SlideOutline(CamelModel):
    slide_number: int = Field(ge=1)
    slide_type: SlideType
    title: str
    key_points: list[str] = Field(default_factory=list)
    statistics: list[str] = Field(default_factory=list)
    visual_suggestions: list[str] = Field(default_factory=list)
    speaker_notes: str = ""


class PitchDeckOutline(CamelModel):
    title: str
    subtitle: str
    executive_summary: str
    company_overview: str
    call_to_action: str
    slides: list[SlideOutline] = Field(default_factory=list)


class DeckNarrative(CamelModel):
    """Deck-level prose, optionally written by a language model."""

    subtitle: str | None = None
    executive_summary: str | None = None
    company_overview: str | None = None
    call_to_action: str | None = None
