"""
The composed deck: ``SlideLayout`` per slide and the ``CompletePitchDeck``
aggregate returned by a generation run.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, model_serializer, model_validator

from pitchwright.schemas.common import CamelModel
from pitchwright.schemas.design import DesignTokens
from pitchwright.schemas.layout import ContentBlock
from pitchwright.schemas.outline import PitchDeckOutline


class Canvas(CamelModel):
    width: int
    height: int
    aspect_ratio: str


class SlideMetadata(CamelModel):
    estimated_read_time: int = Field(ge=0)
    complexity: Literal["simple", "medium", "complex"]
    visual_density: float = Field(ge=0.0, le=1.0)


class SlideLayout(CamelModel):
    slide_number: int = Field(ge=1)
    layout_id: str
    blocks: list[ContentBlock]
    design_tokens: DesignTokens
    markup: str
    css_variables: str
    canvas: Canvas
    speaker_notes: str = ""
    metadata: SlideMetadata


class VisualAssetsSummary(CamelModel):
    total_images: int = 0
    total_svgs: int = Field(default=0, alias="totalSVGs")
    total_charts: int = 0
    breakdown: dict[str, int] = Field(default_factory=dict)
    image_sources: dict[str, int] = Field(default_factory=dict)


class ExportFormats(CamelModel):
    json_: str = Field(alias="json")
    markdown: str
    html: str
    powerpoint: str | None = None

    @model_serializer(mode="wrap")
    def _drop_unavailable(self, handler):
        data = handler(self)
        # An export target that is not implemented is absent, not null
        for key in ("powerpoint",):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class ConsistencyReport(CamelModel):
    shared_tokens: bool
    titles_present: bool
    font_sizes_in_scale: bool


class GenerationMetadata(CamelModel):
    generated_at: datetime
    processing_time_ms: int = 0
    research_source_count: int = 0
    research_sources_attempted: int = 0
    failed_asset_count: int = 0
    quality_degraded: bool = False
    degradation_reasons: list[str] = Field(default_factory=list)


class CompletePitchDeck(CamelModel):
    outline: PitchDeckOutline
    slides: list[SlideLayout]
    design_tokens: DesignTokens
    visual_assets: VisualAssetsSummary
    consistency: ConsistencyReport
    metadata: GenerationMetadata
    export_formats: ExportFormats | None = None

    @model_validator(mode="after")
    def _share_design_tokens(self) -> "CompletePitchDeck":
        # A parsed deck gets one token instance per slide; point them all back
        # at the deck's instance so identity holds after a round trip.
        for slide in self.slides:
            if slide.design_tokens is not self.design_tokens and slide.design_tokens == self.design_tokens:
                slide.design_tokens = self.design_tokens
        return self
