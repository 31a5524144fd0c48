from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import ConfigDict, Field

from pitchwright.schemas.assets import StructuredContent
from pitchwright.schemas.common import CamelModel


class BlockType(str, Enum):
    title = "title"
    subtitle = "subtitle"
    bullets = "bullets"
    quote = "quote"
    image = "image"
    chart = "chart"
    table = "table"
    logo = "logo"
    footer = "footer"
    notes = "notes"


class Priority(str, Enum):
    must_show = "must-show"
    nice_to_have = "nice-to-have"


class VisualWeight(str, Enum):
    light = "light"
    medium = "medium"
    heavy = "heavy"


class ContentShape(str, Enum):
    statistics = "statistics-dominant"
    visual = "visual-forward"
    bullets = "bullets-dominant"
    balanced = "balanced"


class RegionName(str, Enum):
    title = "title"
    body = "body"
    visual = "visual"
    footer = "footer"


class BlockMetadata(CamelModel):
    priority: Priority
    estimated_length: int = Field(ge=0)
    visual_weight: VisualWeight
    intent: str = ""


class BlockStyling(CamelModel):
    font_size: str | None = None
    color: str | None = None
    alignment: Literal["left", "center", "right"] | None = None


BlockContent = Union[str, list[str], StructuredContent]


class ContentBlock(CamelModel):
    id: str
    type: BlockType
    content: BlockContent
    metadata: BlockMetadata
    styling: BlockStyling | None = None


class Region(CamelModel):
    model_config = ConfigDict(frozen=True)

    area: str
    accepts: tuple[BlockType, ...]
    max_lines: int | None = None
    columns: int | None = None
    aspect_ratio: str | None = None
    height: str | None = None


class LayoutArchetype(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    shape: ContentShape
    title: Region
    body: Region
    visual: Region
    footer: Region
    grid_template: str
    suitable_for: tuple[str, ...] = ()

    def regions(self) -> dict[RegionName, Region]:
        return {
            RegionName.title: self.title,
            RegionName.body: self.body,
            RegionName.visual: self.visual,
            RegionName.footer: self.footer,
        }

    def region_for(self, block_type: BlockType) -> RegionName | None:
        for name, region in self.regions().items():
            if block_type in region.accepts:
                return name
        return None


class SlideAssignment(CamelModel):
    """Layout assigner output for one slide."""

    slide_number: int
    shape: ContentShape
    archetype: LayoutArchetype
    blocks: list[ContentBlock]
