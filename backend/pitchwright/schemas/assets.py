"""
Structured payloads a content block can carry.

Each payload has a literal ``kind`` so a block's content round-trips through
JSON into the same model it was serialized from.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field

from pitchwright.schemas.common import CamelModel

ASSET_UNAVAILABLE = "asset unavailable"


class Dimensions(CamelModel):
    width: int
    height: int


class DataPoint(CamelModel):
    label: str
    value: float
    display: str = ""


class VisualRequest(CamelModel):
    """Unresolved image/logo reference produced by the layout assigner."""

    kind: Literal["visual-request"] = "visual-request"
    hint: str
    query: str = ""


class ChartSpec(CamelModel):
    """Unresolved chart: the statistics it is meant to plot."""

    kind: Literal["chart-spec"] = "chart-spec"
    chart_type: Literal["bar", "pie", "line"] = "bar"
    statistics: list[str] = Field(default_factory=list)


class TableSpec(CamelModel):
    kind: Literal["table"] = "table"
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


class ImageSearchResult(CamelModel):
    kind: Literal["image"] = "image"
    url: str
    thumbnail_url: str = ""
    title: str = ""
    source: str = ""
    license: Literal["public-domain", "creative-commons", "commercial", "unknown"] = "unknown"
    dimensions: Dimensions = Field(default_factory=lambda: Dimensions(width=800, height=600))
    format: str = "jpg"


class SVGElement(CamelModel):
    kind: Literal["svg"] = "svg"
    svg_type: Literal["chart", "diagram", "icon"]
    title: str = ""
    markup: str
    data: list[DataPoint] = Field(default_factory=list)
    style: dict[str, str] = Field(default_factory=dict)
    dimensions: Dimensions = Field(default_factory=lambda: Dimensions(width=400, height=300))


class AssetPlaceholder(CamelModel):
    kind: Literal["placeholder"] = "placeholder"
    marker: Literal["asset unavailable"] = ASSET_UNAVAILABLE
    hint: str = ""
    reason: str = ""


StructuredContent = Annotated[
    Union[VisualRequest, ChartSpec, TableSpec, ImageSearchResult, SVGElement, AssetPlaceholder],
    Field(discriminator="kind"),
]
