"""
Layout assignment: one archetype and an ordered block list per slide outline.

Shape classification picks the archetype; the outline's fields map to content
blocks independently of it, so the same outline always yields the same blocks.
Every block type produced here has a region in every archetype; any block a
region cannot host is a broken contract and raises ``CompositionInvariantError``.
"""

from __future__ import annotations

import logging

from pitchwright.core.errors import CompositionInvariantError
from pitchwright.core.svg import parse_numeric
from pitchwright.schemas.assets import ChartSpec, TableSpec, VisualRequest
from pitchwright.schemas.design import DesignTokens
from pitchwright.schemas.layout import (
    BlockMetadata,
    BlockStyling,
    BlockType,
    ContentBlock,
    ContentShape,
    LayoutArchetype,
    Priority,
    Region,
    SlideAssignment,
    VisualWeight,
)
from pitchwright.schemas.outline import SlideOutline, SlideType

logger = logging.getLogger(__name__)

_TITLE_REGION = Region(area="1 / 1 / 2 / 13", accepts=(BlockType.title, BlockType.subtitle), max_lines=2)
_FOOTER_REGION = Region(area="12 / 1 / 13 / 13", accepts=(BlockType.footer, BlockType.notes), height="48px")

ARCHETYPES: dict[ContentShape, LayoutArchetype] = {
    ContentShape.bullets: LayoutArchetype(
        id="title-bullets",
        name="Title and Bullets",
        description="Headline over a single column of key points.",
        shape=ContentShape.bullets,
        title=_TITLE_REGION,
        body=Region(area="2 / 1 / 12 / 13", accepts=(BlockType.bullets, BlockType.quote, BlockType.table), columns=1),
        visual=Region(area="2 / 10 / 5 / 13", accepts=(BlockType.image, BlockType.chart, BlockType.logo), aspect_ratio="1:1"),
        footer=_FOOTER_REGION,
        grid_template='"title title" auto "body body" 1fr "footer footer" auto / 2fr 1fr',
        suitable_for=("problem", "solution", "team", "benefits", "custom"),
    ),
    ContentShape.statistics: LayoutArchetype(
        id="data-spotlight",
        name="Data Spotlight",
        description="Large chart or table with supporting points alongside.",
        shape=ContentShape.statistics,
        title=_TITLE_REGION,
        body=Region(area="2 / 1 / 12 / 5", accepts=(BlockType.bullets, BlockType.quote), columns=1),
        visual=Region(
            area="2 / 5 / 12 / 13",
            accepts=(BlockType.chart, BlockType.table, BlockType.image, BlockType.logo),
            aspect_ratio="16:9",
        ),
        footer=_FOOTER_REGION,
        grid_template='"title title" auto "body visual" 1fr "footer footer" auto / 1fr 2fr',
        suitable_for=("market", "traction", "financials", "funding-ask"),
    ),
    ContentShape.visual: LayoutArchetype(
        id="big-visual-caption",
        name="Big Visual with Caption",
        description="Full-bleed visual with a short caption.",
        shape=ContentShape.visual,
        title=_TITLE_REGION,
        body=Region(area="10 / 1 / 12 / 13", accepts=(BlockType.bullets, BlockType.quote, BlockType.table), columns=1),
        visual=Region(
            area="2 / 1 / 10 / 13",
            accepts=(BlockType.image, BlockType.chart, BlockType.logo),
            aspect_ratio="16:9",
        ),
        footer=_FOOTER_REGION,
        grid_template='"title" auto "visual" 3fr "body" 1fr "footer" auto / 1fr',
        suitable_for=("title", "product", "vision", "proof"),
    ),
    ContentShape.balanced: LayoutArchetype(
        id="title-bullets-visual",
        name="Title, Bullets and Visual",
        description="Key points beside a supporting visual.",
        shape=ContentShape.balanced,
        title=_TITLE_REGION,
        body=Region(area="2 / 1 / 12 / 7", accepts=(BlockType.bullets, BlockType.quote, BlockType.table), columns=1),
        visual=Region(
            area="2 / 7 / 12 / 13",
            accepts=(BlockType.image, BlockType.chart, BlockType.logo),
            aspect_ratio="4:3",
        ),
        footer=_FOOTER_REGION,
        grid_template='"title title" auto "body visual" 1fr "footer footer" auto / 1fr 1fr',
        suitable_for=("business-model", "competition", "go-to-market"),
    ),
}

_WEIGHTS: dict[BlockType, VisualWeight] = {
    BlockType.image: VisualWeight.heavy,
    BlockType.chart: VisualWeight.heavy,
    BlockType.table: VisualWeight.medium,
    BlockType.logo: VisualWeight.medium,
}


def visual_weight(block_type: BlockType) -> VisualWeight:
    return _WEIGHTS.get(block_type, VisualWeight.light)


def classify_shape(outline: SlideOutline) -> ContentShape:
    """Dominant content shape; statistics > visual > bullets > balanced."""
    stats = len(outline.statistics)
    points = len(outline.key_points)
    if stats >= 2 or (stats and not points):
        return ContentShape.statistics
    if outline.visual_suggestions:
        return ContentShape.visual
    if points >= 3 and not stats:
        return ContentShape.bullets
    return ContentShape.balanced


def _block(
    slide_number: int,
    suffix: str,
    block_type: BlockType,
    content,
    priority: Priority,
    length: int,
    intent: str,
    styling: BlockStyling | None = None,
) -> ContentBlock:
    return ContentBlock(
        id=f"slide-{slide_number}-{suffix}",
        type=block_type,
        content=content,
        metadata=BlockMetadata(
            priority=priority,
            estimated_length=length,
            visual_weight=visual_weight(block_type),
            intent=intent,
        ),
        styling=styling,
    )


def _hint_query(hint: str, outline: SlideOutline) -> str:
    return f"{hint.replace('-', ' ')} {outline.title}".strip()


def build_blocks(outline: SlideOutline, shape: ContentShape, tokens: DesignTokens | None = None) -> list[ContentBlock]:
    """Map one outline's fields to its content blocks, in display order."""
    n = outline.slide_number
    blocks: list[ContentBlock] = []
    is_title_slide = outline.slide_type == SlideType.title

    blocks.append(
        _block(
            n, "title", BlockType.title, outline.title, Priority.must_show, len(outline.title), "slide headline",
            BlockStyling(alignment="center") if is_title_slide else None,
        )
    )

    points = list(outline.key_points)
    if is_title_slide and points:
        subtitle = points.pop(0)
        colour = tokens.colors.muted if tokens else None
        blocks.append(
            _block(
                n, "subtitle", BlockType.subtitle, subtitle, Priority.must_show, len(subtitle), "tagline",
                BlockStyling(alignment="center", color=colour),
            )
        )

    if points:
        blocks.append(
            _block(
                n, "bullets", BlockType.bullets, points, Priority.must_show,
                sum(len(p) for p in points), "key points",
            )
        )

    if outline.statistics:
        priority = Priority.must_show if shape == ContentShape.statistics else Priority.nice_to_have
        numeric = [s for s in outline.statistics if parse_numeric(s) is not None]
        length = sum(len(s) for s in outline.statistics)
        if len(numeric) >= 2:
            blocks.append(
                _block(
                    n, "chart", BlockType.chart, ChartSpec(statistics=numeric), priority, length,
                    "supporting statistics as a chart",
                )
            )
        else:
            table = TableSpec(headers=["Metric"], rows=[[s] for s in outline.statistics])
            blocks.append(
                _block(n, "table", BlockType.table, table, priority, length, "supporting statistics as a table")
            )

    logo_hint = next((h for h in outline.visual_suggestions if "logo" in h.lower()), None)
    image_hint = next((h for h in outline.visual_suggestions if "logo" not in h.lower()), None)
    if image_hint:
        blocks.append(
            _block(
                n, "image", BlockType.image,
                VisualRequest(hint=image_hint, query=_hint_query(image_hint, outline)),
                Priority.nice_to_have, 0, f"visual: {image_hint}",
            )
        )
    if logo_hint:
        blocks.append(
            _block(
                n, "logo", BlockType.logo,
                VisualRequest(hint=logo_hint, query=_hint_query(logo_hint, outline)),
                Priority.nice_to_have, 0, f"visual: {logo_hint}",
            )
        )
    return blocks


def assert_blocks_fit(archetype: LayoutArchetype, blocks: list[ContentBlock], slide_number: int) -> None:
    if not blocks:
        raise CompositionInvariantError(f"Slide {slide_number} has no content blocks")
    if not any(b.metadata.priority == Priority.must_show for b in blocks):
        raise CompositionInvariantError(f"Slide {slide_number} has no must-show block")
    for block in blocks:
        if archetype.region_for(block.type) is None:
            raise CompositionInvariantError(
                f"Block {block.id} of type {block.type.value!r} has no region in layout {archetype.id!r}",
                details={"slideNumber": slide_number, "blockId": block.id, "layoutId": archetype.id},
            )


def assign_layout(outline: SlideOutline, tokens: DesignTokens | None = None) -> SlideAssignment:
    shape = classify_shape(outline)
    archetype = ARCHETYPES[shape]
    blocks = build_blocks(outline, shape, tokens)
    assert_blocks_fit(archetype, blocks, outline.slide_number)
    return SlideAssignment(slide_number=outline.slide_number, shape=shape, archetype=archetype, blocks=blocks)


def assign_layouts(outlines: list[SlideOutline], tokens: DesignTokens | None = None) -> list[SlideAssignment]:
    assignments = [assign_layout(outline, tokens) for outline in outlines]
    logger.debug("Assigned layouts: %s", [a.archetype.id for a in assignments])
    return assignments
