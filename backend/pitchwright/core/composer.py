"""
Slide composition: archetype + resolved blocks + shared tokens → ``SlideLayout``.

Markup is deterministic HTML, one ``<section>`` per slide, with blocks placed
into the archetype's grid regions.  Styling never lives in the slide markup;
it comes from the deck-wide CSS variables rendered once at export time.
"""

from __future__ import annotations

import html as html_mod
import logging
import math

from pitchwright.core.config import settings
from pitchwright.core.errors import CompositionInvariantError
from pitchwright.core.themes import font_scale, px
from pitchwright.schemas.assets import (
    AssetPlaceholder,
    ChartSpec,
    ImageSearchResult,
    SVGElement,
    TableSpec,
    VisualRequest,
)
from pitchwright.schemas.deck import Canvas, ConsistencyReport, SlideLayout, SlideMetadata
from pitchwright.schemas.design import DesignTokens
from pitchwright.schemas.layout import (
    BlockStyling,
    BlockType,
    ContentBlock,
    LayoutArchetype,
    RegionName,
    SlideAssignment,
    VisualWeight,
)
from pitchwright.schemas.outline import PitchDeckOutline
from pitchwright.schemas.request import AspectRatio

logger = logging.getLogger(__name__)

CANVAS_SIZES: dict[AspectRatio, tuple[int, int]] = {
    AspectRatio.standard: (1920, 1080),
    AspectRatio.classic: (1024, 768),
    AspectRatio.widescreen: (2560, 1080),
}

TITLE_FIT_CHARS = (40, 70)
BULLETS_FIT_CHARS = 240
BULLETS_FIT_POINTS = 5


def _e(text: str | None) -> str:
    """HTML-escape helper."""
    return html_mod.escape(text or "")


def canvas_for(aspect_ratio: AspectRatio) -> Canvas:
    width, height = CANVAS_SIZES[aspect_ratio]
    return Canvas(width=width, height=height, aspect_ratio=aspect_ratio.value)


# ── Text measurement and fitting ─────────────────────────────────────────────


def block_text(block: ContentBlock) -> str:
    """Readable text a block puts on screen."""
    content = block.content
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return " ".join(content)
    if isinstance(content, TableSpec):
        return " ".join([*content.headers, *(cell for row in content.rows for cell in row)])
    if isinstance(content, ChartSpec):
        return " ".join(content.statistics)
    if isinstance(content, (ImageSearchResult, SVGElement)):
        return content.title
    return ""


def fit_text(block: ContentBlock, tokens: DesignTokens) -> ContentBlock:
    """Pick a font size from the theme scale so the block fits its region."""
    sizes = tokens.sizes
    length = len(block_text(block))

    if block.type == BlockType.title:
        short, medium = TITLE_FIT_CHARS
        size = sizes.h1 if length <= short else sizes.h2 if length <= medium else sizes.h3
    elif block.type == BlockType.subtitle:
        size = sizes.h3
    elif block.type == BlockType.bullets:
        points = block.content if isinstance(block.content, list) else []
        crowded = length > BULLETS_FIT_CHARS or len(points) > BULLETS_FIT_POINTS
        size = sizes.caption if crowded else sizes.body
    else:
        return block

    styling = block.styling or BlockStyling()
    return block.model_copy(update={"styling": styling.model_copy(update={"font_size": size})})


# ── Metadata ─────────────────────────────────────────────────────────────────


def estimated_read_time(blocks: list[ContentBlock]) -> int:
    chars = sum(len(block_text(b)) for b in blocks)
    return math.ceil(chars / settings.READING_SPEED_CHARS_PER_SECOND)


def visual_density(blocks: list[ContentBlock]) -> float:
    if not blocks:
        return 0.0
    weighted = sum(1 for b in blocks if b.metadata.visual_weight != VisualWeight.light)
    return min(1.0, max(0.0, weighted / len(blocks)))


def complexity(blocks: list[ContentBlock]) -> str:
    heavy = sum(1 for b in blocks if b.metadata.visual_weight == VisualWeight.heavy)
    if len(blocks) >= 6 or heavy >= 2:
        return "complex"
    if len(blocks) <= 3 and heavy == 0:
        return "simple"
    return "medium"


def slide_metadata(blocks: list[ContentBlock]) -> SlideMetadata:
    if not blocks:
        raise CompositionInvariantError("Cannot compute metadata for a slide without blocks")
    return SlideMetadata(
        estimated_read_time=estimated_read_time(blocks),
        complexity=complexity(blocks),
        visual_density=visual_density(blocks),
    )


# ── Markup ───────────────────────────────────────────────────────────────────


def _style_attr(styling: BlockStyling | None) -> str:
    if styling is None:
        return ""
    rules = []
    if styling.font_size:
        rules.append(f"font-size: {styling.font_size}")
    if styling.color:
        rules.append(f"color: {styling.color}")
    if styling.alignment:
        rules.append(f"text-align: {styling.alignment}")
    return f' style="{_e("; ".join(rules))}"' if rules else ""


def _render_placeholder(hint: str, reason: str = "") -> str:
    return (
        f'<div class="asset-placeholder" data-hint="{_e(hint)}" title="{_e(reason)}">'
        f"asset unavailable</div>"
    )


def _render_visual(content) -> str:
    if isinstance(content, SVGElement):
        return f'<figure class="svg-{content.svg_type}">{content.markup}</figure>'
    if isinstance(content, ImageSearchResult):
        return (
            f'<img src="{_e(content.url)}" alt="{_e(content.title)}" '
            f'width="{content.dimensions.width}" height="{content.dimensions.height}" loading="lazy">'
        )
    if isinstance(content, AssetPlaceholder):
        return _render_placeholder(content.hint, content.reason)
    if isinstance(content, VisualRequest):
        return _render_placeholder(content.hint, "not resolved")
    if isinstance(content, ChartSpec):
        return _render_placeholder("chart", "not resolved")
    return ""


def _render_table(table: TableSpec) -> str:
    head = "".join(f"<th>{_e(h)}</th>" for h in table.headers)
    rows = "".join("<tr>" + "".join(f"<td>{_e(c)}</td>" for c in row) + "</tr>" for row in table.rows)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{rows}</tbody></table>"


def render_block(block: ContentBlock) -> str:
    attrs = f'class="block block-{block.type.value}" data-block-id="{_e(block.id)}"{_style_attr(block.styling)}'
    content = block.content

    if block.type == BlockType.title:
        return f"<h1 {attrs}>{_e(str(content))}</h1>"
    if block.type == BlockType.subtitle:
        return f"<p {attrs}>{_e(str(content))}</p>"
    if block.type == BlockType.bullets:
        items = content if isinstance(content, list) else [str(content)]
        points = "".join(f"<li>{_e(p)}</li>" for p in items)
        return f"<ul {attrs}>{points}</ul>"
    if block.type == BlockType.quote:
        return f"<blockquote {attrs}>{_e(str(content))}</blockquote>"
    if block.type == BlockType.table:
        if isinstance(content, TableSpec):
            return f"<div {attrs}>{_render_table(content)}</div>"
        return f"<div {attrs}>{_render_visual(content)}</div>"
    if block.type in (BlockType.image, BlockType.chart, BlockType.logo):
        return f"<div {attrs}>{_render_visual(content)}</div>"
    if block.type == BlockType.footer:
        return f"<footer {attrs}>{_e(str(content))}</footer>"
    return f"<aside {attrs}>{_e(str(content))}</aside>"


def render_slide(slide_number: int, archetype: LayoutArchetype, blocks: list[ContentBlock]) -> str:
    placed: dict[RegionName, list[str]] = {name: [] for name in RegionName}
    for block in blocks:
        region = archetype.region_for(block.type)
        if region is None:
            raise CompositionInvariantError(
                f"Block {block.id} of type {block.type.value!r} has no region in layout {archetype.id!r}"
            )
        placed[region].append(render_block(block))

    regions = []
    for name, region in archetype.regions().items():
        if placed[name]:
            regions.append(
                f'<div class="region region-{name.value}" style="grid-area: {region.area}">'
                f'{"".join(placed[name])}</div>'
            )

    return (
        f'<section class="slide layout-{archetype.id}" data-slide="{slide_number}">'
        f'{"".join(regions)}</section>'
    )


# ── Composition ──────────────────────────────────────────────────────────────


def compose_slide(
    assignment: SlideAssignment,
    tokens: DesignTokens,
    aspect_ratio: AspectRatio,
    speaker_notes: str = "",
) -> SlideLayout:
    if not assignment.blocks:
        raise CompositionInvariantError(f"Slide {assignment.slide_number} has no content blocks")

    blocks = [fit_text(block, tokens) for block in assignment.blocks]
    layout = SlideLayout(
        slide_number=assignment.slide_number,
        layout_id=assignment.archetype.id,
        blocks=blocks,
        design_tokens=tokens,
        markup=render_slide(assignment.slide_number, assignment.archetype, blocks),
        css_variables=tokens.to_css_vars(),
        canvas=canvas_for(aspect_ratio),
        speaker_notes=speaker_notes,
        metadata=slide_metadata(blocks),
    )
    # Identity, not equality, is what slides share
    layout.design_tokens = tokens
    return layout


def compose_slides(
    outline: PitchDeckOutline,
    assignments: list[SlideAssignment],
    tokens: DesignTokens,
    aspect_ratio: AspectRatio,
) -> list[SlideLayout]:
    expected = [s.slide_number for s in outline.slides]
    actual = [a.slide_number for a in assignments]
    if expected != actual:
        raise CompositionInvariantError(
            "Slide numbering diverged between outline and layouts",
            details={"outline": expected, "layouts": actual},
        )

    notes = {s.slide_number: s.speaker_notes for s in outline.slides}
    slides = [compose_slide(a, tokens, aspect_ratio, notes[a.slide_number]) for a in assignments]
    logger.info("Composed %d slide(s) with theme %s", len(slides), tokens.theme)
    return slides


def check_consistency(slides: list[SlideLayout], tokens: DesignTokens) -> ConsistencyReport:
    scale = font_scale(tokens)
    sizes = [
        b.styling.font_size
        for slide in slides
        for b in slide.blocks
        if b.styling is not None and b.styling.font_size
    ]
    report = ConsistencyReport(
        shared_tokens=all(slide.design_tokens is tokens for slide in slides),
        titles_present=all(any(b.type == BlockType.title for b in slide.blocks) for slide in slides),
        font_sizes_in_scale=all(size in scale for size in sizes),
    )
    if not report.shared_tokens:
        raise CompositionInvariantError("Slides do not share one design token instance")
    if not (report.titles_present and report.font_sizes_in_scale):
        logger.warning("Deck consistency check flagged issues: %s", report.model_dump())
    return report


def base_stylesheet(tokens: DesignTokens, canvas: Canvas | None = None) -> str:
    """Deck-wide stylesheet: token variables once, then shared rules.

    Slides are drawn at the proportions of *canvas*, 16:9 when none is given.
    """
    body_px = px(tokens.sizes.body)
    canvas = canvas or canvas_for(AspectRatio.standard)
    return f"""\
:root {{
{tokens.to_css_vars()}
}}
*, *::before, *::after {{ box-sizing: border-box; margin: 0; padding: 0; }}
body {{ font-family: var(--font-body); color: var(--color-text); background: var(--color-background); }}
.slide {{
  display: grid; grid-template-columns: repeat(12, 1fr); grid-template-rows: repeat(12, 1fr);
  gap: var(--spacing-md); padding: var(--spacing-xl);
  aspect-ratio: {canvas.width} / {canvas.height}; margin: var(--spacing-lg) auto; max-width: 1280px;
  background: var(--color-background); box-shadow: var(--shadow-elevated);
  border-radius: var(--border-radius);
}}
.region {{ display: flex; flex-direction: column; gap: var(--spacing-sm); }}
.block-title {{ font-family: var(--font-heading); font-size: var(--size-h1); color: var(--color-primary); }}
.block-subtitle {{ font-size: var(--size-h3); color: var(--color-muted); }}
.block-bullets {{ font-size: var(--size-body); line-height: var(--line-height); padding-left: {body_px}px; }}
.block-table table {{ border-collapse: collapse; width: 100%; }}
.block-table td, .block-table th {{ border: var(--border-width) solid var(--color-muted); padding: var(--spacing-xs); }}
.block-image img, .block-logo img {{ max-width: 100%; height: auto; border-radius: var(--border-radius); }}
.asset-placeholder {{
  display: flex; align-items: center; justify-content: center; min-height: 120px;
  background: var(--color-surface); color: var(--color-muted); border-radius: var(--border-radius);
}}"""
