"""
Export serializers for a composed deck.

Formats live in a registry keyed by name.  A format that is unknown or not
implemented yields ``None``; callers treat that as "not available", never as
an error.
"""

from __future__ import annotations

import html as html_mod
import logging
from collections.abc import Callable

from pitchwright.core.composer import base_stylesheet, block_text
from pitchwright.schemas.assets import AssetPlaceholder, SVGElement
from pitchwright.schemas.deck import CompletePitchDeck, ExportFormats
from pitchwright.schemas.layout import BlockType

logger = logging.getLogger(__name__)


def export_json(deck: CompletePitchDeck) -> str:
    """Structural serialization; the export formats themselves are left out."""
    return deck.model_dump_json(by_alias=True, exclude={"export_formats"}, indent=2)


def load_deck_json(payload: str) -> CompletePitchDeck:
    return CompletePitchDeck.model_validate_json(payload)


def _markdown_visual(block) -> str:
    content = block.content
    if isinstance(content, AssetPlaceholder):
        return f"_[{block.type.value}: asset unavailable]_"
    if isinstance(content, SVGElement):
        return f"_[{content.svg_type}: {content.title or block.metadata.intent}]_"
    title = getattr(content, "title", "") or block.metadata.intent
    return f"_[{block.type.value}: {title}]_"


def export_markdown(deck: CompletePitchDeck) -> str:
    outline = deck.outline
    lines = [f"# {outline.title}", ""]
    if outline.subtitle:
        lines += [f"_{outline.subtitle}_", ""]
    if outline.executive_summary:
        lines += [outline.executive_summary, ""]

    for slide in deck.slides:
        title = next((b for b in slide.blocks if b.type == BlockType.title), None)
        heading = block_text(title) if title else f"Slide {slide.slide_number}"
        lines += [f"## {slide.slide_number}. {heading}", ""]

        for block in slide.blocks:
            if block.type == BlockType.title:
                continue
            if block.type == BlockType.subtitle:
                lines.append(f"_{block_text(block)}_")
            elif block.type == BlockType.bullets:
                points = block.content if isinstance(block.content, list) else [block_text(block)]
                lines += [f"- {point}" for point in points]
            elif block.type == BlockType.quote:
                lines.append(f"> {block_text(block)}")
            else:
                lines.append(_markdown_visual(block))
        if slide.speaker_notes:
            lines += ["", f"> Notes: {slide.speaker_notes}"]
        lines.append("")

    if outline.call_to_action:
        lines += ["---", "", outline.call_to_action, ""]
    return "\n".join(lines)


def export_html(deck: CompletePitchDeck) -> str:
    """Slides' markup in order, under a single deck-wide stylesheet."""
    slides = "\n".join(slide.markup for slide in deck.slides)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{html_mod.escape(deck.outline.title)}</title>
<style>
{base_stylesheet(deck.design_tokens, deck.slides[0].canvas if deck.slides else None)}
</style>
</head>
<body>
<main class="deck">
{slides}
</main>
</body>
</html>
"""


EXPORTERS: dict[str, Callable[[CompletePitchDeck], str] | None] = {
    "json": export_json,
    "markdown": export_markdown,
    "html": export_html,
    "powerpoint": None,
}


def export_format(deck: CompletePitchDeck, name: str) -> str | None:
    exporter = EXPORTERS.get(name)
    if exporter is None:
        return None
    return exporter(deck)


def export_deck(deck: CompletePitchDeck) -> ExportFormats:
    formats = ExportFormats(
        json=export_json(deck),
        markdown=export_markdown(deck),
        html=export_html(deck),
        powerpoint=export_format(deck, "powerpoint"),
    )
    logger.debug("Exported deck %r to %s", deck.outline.title, [k for k, v in EXPORTERS.items() if v])
    return formats
