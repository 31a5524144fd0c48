"""Tests for text fitting, slide metadata, markup and deck consistency."""

import pytest

from pitchwright.core.composer import (
    base_stylesheet,
    canvas_for,
    check_consistency,
    complexity,
    compose_slide,
    compose_slides,
    estimated_read_time,
    fit_text,
    render_block,
    slide_metadata,
    visual_density,
)
from pitchwright.core.errors import CompositionInvariantError
from pitchwright.core.layouts import assign_layout, assign_layouts
from pitchwright.core.outline import build_outline
from pitchwright.core.themes import resolve_theme
from pitchwright.schemas.assets import VisualRequest
from pitchwright.schemas.insights import InsightSet
from pitchwright.schemas.layout import BlockMetadata, BlockStyling, BlockType, ContentBlock, Priority, VisualWeight
from pitchwright.schemas.outline import SlideOutline, SlideType
from pitchwright.schemas.request import AspectRatio, PitchDeckRequest

TOKENS = resolve_theme("modern")


def text_block(block_type: BlockType, content, weight: VisualWeight = VisualWeight.light) -> ContentBlock:
    return ContentBlock(
        id=f"slide-1-{block_type.value}",
        type=block_type,
        content=content,
        metadata=BlockMetadata(priority=Priority.must_show, estimated_length=0, visual_weight=weight),
    )


def image_block() -> ContentBlock:
    return text_block(BlockType.image, VisualRequest(hint="hero-image"), VisualWeight.heavy)


def make_outline():
    profile = PitchDeckRequest.model_validate({"companyName": "Acme AI", "industry": "technology"}).to_profile()
    return build_outline(profile, InsightSet(market_size=["A $10 billion market growing 20% a year."]))


class TestFitText:
    @pytest.mark.parametrize(
        "title, expected",
        [("Short title", "48px"), ("A" * 55, "38px"), ("A" * 90, "28px")],
    )
    def test_title_steps_down_the_scale(self, title, expected):
        fitted = fit_text(text_block(BlockType.title, title), TOKENS)

        assert fitted.styling.font_size == expected

    def test_crowded_bullets_use_caption(self):
        fitted = fit_text(text_block(BlockType.bullets, [f"Point {i}" for i in range(6)]), TOKENS)

        assert fitted.styling.font_size == TOKENS.sizes.caption

    def test_short_bullets_use_body(self):
        fitted = fit_text(text_block(BlockType.bullets, ["One", "Two"]), TOKENS)

        assert fitted.styling.font_size == TOKENS.sizes.body

    def test_existing_styling_is_kept(self):
        block = text_block(BlockType.subtitle, "Tagline").model_copy(
            update={"styling": BlockStyling(alignment="center")}
        )

        fitted = fit_text(block, TOKENS)

        assert fitted.styling.alignment == "center"
        assert fitted.styling.font_size == TOKENS.sizes.h3

    def test_visual_blocks_are_untouched(self):
        block = image_block()

        assert fit_text(block, TOKENS) is block


class TestMetadata:
    def test_read_time_rounds_up(self):
        blocks = [text_block(BlockType.title, "x" * 16)]

        assert estimated_read_time(blocks) == 2

    def test_visual_density_is_share_of_weighted_blocks(self):
        assert visual_density([text_block(BlockType.title, "T"), image_block()]) == 0.5
        assert visual_density([]) == 0.0

    def test_complexity_levels(self):
        title = text_block(BlockType.title, "T")
        assert complexity([title]) == "simple"
        assert complexity([title, image_block()]) == "medium"
        assert complexity([title, image_block(), image_block()]) == "complex"

    def test_metadata_requires_blocks(self):
        with pytest.raises(CompositionInvariantError):
            slide_metadata([])


class TestCompose:
    def test_compose_slide_shares_tokens_and_sets_canvas(self):
        slide = SlideOutline(slide_number=3, slide_type=SlideType.team, title="Team", key_points=["a", "b", "c"])
        layout = compose_slide(assign_layout(slide, TOKENS), TOKENS, AspectRatio.classic, "Say hello.")

        assert layout.design_tokens is TOKENS
        assert (layout.canvas.width, layout.canvas.height) == (1024, 768)
        assert layout.canvas.aspect_ratio == "4:3"
        assert layout.layout_id == "title-bullets"
        assert layout.speaker_notes == "Say hello."
        assert layout.markup.startswith('<section class="slide layout-title-bullets" data-slide="3">')

    def test_compose_slides_follows_outline(self):
        outline = make_outline()
        slides = compose_slides(outline, assign_layouts(outline.slides, TOKENS), TOKENS, AspectRatio.standard)

        assert [s.slide_number for s in slides] == [s.slide_number for s in outline.slides]
        assert [s.speaker_notes for s in slides] == [s.speaker_notes for s in outline.slides]
        assert all(s.design_tokens is TOKENS for s in slides)

    def test_numbering_divergence_raises(self):
        outline = make_outline()
        assignments = assign_layouts(outline.slides, TOKENS)[:-1]

        with pytest.raises(CompositionInvariantError):
            compose_slides(outline, assignments, TOKENS, AspectRatio.standard)

    def test_empty_assignment_raises(self):
        slide = SlideOutline(slide_number=2, slide_type=SlideType.team, title="Team", key_points=["a"])
        assignment = assign_layout(slide, TOKENS).model_copy(update={"blocks": []})

        with pytest.raises(CompositionInvariantError):
            compose_slide(assignment, TOKENS, AspectRatio.standard)


class TestConsistency:
    def test_consistent_deck_passes(self):
        outline = make_outline()
        slides = compose_slides(outline, assign_layouts(outline.slides, TOKENS), TOKENS, AspectRatio.standard)

        report = check_consistency(slides, TOKENS)

        assert report.shared_tokens and report.titles_present and report.font_sizes_in_scale

    def test_token_copy_breaks_the_contract(self):
        outline = make_outline()
        slides = compose_slides(outline, assign_layouts(outline.slides, TOKENS), TOKENS, AspectRatio.standard)
        slides[1].design_tokens = TOKENS.model_copy()

        with pytest.raises(CompositionInvariantError):
            check_consistency(slides, TOKENS)


class TestMarkup:
    def test_text_is_escaped(self):
        html = render_block(text_block(BlockType.bullets, ["<b>bold</b> claim"]))

        assert "&lt;b&gt;bold&lt;/b&gt; claim" in html
        assert html.startswith('<ul class="block block-bullets"')

    def test_unresolved_visual_renders_placeholder(self):
        html = render_block(image_block())

        assert "asset unavailable" in html
        assert 'data-hint="hero-image"' in html

    def test_stylesheet_declares_variables_once(self):
        css = base_stylesheet(TOKENS)

        assert css.count(":root") == 1
        assert css.count("--color-primary:") == 1

    @pytest.mark.parametrize(
        "ratio, expected",
        [(AspectRatio.standard, "1920 / 1080"), (AspectRatio.classic, "1024 / 768"), (AspectRatio.widescreen, "2560 / 1080")],
    )
    def test_stylesheet_follows_the_canvas(self, ratio, expected):
        css = base_stylesheet(TOKENS, canvas_for(ratio))

        assert f"aspect-ratio: {expected};" in css

    def test_stylesheet_defaults_to_sixteen_nine(self):
        assert "aspect-ratio: 1920 / 1080;" in base_stylesheet(TOKENS)
