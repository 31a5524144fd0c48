"""Tests for shape classification, block mapping and layout contracts."""

import pytest

from pitchwright.core.errors import CompositionInvariantError
from pitchwright.core.layouts import (
    ARCHETYPES,
    assert_blocks_fit,
    assign_layout,
    assign_layouts,
    build_blocks,
    classify_shape,
)
from pitchwright.core.outline import build_outline
from pitchwright.core.themes import resolve_theme
from pitchwright.schemas.assets import ChartSpec, TableSpec, VisualRequest
from pitchwright.schemas.insights import InsightSet
from pitchwright.schemas.layout import (
    BlockMetadata,
    BlockType,
    ContentBlock,
    ContentShape,
    Priority,
    VisualWeight,
)
from pitchwright.schemas.outline import SlideOutline, SlideType
from pitchwright.schemas.request import PitchDeckRequest

TOKENS = resolve_theme("modern")


def make_slide(**overrides) -> SlideOutline:
    data = {"slide_number": 2, "slide_type": SlideType.market, "title": "Market Opportunity"}
    data.update(overrides)
    return SlideOutline(**data)


class TestClassifyShape:
    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"statistics": ["$4B", "40%"], "key_points": ["a", "b"]}, ContentShape.statistics),
            ({"statistics": ["$4B"]}, ContentShape.statistics),
            ({"visual_suggestions": ["market-map"], "key_points": ["a"]}, ContentShape.visual),
            ({"key_points": ["a", "b", "c"]}, ContentShape.bullets),
            ({"key_points": ["a", "b"]}, ContentShape.balanced),
            ({"key_points": ["a", "b", "c"], "statistics": ["40%"]}, ContentShape.balanced),
        ],
    )
    def test_dominant_shape(self, fields, expected):
        assert classify_shape(make_slide(**fields)) == expected

    def test_each_shape_has_an_archetype(self):
        assert set(ARCHETYPES) == set(ContentShape)


class TestBuildBlocks:
    def test_title_and_bullets_are_must_show(self):
        slide = make_slide(key_points=["Point one is here", "Point two is here"])
        blocks = build_blocks(slide, ContentShape.balanced, TOKENS)

        assert [b.id for b in blocks] == ["slide-2-title", "slide-2-bullets"]
        assert all(b.metadata.priority == Priority.must_show for b in blocks)
        assert blocks[1].content == slide.key_points

    def test_numeric_statistics_become_a_chart(self):
        slide = make_slide(key_points=["x" * 20], statistics=["$190 billion", "40%"])
        blocks = build_blocks(slide, ContentShape.statistics, TOKENS)
        chart = blocks[-1]

        assert chart.type == BlockType.chart
        assert isinstance(chart.content, ChartSpec)
        assert chart.content.statistics == ["$190 billion", "40%"]
        assert chart.metadata.priority == Priority.must_show
        assert chart.metadata.visual_weight == VisualWeight.heavy

    def test_single_statistic_becomes_a_table(self):
        slide = make_slide(key_points=["a", "b", "c"], statistics=["40%"])
        blocks = build_blocks(slide, ContentShape.balanced, TOKENS)
        table = blocks[-1]

        assert table.type == BlockType.table
        assert isinstance(table.content, TableSpec)
        assert table.content.rows == [["40%"]]
        assert table.metadata.priority == Priority.nice_to_have

    def test_visual_hints_become_requests(self):
        slide = make_slide(key_points=["a"], visual_suggestions=["market-map", "partner-logo"])
        blocks = build_blocks(slide, ContentShape.visual, TOKENS)
        image, logo = blocks[-2:]

        assert image.type == BlockType.image
        assert isinstance(image.content, VisualRequest)
        assert image.content.query == "market map Market Opportunity"
        assert logo.type == BlockType.logo
        assert image.metadata.priority == Priority.nice_to_have
        assert image.metadata.estimated_length == 0

    def test_title_slide_splits_subtitle(self):
        slide = make_slide(
            slide_number=1,
            slide_type=SlideType.title,
            title="Acme AI",
            key_points=["Books that balance themselves", "technology · seed"],
            visual_suggestions=["company-logo"],
        )
        blocks = build_blocks(slide, classify_shape(slide), TOKENS)
        by_type = {b.type: b for b in blocks}

        assert by_type[BlockType.subtitle].content == "Books that balance themselves"
        assert by_type[BlockType.subtitle].styling.color == TOKENS.colors.muted
        assert by_type[BlockType.title].styling.alignment == "center"
        assert by_type[BlockType.bullets].content == ["technology · seed"]
        assert BlockType.logo in by_type

    def test_blocks_do_not_depend_on_archetype_choice(self):
        slide = make_slide(key_points=["a", "b"], statistics=["40%"])

        shapes = [ContentShape.balanced, ContentShape.bullets, ContentShape.visual]
        contents = [[(b.id, b.content) for b in build_blocks(slide, shape, TOKENS)] for shape in shapes]
        assert contents[0] == contents[1] == contents[2]


class TestAssignLayouts:
    @pytest.mark.parametrize("audience", ["investors", "customers", "partners", "press"])
    def test_every_block_has_a_region_for_every_template(self, audience):
        profile = PitchDeckRequest.model_validate(
            {"companyName": "Acme AI", "targetAudience": audience, "revenue": "$1M", "specificTopics": ["pricing"]}
        ).to_profile()
        outline = build_outline(profile, InsightSet(market_size=["A $10 billion market growing 20% a year."]))

        assignments = assign_layouts(outline.slides, TOKENS)

        assert [a.slide_number for a in assignments] == [s.slide_number for s in outline.slides]
        for assignment in assignments:
            for block in assignment.blocks:
                assert assignment.archetype.region_for(block.type) is not None

    def test_assignment_carries_shape_and_archetype(self):
        assignment = assign_layout(make_slide(key_points=["a", "b", "c"]), TOKENS)

        assert assignment.shape == ContentShape.bullets
        assert assignment.archetype.id == "title-bullets"

    def test_unplaceable_block_raises(self):
        block = ContentBlock(
            id="slide-1-notes",
            type=BlockType.chart,
            content="orphan",
            metadata=BlockMetadata(priority=Priority.must_show, estimated_length=6, visual_weight=VisualWeight.heavy),
        )
        archetype = ARCHETYPES[ContentShape.statistics].model_copy(
            update={"visual": ARCHETYPES[ContentShape.statistics].visual.model_copy(update={"accepts": ()})}
        )

        with pytest.raises(CompositionInvariantError):
            assert_blocks_fit(archetype, [block], 1)

    def test_no_must_show_block_raises(self):
        block = ContentBlock(
            id="slide-1-image",
            type=BlockType.image,
            content=VisualRequest(hint="hero-image"),
            metadata=BlockMetadata(priority=Priority.nice_to_have, estimated_length=0, visual_weight=VisualWeight.heavy),
        )

        with pytest.raises(CompositionInvariantError):
            assert_blocks_fit(ARCHETYPES[ContentShape.visual], [block], 1)

    def test_empty_block_list_raises(self):
        with pytest.raises(CompositionInvariantError):
            assert_blocks_fit(ARCHETYPES[ContentShape.balanced], [], 3)
