"""Tests for template selection and outline building."""

import pytest

from pitchwright.core.outline import (
    Audience,
    Stage,
    build_outline,
    extract_statistics,
    normalize_audience,
    normalize_stage,
    select_key_points,
)
from pitchwright.schemas.insights import InsightSet
from pitchwright.schemas.outline import DeckNarrative, SlideType
from pitchwright.schemas.request import PitchDeckRequest


def make_profile(**overrides):
    data = {"companyName": "Acme AI", "industry": "technology"}
    data.update(overrides)
    return PitchDeckRequest.model_validate(data).to_profile()


def slide_types(outline):
    return [s.slide_type.value for s in outline.slides]


class TestTemplateSelection:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("investors", Audience.investor),
            ("Angel Investors", Audience.investor),
            ("enterprise customers", Audience.customer),
            ("channel partners", Audience.partner),
            ("board members", Audience.general),
            (None, Audience.investor),
            ("", Audience.investor),
        ],
    )
    def test_normalize_audience(self, value, expected):
        assert normalize_audience(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("seed", Stage.early), ("pre-seed", Stage.early), ("Series A", Stage.growth), ("growth", Stage.growth), (None, Stage.early)],
    )
    def test_normalize_stage(self, value, expected):
        assert normalize_stage(value) == expected

    def test_early_investor_template(self):
        outline = build_outline(make_profile(targetAudience="investors", fundingStage="seed"), InsightSet())

        assert slide_types(outline) == [
            "title", "problem", "solution", "market", "product",
            "business-model", "traction", "team", "funding-ask",
        ]
        assert outline.title == "Acme AI - Investor Presentation"

    def test_growth_investor_template_leads_with_traction(self):
        outline = build_outline(make_profile(targetAudience="investors", fundingStage="Series B"), InsightSet())

        types = slide_types(outline)
        assert types.index("traction") < types.index("market")
        assert "financials" in types
        assert "competition" in types

    def test_customer_template_has_no_funding_ask(self):
        outline = build_outline(make_profile(targetAudience="customers"), InsightSet())

        assert "funding-ask" not in slide_types(outline)
        assert outline.title == "Acme AI - Customer Presentation"

    def test_unknown_audience_uses_general_template(self):
        outline = build_outline(make_profile(targetAudience="journalists"), InsightSet())

        assert slide_types(outline)[-1] == "vision"
        assert outline.title == "Acme AI - Company Presentation"


class TestSlides:
    def test_sparse_insights_keep_every_slide_with_placeholders(self):
        outline = build_outline(make_profile(), InsightSet())

        assert len(outline.slides) >= 5
        for slide in outline.slides:
            assert slide.key_points, slide.slide_type

    def test_numbering_is_contiguous(self):
        outline = build_outline(make_profile(specificTopics=["pricing", "hiring plan"]), InsightSet())

        assert [s.slide_number for s in outline.slides] == list(range(1, len(outline.slides) + 1))

    def test_title_slide_carries_company_and_subtitle(self):
        outline = build_outline(make_profile(fundingStage="seed"), InsightSet())
        title = outline.slides[0]

        assert title.slide_type == SlideType.title
        assert title.title == "Acme AI"
        assert title.key_points == [outline.subtitle, "technology · seed"]
        assert title.visual_suggestions == ["company-logo"]

    def test_insights_become_key_points_and_statistics(self):
        insights = InsightSet(market_size=["The global AI market will reach $190 billion by 2025, growing 37% a year."])
        outline = build_outline(make_profile(), insights)
        market = next(s for s in outline.slides if s.slide_type == SlideType.market)

        assert market.key_points == insights.market_size
        assert market.statistics == ["$190 billion", "37%"]

    def test_profile_revenue_appears_on_traction(self):
        outline = build_outline(make_profile(revenue="$2M ARR"), InsightSet())
        traction = next(s for s in outline.slides if s.slide_type == SlideType.traction)

        assert traction.statistics[0] == "$2M ARR revenue"

    def test_funding_amount_appears_on_the_ask(self):
        outline = build_outline(make_profile(fundingAmount="$3M"), InsightSet())

        assert outline.slides[-1].slide_type == SlideType.funding_ask
        assert outline.slides[-1].statistics[0] == "$3M raise"


class TestSpecificTopics:
    def test_uncovered_topics_are_appended_in_order(self):
        outline = build_outline(make_profile(specificTopics=["pricing strategy", "hiring plan"]), InsightSet())

        assert [s.title for s in outline.slides[-2:]] == ["Pricing strategy", "Hiring plan"]
        assert all(s.slide_type == SlideType.custom for s in outline.slides[-2:])

    def test_covered_topic_adds_no_slide(self):
        baseline = build_outline(make_profile(), InsightSet())
        outline = build_outline(make_profile(specificTopics=["team"]), InsightSet())

        assert len(outline.slides) == len(baseline.slides)

    def test_topic_mentioning_a_slide_subject_gets_its_own_slide(self):
        topics = ["Solution architecture", "Problems with regulation"]
        outline = build_outline(make_profile(specificTopics=topics), InsightSet())

        assert [s.title for s in outline.slides[-2:]] == topics
        assert all(s.slide_type == SlideType.custom for s in outline.slides[-2:])

    @pytest.mark.parametrize("topic", ["problem", "The Problem", "market", "Market Opportunity", "product-overview"])
    def test_topic_named_by_a_slide_heading_is_covered(self, topic):
        baseline = build_outline(make_profile(), InsightSet())
        outline = build_outline(make_profile(specificTopics=[topic]), InsightSet())

        assert len(outline.slides) == len(baseline.slides)

    def test_company_name_topic_is_not_covered_by_title_slide(self):
        outline = build_outline(make_profile(specificTopics=["Acme AI roadmap"]), InsightSet())

        assert outline.slides[-1].title == "Acme AI roadmap"

    def test_custom_slide_pulls_matching_insights(self):
        insights = InsightSet(business_model=["Pricing starts at $49 per seat per month for small teams."])
        outline = build_outline(make_profile(specificTopics=["pricing"]), insights)
        custom = outline.slides[-1]

        assert custom.key_points == insights.business_model
        assert custom.statistics == ["$49"]


class TestNarrative:
    def test_defaults_are_derived_from_insights(self):
        insights = InsightSet(solution=["An AI copilot for bookkeeping."], problem_statement=["Books are a mess."])
        outline = build_outline(make_profile(), insights)

        assert outline.subtitle == "An AI copilot for bookkeeping."
        assert outline.executive_summary.startswith("Books are a mess.")
        assert "Acme AI" in outline.call_to_action

    def test_writer_output_overrides_defaults_field_by_field(self):
        narrative = DeckNarrative(subtitle="Books that balance themselves")
        outline = build_outline(make_profile(), InsightSet(), narrative)

        assert outline.subtitle == "Books that balance themselves"
        assert outline.slides[0].key_points[0] == "Books that balance themselves"
        assert outline.executive_summary
        assert outline.company_overview

    def test_outline_is_deterministic(self):
        profile = make_profile(specificTopics=["pricing"])
        insights = InsightSet(traction=["Over 10,000 users signed up in the pilot."])

        assert build_outline(profile, insights) == build_outline(profile, insights)


class TestHelpers:
    def test_extract_statistics_pattern_order_and_cap(self):
        text = ["Reached 10,000 users, 3x growth, 40% margins and a $190 billion market; 25% churn drop."]

        assert extract_statistics(text) == ["$190 billion", "40%", "25%", "3x"]

    def test_extract_statistics_dedupes(self):
        assert extract_statistics(["Up 40%.", "Another 40% gain."]) == ["40%"]

    def test_select_key_points_length_bounds(self):
        points = select_key_points(["short", "A point of reasonable length.", "x" * 201])

        assert points == ["A point of reasonable length."]
