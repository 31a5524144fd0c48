"""Tests for the JSON, Markdown and HTML exports of a generated deck."""

import json

import pytest

from conftest import FakeImageSearcher, build_pipeline
from pitchwright.core.exporters import (
    EXPORTERS,
    export_deck,
    export_format,
    export_html,
    export_json,
    export_markdown,
    load_deck_json,
)


async def generate(request: dict, **collaborators):
    return await build_pipeline(**collaborators).generate(request)


class TestJsonExport:
    @pytest.mark.asyncio
    async def test_round_trip_preserves_structure(self, acme_request):
        deck = await generate(acme_request)

        loaded = load_deck_json(export_json(deck))

        assert loaded.model_dump(exclude={"export_formats"}) == deck.model_dump(exclude={"export_formats"})
        assert all(slide.design_tokens is loaded.design_tokens for slide in loaded.slides)

    @pytest.mark.asyncio
    async def test_export_formats_are_left_out(self, acme_request):
        deck = await generate(acme_request)

        payload = json.loads(export_json(deck))

        assert "exportFormats" not in payload
        assert payload["visualAssets"]["totalSVGs"] >= 0
        assert payload["slides"][0]["slideNumber"] == 1


class TestMarkdownExport:
    @pytest.mark.asyncio
    async def test_one_section_per_slide(self, acme_request):
        deck = await generate(acme_request)

        markdown = export_markdown(deck)

        assert markdown.startswith("# Acme AI - Investor Presentation")
        assert "## 1. Acme AI" in markdown
        assert markdown.count("\n## ") == len(deck.slides)
        assert "> Notes:" in markdown
        assert deck.outline.call_to_action in markdown

    @pytest.mark.asyncio
    async def test_missing_assets_are_marked(self, acme_request):
        deck = await generate(acme_request, image_searcher=FakeImageSearcher(fail=True))

        assert "asset unavailable]_" in export_markdown(deck)


class TestHtmlExport:
    @pytest.mark.asyncio
    async def test_single_stylesheet_and_every_slide(self, acme_request):
        deck = await generate(acme_request)

        html = export_html(deck)

        assert html.count("<style>") == 1
        assert html.count(":root") == 1
        assert html.count('<section class="slide') == len(deck.slides)
        assert "<title>Acme AI - Investor Presentation</title>" in html

    @pytest.mark.asyncio
    async def test_stylesheet_uses_the_deck_ratio(self, acme_request):
        deck = await generate({**acme_request, "slideAspectRatio": "4:3"})

        html = export_html(deck)

        assert "aspect-ratio: 1024 / 768;" in html
        assert "aspect-ratio: 1920 / 1080;" not in html

    @pytest.mark.asyncio
    async def test_title_is_escaped(self, acme_request):
        deck = await generate({**acme_request, "companyName": "Acme <AI>"})

        assert "<title>Acme &lt;AI&gt; - Investor Presentation</title>" in export_html(deck)


class TestRegistry:
    @pytest.mark.asyncio
    async def test_unavailable_formats_yield_none(self, acme_request):
        deck = await generate(acme_request)

        assert export_format(deck, "powerpoint") is None
        assert export_format(deck, "pdf") is None
        assert export_format(deck, "markdown") == export_markdown(deck)

    @pytest.mark.asyncio
    async def test_powerpoint_is_absent_from_serialized_exports(self, acme_request):
        deck = await generate(acme_request)

        dumped = export_deck(deck).model_dump(by_alias=True)

        assert set(dumped) == {"json", "markdown", "html"}

    def test_registry_names(self):
        assert set(EXPORTERS) == {"json", "markdown", "html", "powerpoint"}
