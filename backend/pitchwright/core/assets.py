"""
Visual asset resolution.

Image, logo and chart blocks leave the layout assigner holding unresolved
requests.  This stage turns each into a concrete ``ImageSearchResult`` or
inline ``SVGElement``; a block that cannot be resolved keeps its place and
gets an ``AssetPlaceholder`` instead.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Protocol

from pitchwright.core.concurrency import Deadline, gather_bounded
from pitchwright.core.config import settings
from pitchwright.core.errors import AssetResolutionError
from pitchwright.core.svg import bar_chart, data_points, diagram, is_diagram_hint
from pitchwright.schemas.assets import (
    AssetPlaceholder,
    ChartSpec,
    ImageSearchResult,
    SVGElement,
    VisualRequest,
)
from pitchwright.schemas.deck import VisualAssetsSummary
from pitchwright.schemas.design import DesignTokens
from pitchwright.schemas.layout import BlockType, ContentBlock, SlideAssignment
from pitchwright.schemas.request import BusinessProfile

logger = logging.getLogger(__name__)

RESOLVABLE = (BlockType.image, BlockType.logo, BlockType.chart)


class ImageSearcher(Protocol):
    async def search(self, query: str, count: int) -> list[ImageSearchResult]: ...


@dataclass
class AssetResolution:
    assignments: list[SlideAssignment]
    failures: list[str] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class VisualAssetResolver:
    def __init__(
        self,
        image_searcher: ImageSearcher,
        *,
        concurrency: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.image_searcher = image_searcher
        self.concurrency = concurrency if concurrency is not None else settings.ASSET_RESOLUTION_CONCURRENCY
        self.timeout = timeout if timeout is not None else settings.ASSET_RESOLUTION_TIMEOUT_SECONDS

    async def resolve_block(
        self,
        block: ContentBlock,
        profile: BusinessProfile,
        tokens: DesignTokens,
        labels: list[str],
    ) -> ImageSearchResult | SVGElement:
        content = block.content

        if block.type == BlockType.chart:
            if not isinstance(content, ChartSpec):
                raise AssetResolutionError(block.id, "chart block carries no chart spec")
            points = data_points(content.statistics)
            if not points:
                raise AssetResolutionError(block.id, "no numeric statistics to chart")
            return bar_chart(points, tokens, title=block.metadata.intent)

        if not isinstance(content, VisualRequest):
            raise AssetResolutionError(block.id, f"{block.type.value} block carries no visual request")

        if block.type == BlockType.image and is_diagram_hint(content.hint):
            return diagram(content.hint, labels, tokens)

        query = content.query or content.hint
        if block.type == BlockType.logo:
            query = f"{profile.company_name} logo"
        elif profile.industry:
            query = f"{query} {profile.industry}"

        results = await self.image_searcher.search(query, 1)
        if not results:
            raise AssetResolutionError(block.id, f"no image found for {query!r}")
        return results[0]

    async def resolve(
        self,
        assignments: list[SlideAssignment],
        profile: BusinessProfile,
        tokens: DesignTokens,
        deadline: Deadline | None = None,
    ) -> AssetResolution:
        """Resolve every visual block; returns new assignments, inputs untouched."""
        targets: list[tuple[int, int, ContentBlock, list[str]]] = []
        for slide_index, assignment in enumerate(assignments):
            labels = _diagram_labels(assignment)
            for block_index, block in enumerate(assignment.blocks):
                if block.type in RESOLVABLE:
                    targets.append((slide_index, block_index, block, labels))

        async def _resolve(target):
            _slide_index, _block_index, block, labels = target
            return await self.resolve_block(block, profile, tokens, labels)

        outcomes = await gather_bounded(
            targets,
            _resolve,
            limit=self.concurrency,
            item_timeout=self.timeout,
            deadline=deadline,
        )

        resolved = [list(a.blocks) for a in assignments]
        failures: list[str] = []
        for (slide_index, block_index, block, _labels), outcome in zip(targets, outcomes):
            if outcome.ok:
                content = outcome.value
            else:
                reason = "timed out" if outcome.timed_out else str(outcome.error)
                logger.warning("Asset for block %s unavailable: %s", block.id, reason)
                failures.append(block.id)
                hint = block.content.hint if isinstance(block.content, VisualRequest) else block.type.value
                content = AssetPlaceholder(hint=hint, reason=reason)
            resolved[slide_index][block_index] = block.model_copy(update={"content": content})

        return AssetResolution(
            assignments=[a.model_copy(update={"blocks": blocks}) for a, blocks in zip(assignments, resolved)],
            failures=failures,
        )


def _diagram_labels(assignment: SlideAssignment) -> list[str]:
    for block in assignment.blocks:
        if block.type == BlockType.bullets and isinstance(block.content, list):
            return [" ".join(point.split()[:3]) for point in block.content]
    return []


def summarize_visual_assets(blocks: list[ContentBlock]) -> VisualAssetsSummary:
    """Totals over image and chart blocks; logos appear only in the breakdown."""
    breakdown: Counter[str] = Counter()
    sources: Counter[str] = Counter()
    images = svgs = charts = 0

    for block in blocks:
        if block.type not in RESOLVABLE and block.type != BlockType.table:
            continue
        breakdown[block.type.value] += 1
        content = block.content
        if isinstance(content, ImageSearchResult):
            sources[content.source or "unknown"] += 1
        elif isinstance(content, AssetPlaceholder) and block.type != BlockType.chart:
            sources["unavailable"] += 1

        if block.type == BlockType.chart:
            charts += 1
        elif block.type == BlockType.image:
            if isinstance(content, SVGElement):
                svgs += 1
            else:
                images += 1

    return VisualAssetsSummary(
        total_images=images,
        total_svgs=svgs,
        total_charts=charts,
        breakdown=dict(breakdown),
        image_sources=dict(sources),
    )
