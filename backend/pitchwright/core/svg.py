"""
Inline SVG generation for charts and simple diagrams.

Everything here is pure string building; colours come from the deck's design
tokens so generated visuals match the theme.
"""

from __future__ import annotations

import html
import re

from pitchwright.schemas.assets import DataPoint, Dimensions, SVGElement
from pitchwright.schemas.design import DesignTokens

CHART_WIDTH = 400
CHART_HEIGHT = 300
CHART_MARGIN = 40

_NUMBER_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s*(?:(billion|million|thousand|bn|[mbk])(?![a-z]))?", re.I)
_MULTIPLIERS = {
    "billion": 1e9, "bn": 1e9, "b": 1e9,
    "million": 1e6, "m": 1e6,
    "thousand": 1e3, "k": 1e3,
}

DIAGRAM_KEYWORDS = ("diagram", "map", "timeline", "funnel", "matrix", "chart", "graph", "flow", "org")


def _x(text: str) -> str:
    return html.escape(text or "", quote=True)


def parse_numeric(text: str) -> float | None:
    """First number in *text*, scaled by a trailing magnitude word."""
    match = _NUMBER_RE.search(text or "")
    if not match:
        return None
    value = float(match.group(1).replace(",", ""))
    suffix = (match.group(2) or "").lower()
    return value * _MULTIPLIERS.get(suffix, 1.0)


def statistic_label(text: str) -> str:
    """Short label for a statistic: the words around its figure."""
    words = [w for w in re.sub(r"[\d$%,.]+", " ", text).split() if len(w) > 1]
    label = " ".join(words[:3])
    return label or text[:24]


def data_points(statistics: list[str]) -> list[DataPoint]:
    points = []
    for stat in statistics:
        value = parse_numeric(stat)
        if value is not None:
            points.append(DataPoint(label=statistic_label(stat), value=value, display=stat))
    return points


def is_diagram_hint(hint: str) -> bool:
    lowered = hint.lower()
    return any(keyword in lowered for keyword in DIAGRAM_KEYWORDS)


def bar_chart(points: list[DataPoint], tokens: DesignTokens, title: str = "") -> SVGElement:
    """Vertical bar chart scaled to the largest value."""
    if not points:
        raise ValueError("bar chart needs at least one data point")

    palette = tokens.chart_palette
    plot_w = CHART_WIDTH - 2 * CHART_MARGIN
    plot_h = CHART_HEIGHT - 2 * CHART_MARGIN
    slot = plot_w / len(points)
    bar_w = slot * 0.6
    peak = max(p.value for p in points) or 1.0

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {CHART_WIDTH} {CHART_HEIGHT}" '
        f'role="img" aria-label="{_x(title)}">',
        f'<line x1="{CHART_MARGIN}" y1="{CHART_HEIGHT - CHART_MARGIN}" '
        f'x2="{CHART_WIDTH - CHART_MARGIN}" y2="{CHART_HEIGHT - CHART_MARGIN}" '
        f'stroke="{tokens.colors.muted}" stroke-width="1"/>',
    ]
    for i, point in enumerate(points):
        h = max(1.0, plot_h * point.value / peak)
        x = CHART_MARGIN + i * slot + (slot - bar_w) / 2
        y = CHART_HEIGHT - CHART_MARGIN - h
        colour = palette[i % len(palette)]
        parts.append(
            f'<rect x="{x:.1f}" y="{y:.1f}" width="{bar_w:.1f}" height="{h:.1f}" '
            f'rx="2" fill="{colour}"/>'
        )
        parts.append(
            f'<text x="{x + bar_w / 2:.1f}" y="{y - 6:.1f}" text-anchor="middle" font-size="12" '
            f'fill="{tokens.colors.text}">{_x(point.display or str(point.value))}</text>'
        )
        parts.append(
            f'<text x="{x + bar_w / 2:.1f}" y="{CHART_HEIGHT - CHART_MARGIN + 16}" text-anchor="middle" '
            f'font-size="11" fill="{tokens.colors.muted}">{_x(point.label)}</text>'
        )
    parts.append("</svg>")

    return SVGElement(
        svg_type="chart",
        title=title,
        markup="".join(parts),
        data=points,
        style={"palette": ",".join(palette), "font": tokens.fonts.body},
        dimensions=Dimensions(width=CHART_WIDTH, height=CHART_HEIGHT),
    )


def diagram(hint: str, labels: list[str], tokens: DesignTokens) -> SVGElement:
    """Left-to-right box-and-arrow diagram, one box per label."""
    labels = [label for label in labels if label][:4] or [hint.replace("-", " ").title()]
    count = len(labels)
    box_w = (CHART_WIDTH - CHART_MARGIN * 2 - (count - 1) * 20) / count
    box_h = 80
    y = (CHART_HEIGHT - box_h) / 2

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {CHART_WIDTH} {CHART_HEIGHT}" '
        f'role="img" aria-label="{_x(hint)}">'
    ]
    for i, label in enumerate(labels):
        x = CHART_MARGIN + i * (box_w + 20)
        parts.append(
            f'<rect x="{x:.1f}" y="{y:.1f}" width="{box_w:.1f}" height="{box_h}" '
            f'rx="{tokens.borders.radius.removesuffix("px")}" fill="{tokens.colors.surface}" '
            f'stroke="{tokens.colors.primary}" stroke-width="2"/>'
        )
        parts.append(
            f'<text x="{x + box_w / 2:.1f}" y="{y + box_h / 2 + 4:.1f}" text-anchor="middle" '
            f'font-size="12" fill="{tokens.colors.text}">{_x(label[:28])}</text>'
        )
        if i < count - 1:
            ax = x + box_w
            parts.append(
                f'<line x1="{ax:.1f}" y1="{y + box_h / 2:.1f}" x2="{ax + 20:.1f}" y2="{y + box_h / 2:.1f}" '
                f'stroke="{tokens.colors.accent}" stroke-width="2"/>'
            )
    parts.append("</svg>")

    return SVGElement(
        svg_type="diagram",
        title=hint,
        markup="".join(parts),
        style={"stroke": tokens.colors.primary, "fill": tokens.colors.surface},
        dimensions=Dimensions(width=CHART_WIDTH, height=CHART_HEIGHT),
    )
