"""
Outline building: insights + profile → ordered slide outlines.

A fixed narrative template is chosen from the target audience and funding
stage.  Sparse insights never remove slides; empty slides get placeholder
prompts instead.  Specific topics the template does not already cover are
appended as custom slides, in the order the user gave them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from pitchwright.schemas.insights import InsightCategory, InsightSet
from pitchwright.schemas.outline import DeckNarrative, PitchDeckOutline, SlideOutline, SlideType
from pitchwright.schemas.request import BusinessProfile

logger = logging.getLogger(__name__)

MIN_SUBSTANTIVE_SLIDES = 4
MAX_KEY_POINTS = 4
MAX_STATISTICS = 4
KEY_POINT_MIN_LENGTH = 12
KEY_POINT_MAX_LENGTH = 200


class Audience(str, Enum):
    investor = "investor"
    customer = "customer"
    partner = "partner"
    general = "general"


class Stage(str, Enum):
    early = "early"
    growth = "growth"


@dataclass(frozen=True)
class TemplateSlide:
    slide_type: SlideType
    title: str
    category: InsightCategory | None
    visuals: tuple[str, ...] = ()
    placeholders: tuple[str, ...] = field(default_factory=tuple)


_TITLE = TemplateSlide(SlideType.title, "Company Introduction", None, ("company-logo",))
_PROBLEM = TemplateSlide(
    SlideType.problem, "The Problem", InsightCategory.problem_statement, (),
    ("Describe the core problem your customers face", "Explain who feels this pain and how often"),
)
_SOLUTION = TemplateSlide(
    SlideType.solution, "Our Solution", InsightCategory.solution, ("solution-diagram",),
    ("Explain how the product solves the problem", "Highlight what makes the approach different"),
)
_MARKET = TemplateSlide(
    SlideType.market, "Market Opportunity", InsightCategory.market_size, ("market-map",),
    ("Size the total addressable market", "Name the segment you will win first"),
)
_PRODUCT = TemplateSlide(
    SlideType.product, "Product Overview", InsightCategory.solution, ("product-screenshot",),
    ("Walk through the key product features", "Show the core user workflow"),
)
_BUSINESS_MODEL = TemplateSlide(
    SlideType.business_model, "Business Model", InsightCategory.business_model, ("revenue-flow-diagram",),
    ("Explain how the company makes money", "Outline pricing and unit economics"),
)
_TRACTION = TemplateSlide(
    SlideType.traction, "Traction & Validation", InsightCategory.traction, ("growth-chart",),
    ("Share early customers, pilots or usage numbers", "List milestones reached so far"),
)
_COMPETITION = TemplateSlide(
    SlideType.competition, "Competitive Landscape", InsightCategory.competitive_advantage, ("positioning-matrix",),
    ("Map the main competitors", "State the defensible advantage"),
)
_GO_TO_MARKET = TemplateSlide(
    SlideType.go_to_market, "Go-to-Market Strategy", InsightCategory.target_market, ("acquisition-funnel",),
    ("Describe the target customer segments", "Explain the acquisition channels"),
)
_FINANCIALS = TemplateSlide(
    SlideType.financials, "Financial Projections", InsightCategory.financial_projections, ("revenue-chart",),
    ("Project revenue for the next three years", "State the key financial assumptions"),
)
_TEAM = TemplateSlide(
    SlideType.team, "Team", InsightCategory.team_credentials, (),
    ("Introduce the founders and their background", "Name the key hires still to make"),
)
_ASK = TemplateSlide(
    SlideType.funding_ask, "The Ask", InsightCategory.financial_projections, ("use-of-funds-chart",),
    ("State the amount being raised", "Break down the use of funds"),
)
_BENEFITS = TemplateSlide(
    SlideType.benefits, "Why It Matters to You", InsightCategory.competitive_advantage, (),
    ("List the top benefits for the customer", "Quantify time or money saved"),
)
_PROOF = TemplateSlide(
    SlideType.proof, "Proof It Works", InsightCategory.traction, ("customer-logos",),
    ("Share a customer story", "Show results achieved by existing users"),
)
_VISION = TemplateSlide(
    SlideType.vision, "Where We Are Going", InsightCategory.industry_trends, ("hero-image",),
    ("Describe the long-term vision", "Explain the next milestone"),
)

NARRATIVE_TEMPLATES: dict[tuple[Audience, Stage | None], tuple[TemplateSlide, ...]] = {
    (Audience.investor, Stage.early): (
        _TITLE, _PROBLEM, _SOLUTION, _MARKET, _PRODUCT, _BUSINESS_MODEL, _TRACTION, _TEAM, _ASK,
    ),
    (Audience.investor, Stage.growth): (
        _TITLE, _PROBLEM, _SOLUTION, _TRACTION, _MARKET, _BUSINESS_MODEL, _COMPETITION, _FINANCIALS, _TEAM, _ASK,
    ),
    (Audience.customer, None): (
        _TITLE, _PROBLEM, _PRODUCT, _BENEFITS, _PROOF, _COMPETITION, _VISION,
    ),
    (Audience.partner, None): (
        _TITLE, _MARKET, _SOLUTION, _BUSINESS_MODEL, _GO_TO_MARKET, _TRACTION, _TEAM, _VISION,
    ),
    (Audience.general, None): (
        _TITLE, _PROBLEM, _SOLUTION, _MARKET, _PRODUCT, _TRACTION, _TEAM, _VISION,
    ),
}

# Used only if a template ever yields too few substantive slides
RESERVE_SLIDES: tuple[TemplateSlide, ...] = (_PROBLEM, _SOLUTION, _MARKET, _TEAM, _TRACTION)

_WORD_RE = re.compile(r"[a-z0-9]+")

_STAT_PATTERNS = (
    re.compile(r"\$\s?\d[\d,.]*\s?(?:billion|million|thousand|bn|[mbk])?\b", re.I),
    re.compile(r"\b\d+(?:\.\d+)?\s?%"),
    re.compile(r"\b\d+(?:\.\d+)?x\b", re.I),
    re.compile(r"\b\d[\d,]*(?:\.\d+)?\+?\s(?:users|customers|clients|companies|downloads|employees|countries)\b", re.I),
)

_AUDIENCE_LABELS = {
    Audience.investor: "Investor",
    Audience.customer: "Customer",
    Audience.partner: "Partner",
    Audience.general: "Company",
}


def normalize_audience(value: str | None) -> Audience:
    text = (value or "").lower()
    if "investor" in text or text in ("vc", "vcs", "angels"):
        return Audience.investor
    if "customer" in text or "client" in text or "buyer" in text:
        return Audience.customer
    if "partner" in text:
        return Audience.partner
    if not text:
        return Audience.investor
    return Audience.general


def normalize_stage(value: str | None) -> Stage:
    text = (value or "").lower().replace("_", " ").replace("-", " ")
    if "series" in text or "growth" in text or "ipo" in text or "late" in text:
        return Stage.growth
    return Stage.early


def select_template(profile: BusinessProfile) -> tuple[TemplateSlide, ...]:
    audience = normalize_audience(profile.target_audience)
    stage = normalize_stage(profile.funding_stage) if audience == Audience.investor else None
    return NARRATIVE_TEMPLATES[(audience, stage)]


def extract_statistics(snippets: list[str]) -> list[str]:
    stats: list[str] = []
    seen: set[str] = set()
    text = " ".join(snippets)
    for pattern in _STAT_PATTERNS:
        for match in pattern.finditer(text):
            value = match.group(0).strip().rstrip(".,")
            if value.lower() not in seen:
                seen.add(value.lower())
                stats.append(value)
    return stats[:MAX_STATISTICS]


def select_key_points(snippets: list[str]) -> list[str]:
    points = []
    for snippet in snippets:
        snippet = snippet.strip()
        if KEY_POINT_MIN_LENGTH <= len(snippet) <= KEY_POINT_MAX_LENGTH and snippet not in points:
            points.append(snippet)
    return points[:MAX_KEY_POINTS]


def _normalize_heading(text: str) -> str:
    return " ".join(_WORD_RE.findall(text.lower()))


def topic_is_covered(topic: str, slides: list[SlideOutline]) -> bool:
    """True when a non-title slide's title or type already names *topic*.

    The topic must equal the heading or appear in it as whole words; a topic
    that merely mentions a slide's subject ("Solution architecture") is not
    covered by that slide.
    """
    needle = f" {_normalize_heading(topic)} "
    if not needle.strip():
        return True
    for slide in slides:
        if slide.slide_type == SlideType.title:
            continue
        for heading in (slide.title, slide.slide_type.value):
            if needle in f" {_normalize_heading(heading)} ":
                logger.debug("Topic %r covered by slide %r", topic, slide.title)
                return True
    return False


def _profile_statistics(slide_type: SlideType, profile: BusinessProfile) -> list[str]:
    if slide_type in (SlideType.traction, SlideType.financials, SlideType.proof) and profile.revenue:
        return [f"{profile.revenue} revenue"]
    if slide_type == SlideType.funding_ask and profile.funding_amount:
        return [f"{profile.funding_amount} raise"]
    return []


def _speaker_notes(title: str, key_points: list[str]) -> str:
    if not key_points:
        return f"Introduce {title}."
    return f"{title}: " + " ".join(point.rstrip(".") + "." for point in key_points)


def _build_slide(template: TemplateSlide, profile: BusinessProfile, insights: InsightSet, subtitle: str) -> SlideOutline:
    if template.slide_type == SlideType.title:
        key_points = [subtitle]
        if profile.industry:
            stage = f" · {profile.funding_stage}" if profile.funding_stage else ""
            key_points.append(f"{profile.industry}{stage}")
        return SlideOutline(
            slide_number=1,
            slide_type=SlideType.title,
            title=profile.company_name,
            key_points=key_points,
            visual_suggestions=list(template.visuals),
            speaker_notes=f"Open with who {profile.company_name} is and why it matters.",
        )

    snippets = insights.get(template.category) if template.category else []
    key_points = select_key_points(snippets) or list(template.placeholders)
    statistics = (_profile_statistics(template.slide_type, profile) + extract_statistics(snippets))[:MAX_STATISTICS]

    return SlideOutline(
        slide_number=1,
        slide_type=template.slide_type,
        title=template.title,
        key_points=key_points,
        statistics=statistics,
        visual_suggestions=list(template.visuals),
        speaker_notes=_speaker_notes(template.title, key_points),
    )


def _custom_slide(topic: str, insights: InsightSet) -> SlideOutline:
    words = [w for w in re.findall(r"\w+", topic.lower()) if len(w) > 3]
    matches: list[str] = []
    for category in InsightCategory:
        for snippet in insights.get(category):
            lowered = snippet.lower()
            if words and any(w in lowered for w in words) and snippet not in matches:
                matches.append(snippet)
    key_points = select_key_points(matches) or [f"Key facts about {topic}", f"Why {topic} matters for the business"]
    title = topic[:1].upper() + topic[1:]
    return SlideOutline(
        slide_number=1,
        slide_type=SlideType.custom,
        title=title,
        key_points=key_points,
        statistics=extract_statistics(matches),
        speaker_notes=_speaker_notes(title, key_points),
    )


def renumber(slides: list[SlideOutline]) -> list[SlideOutline]:
    """Assign contiguous 1-based slide numbers in list order."""
    return [slide.model_copy(update={"slide_number": i}) for i, slide in enumerate(slides, start=1)]


def default_narrative(profile: BusinessProfile, insights: InsightSet) -> DeckNarrative:
    industry = profile.industry or "its market"
    company = profile.company_name

    solutions = insights.solution
    if solutions:
        first = solutions[0]
        subtitle = first[:80] + ("..." if len(first) > 80 else "")
    else:
        subtitle = f"Rethinking {industry}"

    summary_parts = [
        *insights.problem_statement[:1],
        *insights.solution[:1],
        *insights.market_size[:1],
        *insights.traction[:1],
    ]
    if summary_parts:
        executive_summary = " ".join(part.rstrip(".") + "." for part in summary_parts)
    else:
        executive_summary = (
            f"{company} addresses a significant opportunity in {industry} with an innovative "
            f"solution and is ready for the next stage of growth."
        )

    overview_parts = [p for p in (profile.description, *insights.solution[:1], *insights.target_market[:1]) if p]
    company_overview = " ".join(dict.fromkeys(overview_parts)) or (
        f"{company} is a {profile.business_type or industry} company focused on delivering "
        f"innovative solutions to its market."
    )

    call_to_action = (
        f"Join {company} in reshaping {industry}. Let's discuss how you can be part of our growth story."
    )
    return DeckNarrative(
        subtitle=subtitle,
        executive_summary=executive_summary,
        company_overview=company_overview,
        call_to_action=call_to_action,
    )


def build_outline(
    profile: BusinessProfile,
    insights: InsightSet,
    narrative: DeckNarrative | None = None,
) -> PitchDeckOutline:
    """Build the ordered outline; pure, no I/O."""
    fallback = default_narrative(profile, insights)
    narrative = narrative or fallback
    subtitle = narrative.subtitle or fallback.subtitle

    template = select_template(profile)
    slides = [_build_slide(t, profile, insights, subtitle) for t in template]

    substantive = [s for s in slides if s.slide_type != SlideType.title]
    if len(substantive) < MIN_SUBSTANTIVE_SLIDES:
        present = {s.slide_type for s in slides}
        for reserve in RESERVE_SLIDES:
            if len(substantive) >= MIN_SUBSTANTIVE_SLIDES:
                break
            if reserve.slide_type not in present:
                slide = _build_slide(reserve, profile, insights, subtitle)
                slides.append(slide)
                substantive.append(slide)

    for topic in profile.specific_topics:
        if not topic_is_covered(topic, slides):
            slides.append(_custom_slide(topic, insights))

    slides = renumber(slides)
    audience = normalize_audience(profile.target_audience)

    outline = PitchDeckOutline(
        title=f"{profile.company_name} - {_AUDIENCE_LABELS[audience]} Presentation",
        subtitle=subtitle,
        executive_summary=narrative.executive_summary or fallback.executive_summary,
        company_overview=narrative.company_overview or fallback.company_overview,
        call_to_action=narrative.call_to_action or fallback.call_to_action,
        slides=slides,
    )
    logger.info("Outline built for %s: %d slide(s)", profile.company_name, len(slides))
    return outline
