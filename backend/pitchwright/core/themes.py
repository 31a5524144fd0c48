"""
Design token catalog.

One ``DesignTokens`` instance per theme, built at import time.  Resolving a
theme returns that module-level instance, so every slide of a deck shares it.
"""

from __future__ import annotations

import logging

from pitchwright.core.errors import ValidationError
from pitchwright.schemas.design import (
    BorderTokens,
    ColorTokens,
    DesignTokens,
    FontTokens,
    ShadowTokens,
    SizeTokens,
    SpacingTokens,
)
from pitchwright.schemas.request import Theme

logger = logging.getLogger(__name__)


DESIGN_THEMES: dict[str, DesignTokens] = {
    Theme.modern.value: DesignTokens(
        theme=Theme.modern.value,
        colors=ColorTokens(
            primary="#3B82F6",
            secondary="#10B981",
            accent="#F59E0B",
            text="#1F2937",
            background="#FFFFFF",
            surface="#F3F4F6",
            muted="#6B7280",
        ),
        fonts=FontTokens(
            heading='"Inter", "Segoe UI", sans-serif',
            body='"Inter", "Segoe UI", sans-serif',
            mono='"JetBrains Mono", monospace',
        ),
        sizes=SizeTokens(h1="48px", h2="38px", h3="28px", body="24px", caption="16px", line_height=1.5),
        spacing=SpacingTokens(xs="8px", sm="16px", md="24px", lg="32px", xl="48px"),
        borders=BorderTokens(radius="8px", width="1px"),
        shadows=ShadowTokens(
            card="0 4px 6px rgba(0, 0, 0, 0.1)",
            elevated="0 10px 25px rgba(0, 0, 0, 0.15)",
        ),
    ),
    Theme.corporate.value: DesignTokens(
        theme=Theme.corporate.value,
        colors=ColorTokens(
            primary="#1E3A8A",
            secondary="#064E3B",
            accent="#DC2626",
            text="#0F172A",
            background="#F8FAFC",
            surface="#E2E8F0",
            muted="#475569",
        ),
        fonts=FontTokens(
            heading='"Roboto", "Arial", sans-serif',
            body='"Roboto", "Arial", sans-serif',
            mono='"Courier New", monospace',
        ),
        sizes=SizeTokens(h1="44px", h2="38px", h3="32px", body="22px", caption="18px", line_height=1.6),
        spacing=SpacingTokens(xs="12px", sm="20px", md="28px", lg="36px", xl="52px"),
        borders=BorderTokens(radius="4px", width="2px"),
        shadows=ShadowTokens(
            card="0 2px 4px rgba(0, 0, 0, 0.1)",
            elevated="0 8px 16px rgba(0, 0, 0, 0.15)",
        ),
    ),
    Theme.startup.value: DesignTokens(
        theme=Theme.startup.value,
        colors=ColorTokens(
            primary="#7C3AED",
            secondary="#EC4899",
            accent="#F97316",
            text="#111827",
            background="#FEFEFE",
            surface="#F5F3FF",
            muted="#9CA3AF",
        ),
        fonts=FontTokens(
            heading='"Poppins", "Helvetica", sans-serif',
            body='"Poppins", "Helvetica", sans-serif',
            mono='"Fira Code", monospace',
        ),
        sizes=SizeTokens(h1="52px", h2="40px", h3="30px", body="26px", caption="17px", line_height=1.4),
        spacing=SpacingTokens(xs="6px", sm="14px", md="22px", lg="30px", xl="44px"),
        borders=BorderTokens(radius="12px", width="3px"),
        shadows=ShadowTokens(
            card="0 6px 12px rgba(124, 58, 237, 0.15)",
            elevated="0 12px 24px rgba(124, 58, 237, 0.2)",
        ),
    ),
    Theme.creative.value: DesignTokens(
        theme=Theme.creative.value,
        colors=ColorTokens(
            primary="#E11D48",
            secondary="#0EA5E9",
            accent="#FACC15",
            text="#18181B",
            background="#FFFBEB",
            surface="#FEF3C7",
            muted="#71717A",
        ),
        fonts=FontTokens(
            heading='"Playfair Display", "Georgia", serif',
            body='"Lato", "Helvetica", sans-serif',
            mono='"IBM Plex Mono", monospace',
        ),
        sizes=SizeTokens(h1="56px", h2="42px", h3="30px", body="24px", caption="16px", line_height=1.5),
        spacing=SpacingTokens(xs="8px", sm="16px", md="26px", lg="36px", xl="56px"),
        borders=BorderTokens(radius="16px", width="2px"),
        shadows=ShadowTokens(
            card="0 6px 14px rgba(225, 29, 72, 0.12)",
            elevated="0 14px 30px rgba(225, 29, 72, 0.18)",
        ),
    ),
}


def resolve_theme(name: str | Theme) -> DesignTokens:
    """Look up the tokens for *name*.  Unknown names are rejected, never defaulted."""
    key = name.value if isinstance(name, Theme) else str(name)
    try:
        return DESIGN_THEMES[key]
    except KeyError:
        raise ValidationError(
            f"Unknown theme {key!r}",
            details={"allowed": sorted(DESIGN_THEMES)},
        ) from None


def px(value: str) -> int:
    """Pixel count of a token size such as ``"24px"``."""
    return int(float(value.removesuffix("px")))


def font_scale(tokens: DesignTokens) -> set[str]:
    sizes = tokens.sizes
    return {sizes.h1, sizes.h2, sizes.h3, sizes.body, sizes.caption}
