"""
Design tokens: the theme-wide visual vocabulary of one deck.

All token models are frozen.  A deck resolves its tokens once and hands the
same instance to every slide.
"""

from __future__ import annotations

from pydantic import ConfigDict

from pitchwright.schemas.common import CamelModel


class _Frozen(CamelModel):
    model_config = ConfigDict(frozen=True)


class ColorTokens(_Frozen):
    primary: str
    secondary: str
    accent: str
    text: str
    background: str
    surface: str
    muted: str


class FontTokens(_Frozen):
    heading: str
    body: str
    mono: str


class SizeTokens(_Frozen):
    h1: str
    h2: str
    h3: str
    body: str
    caption: str
    line_height: float = 1.5


class SpacingTokens(_Frozen):
    xs: str
    sm: str
    md: str
    lg: str
    xl: str


class BorderTokens(_Frozen):
    radius: str
    width: str


class ShadowTokens(_Frozen):
    card: str
    elevated: str


class DesignTokens(_Frozen):
    theme: str
    colors: ColorTokens
    fonts: FontTokens
    sizes: SizeTokens
    spacing: SpacingTokens
    borders: BorderTokens
    shadows: ShadowTokens

    def to_css_vars(self) -> str:
        """Render as CSS custom property declarations."""
        c, f, s, sp, b, sh = (
            self.colors, self.fonts, self.sizes, self.spacing, self.borders, self.shadows,
        )
        return f"""\
  --color-primary: {c.primary};
  --color-secondary: {c.secondary};
  --color-accent: {c.accent};
  --color-text: {c.text};
  --color-background: {c.background};
  --color-surface: {c.surface};
  --color-muted: {c.muted};
  --font-heading: {f.heading};
  --font-body: {f.body};
  --font-mono: {f.mono};
  --size-h1: {s.h1};
  --size-h2: {s.h2};
  --size-h3: {s.h3};
  --size-body: {s.body};
  --size-caption: {s.caption};
  --line-height: {s.line_height};
  --spacing-xs: {sp.xs};
  --spacing-sm: {sp.sm};
  --spacing-md: {sp.md};
  --spacing-lg: {sp.lg};
  --spacing-xl: {sp.xl};
  --border-radius: {b.radius};
  --border-width: {b.width};
  --shadow-card: {sh.card};
  --shadow-elevated: {sh.elevated};"""

    @property
    def chart_palette(self) -> list[str]:
        return [self.colors.primary, self.colors.secondary, self.colors.accent, self.colors.muted]
