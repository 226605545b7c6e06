"""Theme resolution and per-theme palettes shared by the adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .data_models import ThemeMode

DARK_THEME_PREFIX = "dark"


@dataclass(frozen=True)
class ChartPalette:
    """Colors used by a resolved theme."""

    background_color: str
    text_color: str
    grid_color: str
    series_colors: Tuple[str, ...]

    def color_for(self, index: int, explicit: Optional[str] = None) -> str:
        """Return ``explicit`` when set, else the palette color for series ``index``."""
        if explicit:
            return explicit
        return self.series_colors[index % len(self.series_colors)]


_SERIES_COLORS = (
    "#36a2eb",
    "#ff6384",
    "#4bc0c0",
    "#ff9f40",
    "#9966ff",
    "#ffcd56",
    "#c9cbcf",
)

LIGHT_PALETTE = ChartPalette(
    background_color="#ffffff",
    text_color="#212121",
    grid_color="#e9ecef",
    series_colors=_SERIES_COLORS,
)

DARK_PALETTE = ChartPalette(
    background_color="#1c1c1c",
    text_color="#e1e1e1",
    grid_color="#3a3a3a",
    series_colors=_SERIES_COLORS,
)


def resolve_theme(mode: ThemeMode, active_theme: Optional[str]) -> str:
    """Return ``"light"`` or ``"dark"`` for the configured mode."""
    if mode is ThemeMode.AUTO:
        if active_theme and active_theme.startswith(DARK_THEME_PREFIX):
            return ThemeMode.DARK.value
        return ThemeMode.LIGHT.value
    return mode.value


def palette_for(theme: str) -> ChartPalette:
    return DARK_PALETTE if theme == ThemeMode.DARK.value else LIGHT_PALETTE


__all__ = ["ChartPalette", "DARK_PALETTE", "LIGHT_PALETTE", "palette_for", "resolve_theme"]
