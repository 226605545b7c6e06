"""Resolve the backend-agnostic render options for a card configuration."""

from __future__ import annotations

from typing import Optional

from ..axis_mapper import AxisMapping, build_axis_layout
from ..config.card_config import CardConfig
from ..data_models import ChartOptions
from ..theme import resolve_theme


def build_chart_options(
    config: CardConfig, mapping: AxisMapping, active_theme: Optional[str] = None
) -> ChartOptions:
    """Build ``ChartOptions`` once per configuration; live data plays no part."""
    return ChartOptions(
        kind=config.chart_type,
        axes=build_axis_layout(config, mapping),
        stacked=config.stacked,
        show_legend=config.show_legend,
        show_tooltip=config.show_tooltip,
        show_grid=config.show_grid,
        animate=config.animate,
        theme=resolve_theme(config.theme, active_theme),
        height=config.height,
        title=config.title,
    )
