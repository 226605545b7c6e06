"""Helpers assembling chart options and series for ``ChartCard``."""

from .options_builder import build_chart_options
from .series_builder import build_series, empty_series

__all__ = ["build_chart_options", "build_series", "empty_series"]
