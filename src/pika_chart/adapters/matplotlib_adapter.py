from __future__ import annotations

"""Canvas-grid backend drawing onto an Agg-backed matplotlib figure."""


import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import matplotlib.dates as mdates
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from ..data_models import AxisBounds, AxisSlot, ChartKind, ChartOptions, Series
from ..data_transformer_helpers.value_parsing import parse_timestamp
from ..render_adapter import ChartSurface, RenderAdapter, stack_offsets

logger = logging.getLogger(__name__)

DPI = 100
AREA_ALPHA = 0.3
BAR_WIDTH_FRACTION = 0.8
DEFAULT_BAR_WIDTH_DAYS = 1.0 / 24.0
LINE_WIDTH = 2
SCATTER_SIZE = 12


def bar_width_days(x_values: Sequence[float]) -> float:
    """Width of one bar: a fraction of the tightest spacing between points."""
    if len(x_values) < 2:
        return DEFAULT_BAR_WIDTH_DAYS
    gaps = np.diff(np.asarray(x_values, dtype=float))
    gaps = gaps[gaps > 0]
    if gaps.size == 0:
        return DEFAULT_BAR_WIDTH_DAYS
    return float(gaps.min()) * BAR_WIDTH_FRACTION


class MatplotlibAdapter(RenderAdapter):
    """Renders series with matplotlib; the secondary slot is a ``twinx`` axes."""

    SUPPORTED_KINDS = frozenset(
        {ChartKind.LINE, ChartKind.BAR, ChartKind.AREA, ChartKind.SCATTER, ChartKind.STEP}
    )
    KIND_SUBSTITUTES = {ChartKind.PIE: ChartKind.BAR, ChartKind.RADAR: ChartKind.LINE}

    def __init__(self) -> None:
        super().__init__()
        self.canvas: Optional[FigureCanvasAgg] = None
        self.primary_axes: Any = None
        self.secondary_axes: Any = None

    def _create_figure(self, surface: ChartSurface, options: ChartOptions) -> Figure:
        assert self.palette is not None
        figure = Figure(
            figsize=(surface.width / DPI, options.height / DPI),
            dpi=DPI,
            facecolor=self.palette.background_color,
        )
        self.canvas = FigureCanvasAgg(figure)
        if not options.show_tooltip or not options.animate:
            logger.debug("Tooltip and animation flags have no effect on static matplotlib output")
        return figure

    def _draw(self, series: Tuple[Series, ...]) -> None:
        assert self.options is not None and self.palette is not None
        figure = self.figure
        figure.clear()
        ax = figure.add_subplot(111)
        ax2 = ax.twinx() if any(item.axis_ref is AxisSlot.SECONDARY for item in series) else None
        self.primary_axes, self.secondary_axes = ax, ax2

        offsets = stack_offsets(series) if self.options.stacked else None
        for index, item in enumerate(series):
            if not item.show or item.is_empty:
                continue
            target = ax2 if item.axis_ref is AxisSlot.SECONDARY and ax2 is not None else ax
            baseline = np.asarray(offsets[index] if offsets else [0.0] * len(item.data), dtype=float)
            self._plot_series(target, item, baseline, self.palette.color_for(index, item.color))

        self._style_axes(ax, ax2)
        self.canvas.draw()

    def _plot_series(self, ax, item: Series, baseline: np.ndarray, color: str) -> None:
        x_values = mdates.date2num([point.x for point in item.data])
        values = np.asarray([point.y for point in item.data], dtype=float)
        label = f"{item.name} ({item.unit})" if item.unit else item.name
        kind = self.kind_for(item)

        if kind is ChartKind.BAR:
            ax.bar(
                x_values,
                values,
                bottom=baseline,
                width=bar_width_days(x_values),
                color=color,
                alpha=0.8,
                label=label,
            )
        elif kind is ChartKind.SCATTER:
            ax.scatter(x_values, values + baseline, s=SCATTER_SIZE, color=color, label=label)
        elif kind is ChartKind.STEP:
            ax.step(x_values, values + baseline, where="post", color=color, linewidth=LINE_WIDTH, label=label)
        elif kind is ChartKind.AREA:
            ax.fill_between(x_values, baseline, values + baseline, alpha=AREA_ALPHA, color=color)
            ax.plot(x_values, values + baseline, color=color, linewidth=LINE_WIDTH, label=label)
        else:
            ax.plot(x_values, values + baseline, color=color, linewidth=LINE_WIDTH, label=label)

    def _style_axes(self, ax, ax2) -> None:
        options = self.options
        palette = self.palette
        ax.set_facecolor(palette.background_color)
        for axes in (ax, ax2):
            if axes is None:
                continue
            axes.tick_params(colors=palette.text_color)
            for spine in axes.spines.values():
                spine.set_color(palette.grid_color)

        if options.title:
            ax.set_title(options.title, color=palette.text_color)

        locator = mdates.AutoDateLocator()
        ax.xaxis.set_major_locator(locator)
        ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))

        if options.show_grid:
            ax.grid(True, color=palette.grid_color, linewidth=0.8)
        else:
            ax.grid(False)

        self._apply_x_bounds(ax, options.axes.x)
        self._apply_y_bounds(ax, options.axes.bounds_for(AxisSlot.PRIMARY))
        if ax2 is not None:
            self._apply_y_bounds(ax2, options.axes.bounds_for(AxisSlot.SECONDARY))

        if options.show_legend:
            handles, labels = self._collect_legend_entries(ax, ax2)
            if handles:
                legend = ax.legend(handles, labels, loc="upper left", frameon=False)
                for text in legend.get_texts():
                    text.set_color(palette.text_color)

    @staticmethod
    def _collect_legend_entries(ax, ax2) -> Tuple[List[Any], List[str]]:
        handles, labels = ax.get_legend_handles_labels()
        if ax2 is not None:
            extra_handles, extra_labels = ax2.get_legend_handles_labels()
            handles = handles + extra_handles
            labels = labels + extra_labels
        return handles, labels

    @staticmethod
    def _apply_y_bounds(ax, bounds: Optional[AxisBounds]) -> None:
        if bounds is None:
            return
        ax.yaxis.set_visible(bounds.show)
        if bounds.min is not None or bounds.max is not None:
            ax.set_ylim(bottom=bounds.min, top=bounds.max)

    @staticmethod
    def _apply_x_bounds(ax, bounds: Optional[AxisBounds]) -> None:
        if bounds is None:
            return
        ax.xaxis.set_visible(bounds.show)
        left = parse_timestamp(bounds.min) if bounds.min is not None else None
        right = parse_timestamp(bounds.max) if bounds.max is not None else None
        if left is not None or right is not None:
            ax.set_xlim(
                left=mdates.date2num(left) if left is not None else None,
                right=mdates.date2num(right) if right is not None else None,
            )

    def _release(self) -> None:
        try:
            self.figure.clear()
        except (RuntimeError, ValueError, TypeError) as cleanup_error:
            logger.warning("Error during matplotlib figure cleanup: %s", cleanup_error)
        self.canvas = None
        self.primary_axes = None
        self.secondary_axes = None

    def _export(self, path: Path) -> None:
        assert self.palette is not None
        self.figure.savefig(path, facecolor=self.palette.background_color)


__all__ = ["MatplotlibAdapter", "bar_width_days"]
