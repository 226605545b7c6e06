from __future__ import annotations

"""Visualization-grammar backend building a declarative plotly figure."""


import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import plotly.graph_objects as go

from ..data_models import AxisBounds, AxisSlot, ChartKind, ChartOptions, Series
from ..data_transformer_helpers.value_parsing import parse_timestamp
from ..render_adapter import ChartSurface, RenderAdapter

logger = logging.getLogger(__name__)

TRANSITION_DURATION_MS = 500
LIGHT_TEMPLATE = "plotly_white"
DARK_TEMPLATE = "plotly_dark"


def _axis_range(bounds: Optional[AxisBounds], *, timestamps: bool = False) -> Optional[list]:
    if bounds is None or (bounds.min is None and bounds.max is None):
        return None
    if timestamps:
        low = parse_timestamp(bounds.min) if bounds.min is not None else None
        high = parse_timestamp(bounds.max) if bounds.max is not None else None
        return [low, high]
    return [bounds.min, bounds.max]


class PlotlyAdapter(RenderAdapter):
    """Renders series as plotly traces; the secondary slot is ``yaxis2`` on the right."""

    SUPPORTED_KINDS = frozenset(
        {ChartKind.LINE, ChartKind.BAR, ChartKind.AREA, ChartKind.SCATTER, ChartKind.STEP}
    )
    KIND_SUBSTITUTES = {ChartKind.PIE: ChartKind.BAR, ChartKind.RADAR: ChartKind.LINE}

    def _create_figure(self, surface: ChartSurface, options: ChartOptions) -> go.Figure:
        assert self.palette is not None
        palette = self.palette
        figure = go.Figure()
        figure.update_layout(
            template=DARK_TEMPLATE if options.theme == "dark" else LIGHT_TEMPLATE,
            width=surface.width,
            height=options.height,
            paper_bgcolor=palette.background_color,
            plot_bgcolor=palette.background_color,
            font={"color": palette.text_color},
            showlegend=options.show_legend,
            hovermode="x unified" if options.show_tooltip else False,
            barmode="stack" if options.stacked else "group",
            transition={"duration": TRANSITION_DURATION_MS if options.animate else 0},
            margin={"l": 50, "r": 50, "t": 50 if options.title else 20, "b": 40},
        )
        if options.title:
            figure.update_layout(title={"text": options.title, "x": 0.5, "xanchor": "center"})

        figure.update_layout(
            xaxis=self._axis_layout(options.axes.x, timestamps=True, base={"type": "date"}),
            yaxis=self._axis_layout(options.axes.bounds_for(AxisSlot.PRIMARY)),
        )
        return figure

    def _axis_layout(
        self, bounds: Optional[AxisBounds], *, timestamps: bool = False, base: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        assert self.options is not None and self.palette is not None
        layout: Dict[str, Any] = dict(base or {})
        layout.setdefault("showgrid", self.options.show_grid)
        layout["gridcolor"] = self.palette.grid_color
        if bounds is not None:
            layout["visible"] = bounds.show
            axis_range = _axis_range(bounds, timestamps=timestamps)
            if axis_range is not None:
                layout["range"] = axis_range
        return layout

    def _draw(self, series: Tuple[Series, ...]) -> None:
        assert self.options is not None and self.palette is not None
        figure = self.figure
        traces = [
            self._build_trace(item, self.palette.color_for(index, item.color))
            for index, item in enumerate(series)
        ]
        figure.data = []

        if any(item.axis_ref is AxisSlot.SECONDARY for item in series):
            figure.update_layout(
                yaxis2=self._axis_layout(
                    self.options.axes.bounds_for(AxisSlot.SECONDARY),
                    base={"overlaying": "y", "side": "right", "showgrid": False},
                )
            )
        if traces:
            figure.add_traces(traces)

    def _build_trace(self, item: Series, color: str):
        x_values = [point.x for point in item.data]
        y_values = [point.y for point in item.data]
        name = f"{item.name} ({item.unit})" if item.unit else item.name
        common: Dict[str, Any] = {
            "x": x_values,
            "y": y_values,
            "name": name,
            "visible": True if item.show else "legendonly",
            "yaxis": "y2" if item.axis_ref is AxisSlot.SECONDARY else "y",
        }
        kind = self.kind_for(item)
        stackgroup = item.axis_ref.value if self.options.stacked else None

        if kind is ChartKind.BAR:
            return go.Bar(marker={"color": color}, **common)
        if kind is ChartKind.SCATTER:
            return go.Scatter(mode="markers", marker={"color": color, "size": 6}, **common)
        if kind is ChartKind.AREA:
            if stackgroup:
                return go.Scatter(mode="lines", line={"color": color}, stackgroup=stackgroup, **common)
            return go.Scatter(mode="lines", line={"color": color}, fill="tozeroy", **common)

        line = {"color": color, "width": 2}
        if kind is ChartKind.STEP:
            line["shape"] = "hv"
        if stackgroup:
            return go.Scatter(mode="lines", line=line, stackgroup=stackgroup, fill="none", **common)
        return go.Scatter(mode="lines", line=line, **common)

    def _release(self) -> None:
        self.figure.data = []

    def _export(self, path: Path) -> None:
        if path.suffix.lower() == ".json":
            self.figure.write_json(str(path))
        else:
            self.figure.write_html(str(path), include_plotlyjs="cdn")


__all__ = ["PlotlyAdapter"]
