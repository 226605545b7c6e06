"""
Rendering contract shared by every charting backend.

``ChartManager`` drives adapters strictly sequentially: ``mount`` once, any
number of ``update_series`` calls, then ``destroy`` at most once.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple

from .data_models import AxisSlot, ChartKind, ChartOptions, Series
from .errors import ChartStateError, SurfaceResolutionError
from .theme import ChartPalette, palette_for

logger = logging.getLogger(__name__)


@dataclass
class ChartSurface:
    """Host-provided drawing surface; holds the backend's native figure once mounted."""

    surface_id: str
    width: int = 800
    content: Any = None

    @property
    def is_empty(self) -> bool:
        return self.content is None

    def attach(self, content: Any) -> None:
        if not self.is_empty:
            raise SurfaceResolutionError.not_empty(self.surface_id)
        self.content = content

    def detach(self) -> None:
        self.content = None


def resolve_kind(
    kind: ChartKind, supported: FrozenSet[ChartKind], substitutes: Dict[ChartKind, ChartKind]
) -> ChartKind:
    """Return ``kind`` or the closest kind the backend supports."""
    if kind in supported:
        return kind
    substitute = substitutes.get(kind, ChartKind.LINE)
    logger.warning("Chart kind %s is not supported by this backend; using %s", kind.value, substitute.value)
    return substitute


def stack_offsets(series: Sequence[Series]) -> Tuple[Tuple[float, ...], ...]:
    """
    Return per-point baselines for stacking.

    Each visible series sits on the running total of the earlier visible series
    that share its axis slot, matched by timestamp.
    """
    totals: Dict[Tuple[AxisSlot, Any], float] = {}
    offsets = []
    for item in series:
        baseline = []
        for point in item.data:
            key = (item.axis_ref, point.x)
            base = totals.get(key, 0.0)
            baseline.append(base)
            if item.show:
                totals[key] = base + point.y
        offsets.append(tuple(baseline))
    return tuple(offsets)


class RenderAdapter(ABC):
    """Base class for backend adapters."""

    SUPPORTED_KINDS: FrozenSet[ChartKind] = frozenset()
    KIND_SUBSTITUTES: Dict[ChartKind, ChartKind] = {}

    def __init__(self) -> None:
        self.surface: Optional[ChartSurface] = None
        self.options: Optional[ChartOptions] = None
        self.palette: Optional[ChartPalette] = None
        self.figure: Any = None

    @property
    def mounted(self) -> bool:
        return self.surface is not None

    def resolve_kind(self, kind: ChartKind) -> ChartKind:
        return resolve_kind(kind, self.SUPPORTED_KINDS, self.KIND_SUBSTITUTES)

    def mount(self, surface: ChartSurface, options: ChartOptions) -> None:
        """Create the native figure and attach it to ``surface``."""
        if self.mounted:
            raise ChartStateError.invalid_transition("mount", "already mounted")
        if not surface.is_empty:
            raise SurfaceResolutionError.not_empty(surface.surface_id)

        self.options = options
        self.palette = palette_for(options.theme)
        self.figure = self._create_figure(surface, options)
        surface.attach(self.figure)
        self.surface = surface
        logger.debug("%s mounted on surface %s", type(self).__name__, surface.surface_id)

    def update_series(self, series: Sequence[Series]) -> None:
        """Replace everything drawn with ``series``."""
        if not self.mounted:
            raise ChartStateError.invalid_transition("update series", "not mounted")
        self._draw(tuple(series))

    def destroy(self) -> None:
        """Release the native figure and detach it from the surface."""
        if self.surface is None:
            return
        try:
            self._release()
        finally:
            self.surface.detach()
            self.surface = None
            self.figure = None

    def export(self, path: str | Path) -> Path:
        """Write the mounted figure to ``path``."""
        if not self.mounted:
            raise ChartStateError.invalid_transition("export", "not mounted")
        target = Path(path)
        self._export(target)
        return target

    def kind_for(self, item: Series) -> ChartKind:
        """Resolve the effective kind of one series."""
        assert self.options is not None
        return self.resolve_kind(item.kind or self.options.kind)

    @abstractmethod
    def _create_figure(self, surface: ChartSurface, options: ChartOptions) -> Any:
        """Build the backend figure for ``options``."""

    @abstractmethod
    def _draw(self, series: Tuple[Series, ...]) -> None:
        """Redraw the figure with ``series``."""

    @abstractmethod
    def _release(self) -> None:
        """Free backend resources."""

    @abstractmethod
    def _export(self, path: Path) -> None:
        """Write the figure to ``path``."""


__all__ = ["ChartSurface", "RenderAdapter", "resolve_kind", "stack_offsets"]
