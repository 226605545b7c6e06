"""
Backend-agnostic chart lifecycle manager.

A ``ChartManager`` exclusively owns one ``RenderAdapter`` and the surface it
is mounted on, from ``initialize`` until ``destroy``.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional, Sequence, Tuple

from .data_models import ChartOptions, Series
from .errors import ChartStateError, SurfaceResolutionError
from .render_adapter import ChartSurface, RenderAdapter

logger = logging.getLogger(__name__)


class ChartState(Enum):
    """Lifecycle states of a chart manager."""

    UNINITIALIZED = "uninitialized"
    MOUNTED = "mounted"
    UPDATING = "updating"
    DESTROYED = "destroyed"


class ChartManager:
    """
    Drives one adapter through mount, updates and destroy.

    Updates are applied one complete snapshot at a time. An update issued while
    another is being applied (for example from a callback raised inside the
    adapter) is queued and applied afterwards, preserving call order.
    """

    def __init__(self, adapter_factory: Callable[[], RenderAdapter]):
        self._adapter_factory = adapter_factory
        self._adapter: Optional[RenderAdapter] = None
        self._surface: Optional[ChartSurface] = None
        self._pending: Deque[Tuple[Series, ...]] = deque()
        self.state = ChartState.UNINITIALIZED

    @property
    def adapter(self) -> Optional[RenderAdapter]:
        return self._adapter

    @property
    def surface(self) -> Optional[ChartSurface]:
        return self._surface

    @property
    def is_active(self) -> bool:
        return self.state in (ChartState.MOUNTED, ChartState.UPDATING)

    def initialize(self, surface: Optional[ChartSurface], options: ChartOptions) -> None:
        """
        Build the adapter and mount it on ``surface``.

        Raises:
            ChartStateError: If called after a previous initialize or destroy
            SurfaceResolutionError: If no surface is available; the manager is unusable afterwards
        """
        if self.state is not ChartState.UNINITIALIZED:
            raise ChartStateError.invalid_transition("initialize", self.state.value)

        if surface is None:
            logger.error("Chart container not found; chart will not render")
            self.state = ChartState.DESTROYED
            raise SurfaceResolutionError.missing("initialize")

        adapter = self._adapter_factory()
        adapter.mount(surface, options)
        self._adapter = adapter
        self._surface = surface
        self.state = ChartState.MOUNTED
        logger.debug("Chart manager mounted %s on %s", type(adapter).__name__, surface.surface_id)

    def update(self, series: Sequence[Series]) -> None:
        """Hand a complete series snapshot to the adapter."""
        if self.state is ChartState.DESTROYED:
            logger.debug("Discarding chart update after destroy")
            return
        if self.state is ChartState.UNINITIALIZED:
            raise ChartStateError.invalid_transition("update", self.state.value)

        self._pending.append(tuple(series))
        if self.state is ChartState.UPDATING:
            return
        self._drain()

    def _drain(self) -> None:
        self.state = ChartState.UPDATING
        try:
            while self._pending and self._adapter is not None:
                snapshot = self._pending.popleft()
                self._adapter.update_series(snapshot)
        finally:
            if self.state is ChartState.UPDATING:
                self.state = ChartState.MOUNTED

    def destroy(self) -> None:
        """Destroy the adapter and release the surface. Repeat calls are no-ops."""
        if self.state is ChartState.DESTROYED:
            return

        adapter, self._adapter = self._adapter, None
        self._pending.clear()
        self._surface = None
        self.state = ChartState.DESTROYED
        if adapter is not None:
            adapter.destroy()
            logger.debug("Chart manager destroyed %s", type(adapter).__name__)


__all__ = ["ChartManager", "ChartState"]
