"""
Dashboard card wiring configuration, data fetching and the chart manager.

Lifecycle: ``set_config`` -> ``attach`` -> (refresh cycles) -> ``detach``.
Refresh cycles run on the ``RefreshScheduler`` and whenever the host pushes a
new live state table through ``set_states``.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from .adapters import AdapterFactory, create_adapter_factory
from .axis_mapper import AxisMapping, collect_axis_ids, map_axis_ids
from .chart_card_helpers import build_chart_options, build_series, empty_series
from .chart_manager import ChartManager
from .config.card_config import CardConfig, parse_card_config
from .config.errors import ConfigurationError
from .data_models import EntitySpec, Series
from .data_source import DataSource
from .data_transformer import DataTransformer
from .refresh_scheduler import RefreshScheduler
from .render_adapter import ChartSurface

logger = logging.getLogger(__name__)

CARD_SIZE_UNIT = 50

StateTable = Mapping[str, Mapping[str, Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChartCard:
    """Host-facing chart card owning one manager and one refresh scheduler."""

    def __init__(
        self,
        data_source: DataSource,
        *,
        adapter_factory_provider: Callable[[str], AdapterFactory] = create_adapter_factory,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.data_source = data_source
        self._adapter_factory_provider = adapter_factory_provider
        self._clock = clock
        self.config: Optional[CardConfig] = None
        self.manager: Optional[ChartManager] = None
        self.scheduler: Optional[RefreshScheduler] = None
        self.axis_mapping = AxisMapping()
        self._surface: Optional[ChartSurface] = None
        self._states: Optional[Dict[str, Mapping[str, Any]]] = None
        self._active_theme: Optional[str] = None
        self._generation = 0
        self._refresh_in_flight = False
        self._refresh_requested = False
        self._state_tasks: Set[asyncio.Task] = set()

    @property
    def attached(self) -> bool:
        return self.manager is not None

    @property
    def card_size(self) -> int:
        height = self.config.height if self.config else 300
        return math.ceil(height / CARD_SIZE_UNIT)

    async def set_config(self, raw: Mapping[str, Any]) -> CardConfig:
        """
        Validate and apply a configuration.

        An attached card is torn down and rebuilt on the same surface, since
        render options only reach the adapter at mount time.

        Raises:
            ConfigurationError: If the configuration is invalid; the current chart is left untouched
        """
        config = parse_card_config(raw)
        surface = self._surface
        if self.attached:
            await self.detach()
            self.config = config
            await self.attach(surface)
        else:
            self.config = config
        return config

    async def attach(self, surface: Optional[ChartSurface]) -> None:
        """Mount the chart on ``surface`` and start periodic refresh."""
        if self.config is None:
            raise ConfigurationError.missing_value("config", "set_config must be called before attach")
        if self.attached:
            return

        config = self.config
        self.axis_mapping = map_axis_ids(collect_axis_ids(config.entities))
        options = build_chart_options(config, self.axis_mapping, self._active_theme)

        manager = ChartManager(self._adapter_factory_provider(config.library))
        manager.initialize(surface, options)
        self.manager = manager
        self._surface = surface

        self.scheduler = RefreshScheduler(self.refresh, config.refresh_interval, name=f"card:{surface.surface_id}")
        self.scheduler.start()
        logger.info("Chart card attached with %d entities using %s", len(config.entities), config.library)

    async def detach(self) -> None:
        """Stop refreshing and destroy the chart; late fetch results are discarded."""
        self._generation += 1
        scheduler, self.scheduler = self.scheduler, None
        if scheduler is not None:
            await scheduler.stop()

        tasks = list(self._state_tasks)
        self._state_tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        manager, self.manager = self.manager, None
        if manager is not None:
            manager.destroy()
        self._surface = None

    def set_states(self, states: StateTable, active_theme: Optional[str] = None) -> None:
        """Receive a new live state table from the host and request a refresh."""
        self._states = dict(states)
        if active_theme is not None:
            self._active_theme = active_theme
        if not self.attached:
            return
        task = asyncio.create_task(self.refresh())
        self._state_tasks.add(task)
        task.add_done_callback(self._state_tasks.discard)

    async def refresh(self) -> None:
        """
        Run a fetch-and-transform cycle.

        A request made while a cycle is in flight is folded into exactly one
        follow-up cycle, so results are always applied in request order.
        """
        if self._refresh_in_flight:
            self._refresh_requested = True
            return

        self._refresh_in_flight = True
        try:
            while True:
                self._refresh_requested = False
                await self._run_cycle()
                if not self._refresh_requested or not self.attached:
                    break
        finally:
            self._refresh_in_flight = False

    async def _run_cycle(self) -> None:
        manager = self.manager
        config = self.config
        if manager is None or config is None or not manager.is_active:
            return

        generation = self._generation
        end_time = self._clock()
        start_time = end_time - timedelta(hours=config.hours_to_show)
        series = await self.collect_series(start_time, end_time)

        if generation != self._generation or manager is not self.manager or not manager.is_active:
            logger.debug("Discarding refresh results for a detached chart")
            return
        manager.update(series)

    async def collect_series(self, start_time: datetime, end_time: datetime) -> List[Series]:
        """Fetch and build one series per configured entity, in configuration order."""
        assert self.config is not None
        states = self._states
        return list(
            await asyncio.gather(
                *(self._entity_series(spec, states, start_time, end_time) for spec in self.config.entities)
            )
        )

    async def _entity_series(
        self,
        spec: EntitySpec,
        states: Optional[Mapping[str, Mapping[str, Any]]],
        start_time: datetime,
        end_time: datetime,
    ) -> Series:
        assert self.config is not None
        default_kind = self.config.chart_type
        state = None
        if states is not None:
            state = states.get(spec.entity)
            if state is None:
                logger.warning("Entity %s not found", spec.entity)
                return empty_series(spec, self.axis_mapping, default_kind)

        points = await DataTransformer.fetch_points(self.data_source, spec, start_time, end_time)
        return build_series(spec, state, points, self.axis_mapping, default_kind)


__all__ = ["CARD_SIZE_UNIT", "ChartCard"]
