"""Time-series sensor charts with interchangeable rendering backends."""

from .adapters import MatplotlibAdapter, PlotlyAdapter, create_adapter_factory
from .axis_mapper import AxisMapping, build_axis_layout, collect_axis_ids, map_axis_ids
from .chart_card import ChartCard
from .chart_manager import ChartManager, ChartState
from .config import CardConfig, ConfigurationError, get_stub_config, load_card_config, parse_card_config
from .data_models import (
    AxisBounds,
    AxisLayout,
    AxisSlot,
    ChartKind,
    ChartOptions,
    DataPoint,
    EntitySpec,
    Series,
    StatisticsSpec,
    ThemeMode,
)
from .data_source import DataSource, HomeAssistantDataSource
from .data_transformer import DataTransformer
from .errors import ChartError, ChartStateError, DataSourceError, SurfaceResolutionError
from .refresh_scheduler import RefreshScheduler
from .render_adapter import ChartSurface, RenderAdapter

__all__ = [
    "AxisBounds",
    "AxisLayout",
    "AxisMapping",
    "AxisSlot",
    "CardConfig",
    "ChartCard",
    "ChartError",
    "ChartKind",
    "ChartManager",
    "ChartOptions",
    "ChartState",
    "ChartStateError",
    "ChartSurface",
    "ConfigurationError",
    "DataPoint",
    "DataSource",
    "DataSourceError",
    "DataTransformer",
    "EntitySpec",
    "HomeAssistantDataSource",
    "MatplotlibAdapter",
    "PlotlyAdapter",
    "RefreshScheduler",
    "RenderAdapter",
    "Series",
    "StatisticsSpec",
    "SurfaceResolutionError",
    "ThemeMode",
    "build_axis_layout",
    "collect_axis_ids",
    "create_adapter_factory",
    "get_stub_config",
    "load_card_config",
    "map_axis_ids",
    "parse_card_config",
]
