from __future__ import annotations

"""Card configuration parsing, defaulting and validation."""


import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from ..data_models import (
    STATISTIC_PERIODS,
    STATISTIC_TYPES,
    AxisBounds,
    ChartKind,
    EntitySpec,
    StatisticsSpec,
    ThemeMode,
)
from .errors import ConfigurationError
from .runtime import load_json

logger = logging.getLogger(__name__)

SUPPORTED_LIBRARIES = ("matplotlib", "plotly")

DEFAULT_CHART_KIND = ChartKind.LINE
DEFAULT_LIBRARY = "matplotlib"
DEFAULT_HOURS_TO_SHOW = 24.0
DEFAULT_REFRESH_INTERVAL_SECONDS = 60.0
DEFAULT_THEME = ThemeMode.AUTO
DEFAULT_HEIGHT = 300


@dataclass(frozen=True)
class AxisDefinition:
    """Named y-axis declared in configuration."""

    id: str
    show: bool = True
    min: Optional[float] = None
    max: Optional[float] = None

    def to_bounds(self) -> AxisBounds:
        return AxisBounds(show=self.show, min=self.min, max=self.max)


@dataclass(frozen=True)
class CardConfig:
    """Fully defaulted card configuration."""

    entities: Tuple[EntitySpec, ...]
    chart_type: ChartKind = DEFAULT_CHART_KIND
    library: str = DEFAULT_LIBRARY
    hours_to_show: float = DEFAULT_HOURS_TO_SHOW
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    show_legend: bool = True
    show_tooltip: bool = True
    show_grid: bool = True
    animate: bool = True
    theme: ThemeMode = DEFAULT_THEME
    height: int = DEFAULT_HEIGHT
    title: Optional[str] = None
    stacked: bool = False
    xaxis: Optional[AxisBounds] = None
    yaxis: Tuple[AxisDefinition, ...] = ()

    def __post_init__(self) -> None:
        if not self.entities:
            raise ConfigurationError("Please define at least one entity")

    def axis_definition(self, axis_id: Optional[str]) -> Optional[AxisDefinition]:
        """Return the y-axis definition declared with ``axis_id``."""
        if axis_id is None:
            return None
        for definition in self.yaxis:
            if definition.id == axis_id:
                return definition
        return None


def get_stub_config() -> dict[str, Any]:
    """Return a minimal example configuration for card editors."""
    return {
        "entities": [
            {
                "entity": "sensor.temperature",
                "name": "Temperature",
                "color": "#ff6384",
            }
        ],
        "hours_to_show": DEFAULT_HOURS_TO_SHOW,
        "chart_type": DEFAULT_CHART_KIND.value,
        "library": DEFAULT_LIBRARY,
    }


def parse_card_config(raw: Mapping[str, Any]) -> CardConfig:
    """
    Build a ``CardConfig`` from a raw mapping, applying defaults.

    Raises:
        ConfigurationError: If the mapping has no entities or holds invalid values
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError.invalid_format("config", raw, "a mapping")

    raw_entities = raw.get("entities")
    if not raw_entities:
        raise ConfigurationError("Please define at least one entity")
    if isinstance(raw_entities, (str, bytes)) or not isinstance(raw_entities, Sequence):
        raise ConfigurationError.invalid_format("entities", raw_entities, "a list")

    entities = tuple(_parse_entity(item, index) for index, item in enumerate(raw_entities))

    library = _parse_choice(raw.get("library"), "library", SUPPORTED_LIBRARIES, DEFAULT_LIBRARY)

    return CardConfig(
        entities=entities,
        chart_type=_parse_enum(raw.get("chart_type"), ChartKind, "chart_type", DEFAULT_CHART_KIND),
        library=library,
        hours_to_show=_parse_positive_number(raw.get("hours_to_show"), "hours_to_show", DEFAULT_HOURS_TO_SHOW),
        refresh_interval=_parse_positive_number(
            raw.get("refresh_interval"), "refresh_interval", DEFAULT_REFRESH_INTERVAL_SECONDS
        ),
        show_legend=_parse_bool(raw.get("show_legend"), "show_legend", True),
        show_tooltip=_parse_bool(raw.get("show_tooltip"), "show_tooltip", True),
        show_grid=_parse_bool(raw.get("show_grid"), "show_grid", True),
        animate=_parse_bool(raw.get("animate"), "animate", True),
        theme=_parse_enum(raw.get("theme"), ThemeMode, "theme", DEFAULT_THEME),
        height=int(_parse_positive_number(raw.get("height"), "height", DEFAULT_HEIGHT)),
        title=_parse_optional_str(raw.get("title"), "title"),
        stacked=_parse_bool(raw.get("stacked"), "stacked", False),
        xaxis=_parse_xaxis(raw.get("xaxis")),
        yaxis=_parse_yaxis(raw.get("yaxis")),
    )


def load_card_config(path: str | Path) -> CardConfig:
    """Load and parse a card configuration stored as a JSON object."""
    json_config = load_json(path, base_dir=Path.cwd())
    return parse_card_config(json_config.payload)


def _parse_entity(item: Any, index: int) -> EntitySpec:
    field = f"entities[{index}]"
    if isinstance(item, str):
        if not item.strip():
            raise ConfigurationError.missing_value(f"{field}.entity")
        return EntitySpec(entity=item.strip())
    if not isinstance(item, Mapping):
        raise ConfigurationError.invalid_format(field, item, "an entity id or a mapping")

    entity_id = item.get("entity")
    if not isinstance(entity_id, str) or not entity_id.strip():
        raise ConfigurationError.missing_value(f"{field}.entity")

    return EntitySpec(
        entity=entity_id.strip(),
        name=_parse_optional_str(item.get("name"), f"{field}.name"),
        color=_parse_optional_str(item.get("color"), f"{field}.color"),
        unit=_parse_optional_str(item.get("unit"), f"{field}.unit"),
        kind=_parse_enum(item.get("type"), ChartKind, f"{field}.type", None),
        attribute=_parse_optional_str(item.get("attribute"), f"{field}.attribute"),
        axis_id=_parse_axis_id(item.get("yaxis_id")),
        statistics=_parse_statistics(item.get("statistics"), field),
        show=_parse_entity_show(item.get("show"), field),
    )


def _parse_statistics(raw: Any, field: str) -> Optional[StatisticsSpec]:
    if raw is None or raw is False:
        return None
    if raw is True:
        return StatisticsSpec()
    if not isinstance(raw, Mapping):
        raise ConfigurationError.invalid_format(f"{field}.statistics", raw, "a mapping")
    period = _parse_choice(raw.get("period"), f"{field}.statistics.period", STATISTIC_PERIODS, "hour")
    stat_type = _parse_choice(raw.get("stat_type"), f"{field}.statistics.stat_type", STATISTIC_TYPES, "mean")
    return StatisticsSpec(period=period, stat_type=stat_type)


def _parse_entity_show(raw: Any, field: str) -> bool:
    if isinstance(raw, Mapping):
        return _parse_bool(raw.get("in_chart"), f"{field}.show.in_chart", True)
    return _parse_bool(raw, f"{field}.show", True)


def _parse_axis_id(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_xaxis(raw: Any) -> Optional[AxisBounds]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigurationError.invalid_format("xaxis", raw, "a mapping")
    return AxisBounds(
        show=_parse_bool(raw.get("show"), "xaxis.show", True),
        min=_parse_optional_bound(raw.get("min"), "xaxis.min"),
        max=_parse_optional_bound(raw.get("max"), "xaxis.max"),
    )


def _parse_yaxis(raw: Any) -> Tuple[AxisDefinition, ...]:
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        raw = [raw]
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ConfigurationError.invalid_format("yaxis", raw, "a list of axis definitions")

    definitions = []
    for index, item in enumerate(raw):
        field = f"yaxis[{index}]"
        if not isinstance(item, Mapping):
            raise ConfigurationError.invalid_format(field, item, "a mapping")
        axis_id = _parse_axis_id(item.get("id"))
        definitions.append(
            AxisDefinition(
                id=axis_id if axis_id is not None else str(index),
                show=_parse_bool(item.get("show"), f"{field}.show", True),
                min=_parse_optional_bound(item.get("min"), f"{field}.min"),
                max=_parse_optional_bound(item.get("max"), f"{field}.max"),
            )
        )
    return tuple(definitions)


def _parse_bool(raw: Any, name: str, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    raise ConfigurationError.invalid_value(name, raw, "Expected true or false")


def _parse_positive_number(raw: Any, name: str, default: float) -> float:
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ConfigurationError.invalid_value(name, raw, "Expected a number")
    if not math.isfinite(raw) or raw <= 0:
        raise ConfigurationError.invalid_value(name, raw, "Must be a positive number")
    return raw


def _parse_optional_bound(raw: Any, name: str) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)) and math.isfinite(raw):
        return float(raw)
    # non-numeric bounds such as "auto" mean "let the backend decide"
    logger.debug("Ignoring non-numeric axis bound %s=%r", name, raw)
    return None


def _parse_optional_str(raw: Any, name: str) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ConfigurationError.invalid_value(name, raw, "Expected a string")
    return raw or None


def _parse_choice(raw: Any, name: str, choices: Sequence[str], default: str) -> str:
    if raw is None:
        return default
    if raw not in choices:
        raise ConfigurationError.unsupported_choice(name, raw, choices)
    return raw


def _parse_enum(raw: Any, enum_type, name: str, default):
    if raw is None:
        return default
    try:
        return enum_type(raw)
    except ValueError as exc:
        raise ConfigurationError.unsupported_choice(name, raw, [member.value for member in enum_type]) from exc


__all__ = [
    "AxisDefinition",
    "CardConfig",
    "DEFAULT_HEIGHT",
    "DEFAULT_HOURS_TO_SHOW",
    "DEFAULT_LIBRARY",
    "DEFAULT_REFRESH_INTERVAL_SECONDS",
    "SUPPORTED_LIBRARIES",
    "get_stub_config",
    "load_card_config",
    "parse_card_config",
]
