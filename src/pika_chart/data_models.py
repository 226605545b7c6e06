"""
Normalized value types shared by the transformation pipeline and the renderers.

Every type here is an immutable value object: a new ``Series`` is produced on
each update cycle instead of mutating the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class AxisSlot(Enum):
    """Physical value axis supported by every rendering backend."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class ChartKind(Enum):
    """Chart kinds that may be requested in configuration."""

    LINE = "line"
    BAR = "bar"
    AREA = "area"
    SCATTER = "scatter"
    STEP = "step"
    PIE = "pie"
    RADAR = "radar"


class ThemeMode(Enum):
    """Configured theme mode; ``AUTO`` follows the host theme."""

    AUTO = "auto"
    LIGHT = "light"
    DARK = "dark"


STATISTIC_PERIODS = ("5minute", "hour", "day", "week", "month")
STATISTIC_TYPES = ("min", "max", "mean", "sum", "state")


@dataclass(frozen=True)
class DataPoint:
    """Single normalized observation; ``y`` is always finite."""

    x: datetime
    y: float


@dataclass(frozen=True)
class StatisticsSpec:
    """Aggregation period and statistic kind for statistics mode."""

    period: str = "hour"
    stat_type: str = "mean"


@dataclass(frozen=True)
class EntitySpec:
    """User-declared binding of one entity to one series."""

    entity: str
    name: Optional[str] = None
    color: Optional[str] = None
    unit: Optional[str] = None
    kind: Optional[ChartKind] = None
    attribute: Optional[str] = None
    axis_id: Optional[str] = None
    statistics: Optional[StatisticsSpec] = None
    show: bool = True


@dataclass(frozen=True)
class Series:
    """Renderable series handed to an adapter."""

    name: str
    data: Tuple[DataPoint, ...]
    axis_ref: AxisSlot = AxisSlot.PRIMARY
    color: Optional[str] = None
    kind: Optional[ChartKind] = None
    unit: Optional[str] = None
    show: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.data


@dataclass(frozen=True)
class AxisBounds:
    """Visibility and optional limits for one conceptual axis."""

    show: bool = True
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class AxisLayout:
    """Resolved x, primary-y and secondary-y axes for a configuration."""

    x: Optional[AxisBounds] = None
    y: Optional[AxisBounds] = None
    y2: Optional[AxisBounds] = None

    def bounds_for(self, slot: AxisSlot) -> Optional[AxisBounds]:
        """Return the y-axis bounds for a physical slot."""
        if slot is AxisSlot.SECONDARY:
            return self.y2
        return self.y


@dataclass(frozen=True)
class ChartOptions:
    """Backend-agnostic render configuration passed at mount time."""

    kind: ChartKind = ChartKind.LINE
    axes: AxisLayout = AxisLayout()
    stacked: bool = False
    show_legend: bool = True
    show_tooltip: bool = True
    show_grid: bool = True
    animate: bool = True
    theme: str = "light"
    height: int = 300
    title: Optional[str] = None


__all__ = [
    "AxisBounds",
    "AxisLayout",
    "AxisSlot",
    "ChartKind",
    "ChartOptions",
    "DataPoint",
    "EntitySpec",
    "STATISTIC_PERIODS",
    "STATISTIC_TYPES",
    "Series",
    "StatisticsSpec",
    "ThemeMode",
]
