"""Assemble one ``Series`` per configured entity."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..axis_mapper import AxisMapping
from ..data_models import ChartKind, DataPoint, EntitySpec, Series


def _attributes(state: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not state:
        return {}
    attributes = state.get("attributes")
    return attributes if isinstance(attributes, Mapping) else {}


def build_series(
    spec: EntitySpec,
    state: Optional[Mapping[str, Any]],
    points: Iterable[DataPoint],
    mapping: AxisMapping,
    default_kind: ChartKind,
) -> Series:
    """Combine configuration, live entity attributes and data points into a series."""
    attributes = _attributes(state)
    return Series(
        name=spec.name or attributes.get("friendly_name") or spec.entity,
        data=tuple(points),
        axis_ref=mapping.slot_for(spec.axis_id),
        color=spec.color,
        kind=spec.kind or default_kind,
        unit=spec.unit or attributes.get("unit_of_measurement"),
        show=spec.show,
    )


def empty_series(spec: EntitySpec, mapping: AxisMapping, default_kind: ChartKind) -> Series:
    """Series for an entity whose data could not be resolved."""
    return build_series(spec, None, (), mapping, default_kind)
