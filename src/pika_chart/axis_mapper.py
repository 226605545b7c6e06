"""
Reconcile logical y-axis identifiers with the two physical axis slots.

Backends expose a primary and a secondary value axis. Users may declare any
number of logical axis ids; the first two (in lexicographic order) get their
own slot and every further id collapses onto the primary slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from .data_models import AxisLayout, AxisSlot, EntitySpec

if TYPE_CHECKING:
    from .config.card_config import CardConfig

logger = logging.getLogger(__name__)

MAX_PHYSICAL_AXES = 2


@dataclass(frozen=True)
class AxisMapping:
    """Logical axis id to physical slot mapping."""

    slots: Dict[str, AxisSlot] = field(default_factory=dict)
    ordered_ids: Tuple[str, ...] = ()
    degraded: bool = False

    def slot_for(self, axis_id: Optional[str]) -> AxisSlot:
        """Return the slot for ``axis_id``; undeclared ids use the primary slot."""
        if axis_id is None:
            return AxisSlot.PRIMARY
        return self.slots.get(axis_id, AxisSlot.PRIMARY)

    @property
    def primary_id(self) -> Optional[str]:
        return self.ordered_ids[0] if self.ordered_ids else None

    @property
    def secondary_id(self) -> Optional[str]:
        return self.ordered_ids[1] if len(self.ordered_ids) > 1 else None


def collect_axis_ids(entities: Iterable[EntitySpec]) -> List[str]:
    """Return the distinct axis ids referenced by ``entities`` in declaration order."""
    seen: List[str] = []
    for entity in entities:
        if entity.axis_id is not None and entity.axis_id not in seen:
            seen.append(entity.axis_id)
    return seen


def map_axis_ids(axis_ids: Iterable[str]) -> AxisMapping:
    """
    Map logical axis ids onto physical slots.

    The result depends only on the set of ids, never on their input order.
    More than two ids is a capability mismatch: the extras share the primary
    slot and the mapping is flagged as degraded.
    """
    ordered = tuple(sorted({str(axis_id) for axis_id in axis_ids}))
    if not ordered:
        return AxisMapping()

    slots: Dict[str, AxisSlot] = {ordered[0]: AxisSlot.PRIMARY}
    if len(ordered) > 1:
        slots[ordered[1]] = AxisSlot.SECONDARY

    degraded = len(ordered) > MAX_PHYSICAL_AXES
    if degraded:
        extras = ordered[MAX_PHYSICAL_AXES:]
        logger.warning(
            "Only %d y-axes are supported; axes %s will be mapped to the primary axis",
            MAX_PHYSICAL_AXES,
            ", ".join(extras),
        )
        for axis_id in extras:
            slots[axis_id] = AxisSlot.PRIMARY

    return AxisMapping(slots=slots, ordered_ids=ordered, degraded=degraded)


def build_axis_layout(config: "CardConfig", mapping: AxisMapping) -> AxisLayout:
    """Resolve x, primary-y and secondary-y bounds for a configuration."""
    y_bounds = None
    y2_bounds = None

    if config.yaxis:
        primary = config.axis_definition(mapping.primary_id) or config.yaxis[0]
        y_bounds = primary.to_bounds()

        secondary = config.axis_definition(mapping.secondary_id)
        if secondary is not None:
            y2_bounds = secondary.to_bounds()

    return AxisLayout(x=config.xaxis, y=y_bounds, y2=y2_bounds)


__all__ = ["AxisMapping", "MAX_PHYSICAL_AXES", "build_axis_layout", "collect_axis_ids", "map_axis_ids"]
