"""Conversion of event-based state history into data points."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..data_models import DataPoint, EntitySpec
from .value_parsing import parse_finite_float, parse_timestamp

logger = logging.getLogger(__name__)

UNAVAILABLE_STATES = frozenset({"unknown", "unavailable"})


class HistoryProcessor:
    """
    Turns raw state records into data points.

    Records are expected in chronological order and are emitted in the same
    order; nothing is resampled, so sparse history stays sparse.
    """

    @staticmethod
    def process(records: Iterable[Mapping[str, Any]], spec: EntitySpec) -> List[DataPoint]:
        points: List[DataPoint] = []
        dropped = 0
        for record in records:
            point = HistoryProcessor.process_record(record, spec.attribute)
            if point is None:
                dropped += 1
                continue
            points.append(point)

        if dropped:
            logger.debug("Dropped %d history records for %s", dropped, spec.entity)
        return points

    @staticmethod
    def process_record(record: Mapping[str, Any], attribute: Optional[str]) -> Optional[DataPoint]:
        """Return a data point for ``record`` or ``None`` when it must be skipped."""
        state = record.get("state")
        if isinstance(state, str) and state in UNAVAILABLE_STATES:
            return None

        if attribute:
            attributes = record.get("attributes")
            raw_value = attributes.get(attribute) if isinstance(attributes, Mapping) else None
        else:
            raw_value = state

        value = parse_finite_float(raw_value)
        if value is None:
            return None

        timestamp = parse_timestamp(record.get("last_changed"))
        if timestamp is None:
            return None
        return DataPoint(x=timestamp, y=value)
