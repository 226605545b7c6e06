"""Conversion of periodic statistic aggregates into data points."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..data_models import DataPoint, StatisticsSpec
from .value_parsing import parse_finite_float, parse_timestamp

logger = logging.getLogger(__name__)

FALLBACK_FIELDS = ("mean", "state")


def candidate_fields(stat_type: str) -> Tuple[str, ...]:
    """Return the fields tried, in order, for ``stat_type``."""
    fields = [stat_type]
    fields.extend(name for name in FALLBACK_FIELDS if name != stat_type)
    return tuple(fields)


class StatisticsProcessor:
    """Turns raw statistic records into data points using a fallback chain."""

    @staticmethod
    def process(
        records: Iterable[Mapping[str, Any]], statistics: StatisticsSpec, entity_id: str = ""
    ) -> List[DataPoint]:
        fields = candidate_fields(statistics.stat_type)
        points: List[DataPoint] = []
        dropped = 0
        for record in records:
            point = StatisticsProcessor.process_record(record, fields)
            if point is None:
                dropped += 1
                continue
            points.append(point)

        if dropped:
            logger.debug("Dropped %d statistic records for %s", dropped, entity_id)
        return points

    @staticmethod
    def process_record(record: Mapping[str, Any], fields: Tuple[str, ...]) -> Optional[DataPoint]:
        value = StatisticsProcessor.select_value(record, fields)
        if value is None:
            return None
        timestamp = parse_timestamp(record.get("start"))
        if timestamp is None:
            return None
        return DataPoint(x=timestamp, y=value)

    @staticmethod
    def select_value(record: Mapping[str, Any], fields: Tuple[str, ...]) -> Optional[float]:
        """Return the first finite value among ``fields``."""
        for name in fields:
            value = parse_finite_float(record.get(name))
            if value is not None:
                return value
        return None
