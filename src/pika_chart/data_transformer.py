"""
Time-series transformation pipeline.

Converts raw history records or raw statistic records for one entity into an
ordered list of ``DataPoint``. The fetch step lives here too, since awaiting
the provider is the only suspension point of an update cycle; any failure
there is absorbed and yields an empty result for that entity alone.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping

from .data_models import DataPoint, EntitySpec, StatisticsSpec
from .data_source import DataSource
from .data_transformer_helpers import HistoryProcessor, StatisticsProcessor
from .errors import DataSourceError

logger = logging.getLogger(__name__)

FETCH_ERRORS = (
    DataSourceError,
    ConnectionError,
    OSError,
    asyncio.TimeoutError,
    LookupError,
    TypeError,
    ValueError,
)


class DataTransformer:
    """Stateless history and statistics transformations."""

    @staticmethod
    def transform_history(records: Iterable[Mapping[str, Any]], spec: EntitySpec) -> List[DataPoint]:
        """Normalize chronologically ordered state records for ``spec``."""
        return HistoryProcessor.process(records, spec)

    @staticmethod
    def transform_statistics(
        records: Iterable[Mapping[str, Any]], spec: EntitySpec
    ) -> List[DataPoint]:
        """Normalize chronologically ordered statistic records for ``spec``."""
        statistics = spec.statistics or StatisticsSpec()
        return StatisticsProcessor.process(records, statistics, spec.entity)

    @classmethod
    async def fetch_points(
        cls,
        source: DataSource,
        spec: EntitySpec,
        start_time: datetime,
        end_time: datetime,
    ) -> List[DataPoint]:
        """
        Fetch and transform one entity's data.

        Returns an empty list when the provider fails; the error is logged and
        never propagates into the rest of the update cycle.
        """
        try:
            if spec.statistics is not None:
                records = await source.fetch_statistics(
                    spec.entity, start_time, end_time, spec.statistics.period
                )
                return cls.transform_statistics(records or [], spec)

            records = await source.fetch_history(spec.entity, start_time, end_time)
            return cls.transform_history(records or [], spec)
        except FETCH_ERRORS:
            logger.exception("Error fetching data for %s", spec.entity)
            return []


__all__ = ["DataTransformer", "FETCH_ERRORS"]
