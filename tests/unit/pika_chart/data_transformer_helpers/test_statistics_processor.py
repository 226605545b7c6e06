"""Tests for data_transformer_helpers.statistics_processor module."""

from datetime import datetime, timezone

import pytest

from pika_chart.data_models import DataPoint, StatisticsSpec
from pika_chart.data_transformer_helpers.statistics_processor import (
    StatisticsProcessor,
    candidate_fields,
)

T1 = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
T2 = datetime(2025, 1, 15, 13, 0, tzinfo=timezone.utc)


class TestCandidateFields:
    """Tests for candidate_fields function."""

    @pytest.mark.parametrize(
        "stat_type, expected",
        [
            ("max", ("max", "mean", "state")),
            ("mean", ("mean", "state")),
            ("state", ("state", "mean")),
            ("sum", ("sum", "mean", "state")),
        ],
    )
    def test_fallback_chain(self, stat_type, expected) -> None:
        """Selected field first, then mean, then state, without repeats."""
        assert candidate_fields(stat_type) == expected


class TestProcess:
    """Tests for StatisticsProcessor.process."""

    def test_selects_configured_field(self) -> None:
        """The max statistic is read when configured."""
        records = [{"start": T1, "mean": 5, "min": 3, "max": 8}]

        points = StatisticsProcessor.process(records, StatisticsSpec(stat_type="max"))

        assert points == [DataPoint(x=T1, y=8.0)]

    def test_defaults_to_mean(self) -> None:
        """The default statistic is the mean."""
        records = [{"start": T1, "mean": 5, "min": 3, "max": 8}]

        points = StatisticsProcessor.process(records, StatisticsSpec())

        assert points == [DataPoint(x=T1, y=5.0)]

    def test_falls_back_to_mean_then_state(self) -> None:
        """Absent selected values fall back to mean, then state."""
        records = [
            {"start": T1, "mean": 4.5, "state": 9},
            {"start": T2, "state": 9},
        ]

        points = StatisticsProcessor.process(records, StatisticsSpec(stat_type="sum"))

        assert points == [DataPoint(x=T1, y=4.5), DataPoint(x=T2, y=9.0)]

    def test_non_finite_selection_falls_back(self) -> None:
        """A NaN selection is treated like an absent one."""
        records = [{"start": T1, "max": float("nan"), "mean": None, "state": 2}]

        points = StatisticsProcessor.process(records, StatisticsSpec(stat_type="max"))

        assert points == [DataPoint(x=T1, y=2.0)]

    def test_drops_record_only_when_all_fallbacks_fail(self) -> None:
        """Records with no finite candidate are dropped."""
        records = [
            {"start": T1, "max": None, "mean": None, "state": None},
            {"start": T2, "max": 1},
        ]

        points = StatisticsProcessor.process(records, StatisticsSpec(stat_type="max"))

        assert points == [DataPoint(x=T2, y=1.0)]

    def test_zero_is_a_valid_value(self) -> None:
        """A zero statistic is kept instead of triggering a fallback."""
        records = [{"start": T1, "sum": 0, "mean": 7}]

        points = StatisticsProcessor.process(records, StatisticsSpec(stat_type="sum"))

        assert points == [DataPoint(x=T1, y=0.0)]

    def test_epoch_millisecond_start(self) -> None:
        """Start times given as epoch milliseconds are converted."""
        records = [{"start": 1736942400000, "mean": 1}]

        points = StatisticsProcessor.process(records, StatisticsSpec())

        assert points == [DataPoint(x=T1, y=1.0)]
