"""Helpers for turning raw provider records into data points."""

from .history_processor import HistoryProcessor
from .statistics_processor import StatisticsProcessor
from .value_parsing import parse_finite_float, parse_timestamp

__all__ = ["HistoryProcessor", "StatisticsProcessor", "parse_finite_float", "parse_timestamp"]
