"""Tests for config.card_config module."""

import json

import pytest

from pika_chart.config.card_config import (
    DEFAULT_HEIGHT,
    DEFAULT_HOURS_TO_SHOW,
    CardConfig,
    get_stub_config,
    load_card_config,
    parse_card_config,
)
from pika_chart.config.errors import ConfigurationError
from pika_chart.data_models import AxisBounds, ChartKind, StatisticsSpec, ThemeMode


class TestParseCardConfig:
    """Tests for parse_card_config function."""

    def test_defaults(self) -> None:
        """Omitted options take their defaults."""
        config = parse_card_config({"entities": ["sensor.temp"]})

        assert config.entities[0].entity == "sensor.temp"
        assert config.chart_type is ChartKind.LINE
        assert config.library == "matplotlib"
        assert config.hours_to_show == DEFAULT_HOURS_TO_SHOW
        assert config.refresh_interval == 60.0
        assert config.show_legend and config.show_tooltip and config.show_grid and config.animate
        assert config.theme is ThemeMode.AUTO
        assert config.height == DEFAULT_HEIGHT
        assert config.stacked is False
        assert config.xaxis is None
        assert config.yaxis == ()

    def test_full_entity(self) -> None:
        """Every entity option is parsed."""
        config = parse_card_config(
            {
                "entities": [
                    {
                        "entity": "sensor.energy",
                        "name": "Energy",
                        "color": "#00ff00",
                        "unit": "kWh",
                        "type": "bar",
                        "attribute": "total",
                        "yaxis_id": 1,
                        "statistics": {"period": "day", "stat_type": "sum"},
                        "show": {"in_chart": False},
                    }
                ]
            }
        )

        entity = config.entities[0]
        assert entity.name == "Energy"
        assert entity.color == "#00ff00"
        assert entity.unit == "kWh"
        assert entity.kind is ChartKind.BAR
        assert entity.attribute == "total"
        assert entity.axis_id == "1"
        assert entity.statistics == StatisticsSpec(period="day", stat_type="sum")
        assert entity.show is False

    def test_statistics_true_uses_defaults(self) -> None:
        """A bare statistics flag selects hourly means."""
        config = parse_card_config({"entities": [{"entity": "sensor.a", "statistics": True}]})

        assert config.entities[0].statistics == StatisticsSpec(period="hour", stat_type="mean")

    @pytest.mark.parametrize("raw", [{}, {"entities": []}, {"entities": None}])
    def test_requires_entities(self, raw) -> None:
        """A configuration without entities is rejected."""
        with pytest.raises(ConfigurationError, match="at least one entity"):
            parse_card_config(raw)

    @pytest.mark.parametrize(
        "raw, field",
        [
            ({"entities": ["sensor.a"], "chart_type": "donut"}, "chart_type"),
            ({"entities": ["sensor.a"], "library": "chartjs"}, "library"),
            ({"entities": ["sensor.a"], "theme": "blue"}, "theme"),
            ({"entities": ["sensor.a"], "hours_to_show": 0}, "hours_to_show"),
            ({"entities": ["sensor.a"], "hours_to_show": "24"}, "hours_to_show"),
            ({"entities": ["sensor.a"], "show_legend": "yes"}, "show_legend"),
            ({"entities": ["sensor.a"], "height": -1}, "height"),
            ({"entities": [{"name": "no id"}]}, "entities[0].entity"),
            ({"entities": [{"entity": "sensor.a", "statistics": {"period": "year"}}]}, "period"),
            ({"entities": "sensor.a"}, "entities"),
        ],
    )
    def test_invalid_values(self, raw, field) -> None:
        """Invalid values name the offending field."""
        with pytest.raises(ConfigurationError, match=field.replace("[", r"\[").replace("]", r"\]")):
            parse_card_config(raw)

    def test_rejects_non_mapping(self) -> None:
        """The configuration itself must be a mapping."""
        with pytest.raises(ConfigurationError):
            parse_card_config(["sensor.a"])

    def test_axes(self) -> None:
        """X and y axis definitions are parsed; non-numeric bounds are ignored."""
        config = parse_card_config(
            {
                "entities": ["sensor.a"],
                "xaxis": {"show": False},
                "yaxis": [{"id": "temp", "min": -10, "max": "auto"}, {"show": False}],
            }
        )

        assert config.xaxis == AxisBounds(show=False)
        first, second = config.yaxis
        assert (first.id, first.min, first.max) == ("temp", -10.0, None)
        assert second.id == "1"
        assert second.show is False
        assert config.axis_definition("temp") is first
        assert config.axis_definition("missing") is None
        assert config.axis_definition(None) is None

    def test_single_yaxis_mapping(self) -> None:
        """A single y-axis mapping is accepted."""
        config = parse_card_config({"entities": ["sensor.a"], "yaxis": {"id": "0", "max": 10}})

        assert len(config.yaxis) == 1
        assert config.yaxis[0].to_bounds() == AxisBounds(show=True, min=None, max=10.0)


class TestCardConfig:
    """Tests for the CardConfig dataclass."""

    def test_rejects_empty_entities(self) -> None:
        """Direct construction also requires entities."""
        with pytest.raises(ConfigurationError):
            CardConfig(entities=())


class TestStubAndLoad:
    """Tests for get_stub_config and load_card_config."""

    def test_stub_config_parses(self) -> None:
        """The editor stub is a valid configuration."""
        config = parse_card_config(get_stub_config())

        assert config.entities[0].name == "Temperature"

    def test_load_card_config(self, tmp_path) -> None:
        """Configurations load from JSON files."""
        path = tmp_path / "card.json"
        path.write_text(json.dumps({"entities": ["sensor.a"], "library": "plotly"}))

        config = load_card_config(path)

        assert config.library == "plotly"

    def test_load_missing_file(self, tmp_path) -> None:
        """Missing files raise a configuration error."""
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_card_config(tmp_path / "missing.json")
