"""Tests for adapters.factory module."""

import pytest

from pika_chart.adapters import MatplotlibAdapter, PlotlyAdapter, create_adapter_factory
from pika_chart.config.errors import ConfigurationError


class TestCreateAdapterFactory:
    """Tests for create_adapter_factory function."""

    @pytest.mark.parametrize("library, adapter_type", [("matplotlib", MatplotlibAdapter), ("plotly", PlotlyAdapter)])
    def test_known_libraries(self, library, adapter_type) -> None:
        """Each supported library yields a factory for its adapter."""
        factory = create_adapter_factory(library)

        adapter = factory()

        assert isinstance(adapter, adapter_type)
        assert factory() is not adapter

    def test_unknown_library(self) -> None:
        """Unknown libraries are rejected."""
        with pytest.raises(ConfigurationError, match="library"):
            create_adapter_factory("chartjs")
