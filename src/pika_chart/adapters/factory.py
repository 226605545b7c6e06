"""Backend selection: library name to adapter factory."""

from __future__ import annotations

from typing import Callable, Dict, Type

from ..config.card_config import SUPPORTED_LIBRARIES
from ..config.errors import ConfigurationError
from ..render_adapter import RenderAdapter
from .matplotlib_adapter import MatplotlibAdapter
from .plotly_adapter import PlotlyAdapter

AdapterFactory = Callable[[], RenderAdapter]

ADAPTER_TYPES: Dict[str, Type[RenderAdapter]] = {
    "matplotlib": MatplotlibAdapter,
    "plotly": PlotlyAdapter,
}


def create_adapter_factory(library: str) -> AdapterFactory:
    """Return a zero-argument factory building the adapter for ``library``."""
    adapter_type = ADAPTER_TYPES.get(library)
    if adapter_type is None:
        raise ConfigurationError.unsupported_choice("library", library, SUPPORTED_LIBRARIES)
    return adapter_type
