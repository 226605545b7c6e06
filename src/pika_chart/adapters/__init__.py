"""Concrete rendering backends."""

from .factory import ADAPTER_TYPES, AdapterFactory, create_adapter_factory
from .matplotlib_adapter import MatplotlibAdapter
from .plotly_adapter import PlotlyAdapter

__all__ = [
    "ADAPTER_TYPES",
    "AdapterFactory",
    "MatplotlibAdapter",
    "PlotlyAdapter",
    "create_adapter_factory",
]
