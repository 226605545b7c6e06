"""Error types raised by the chart lifecycle and data-source layers."""

from __future__ import annotations


class ChartError(RuntimeError):
    """Base class for chart rendering errors."""


class SurfaceResolutionError(ChartError):
    """Raised when no drawing surface is available at initialize time."""

    @classmethod
    def missing(cls, context: str = "") -> "SurfaceResolutionError":
        """Create error for a surface that could not be found."""
        msg = "Chart drawing surface not found"
        if context:
            msg += f": {context}"
        return cls(msg)

    @classmethod
    def not_empty(cls, surface_id: str) -> "SurfaceResolutionError":
        """Create error for a surface that already holds content."""
        return cls(f"Chart drawing surface {surface_id!r} is already in use")


class ChartStateError(ChartError):
    """Raised when a lifecycle method is called from an invalid state."""

    @classmethod
    def invalid_transition(cls, operation: str, state: str) -> "ChartStateError":
        """Create error for an operation not allowed in the current state."""
        return cls(f"Cannot {operation} while chart is {state}")


class DataSourceError(RuntimeError):
    """Raised when the time-series provider rejects or fails a query."""

    @classmethod
    def request_failed(cls, request_type: str, detail: str = "") -> "DataSourceError":
        """Create error for a failed provider request."""
        msg = f"Request {request_type!r} failed"
        if detail:
            msg += f": {detail}"
        return cls(msg)

    @classmethod
    def authentication_failed(cls, detail: str = "") -> "DataSourceError":
        """Create error for a rejected access token."""
        msg = "Authentication with data source failed"
        if detail:
            msg += f": {detail}"
        return cls(msg)


__all__ = ["ChartError", "ChartStateError", "DataSourceError", "SurfaceResolutionError"]
