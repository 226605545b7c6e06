"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import orjson
import pytest

from pika_chart.data_models import ChartKind, ChartOptions, Series
from pika_chart.render_adapter import ChartSurface, RenderAdapter

BASE_TIME = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def ts(minutes: int) -> datetime:
    """Timestamp ``minutes`` after the shared base time."""
    return BASE_TIME + timedelta(minutes=minutes)


class FakeDataSource:
    """In-memory data source for testing."""

    def __init__(self):
        self.history: Dict[str, List[Mapping[str, Any]]] = {}
        self.statistics: Dict[str, List[Mapping[str, Any]]] = {}
        self.errors: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[Tuple[str, str]] = []

    async def _wait_gate(self, entity_id: str) -> None:
        gate = self.gates.get(entity_id)
        if gate is not None:
            await gate.wait()

    async def fetch_history(self, entity_id: str, start_time: datetime, end_time: datetime):
        """Return stored history records for an entity."""
        self.calls.append(("history", entity_id))
        await self._wait_gate(entity_id)
        if entity_id in self.errors:
            raise self.errors[entity_id]
        return list(self.history.get(entity_id, []))

    async def fetch_statistics(self, entity_id: str, start_time: datetime, end_time: datetime, period: str):
        """Return stored statistic records for an entity."""
        self.calls.append(("statistics", entity_id))
        await self._wait_gate(entity_id)
        if entity_id in self.errors:
            raise self.errors[entity_id]
        return list(self.statistics.get(entity_id, []))


class RecordingAdapter(RenderAdapter):
    """Adapter that records every call instead of drawing."""

    SUPPORTED_KINDS = frozenset(ChartKind)

    def __init__(self):
        super().__init__()
        self.events: List[Tuple[str, Any]] = []
        self.snapshots: List[Tuple[Series, ...]] = []

    def _create_figure(self, surface: ChartSurface, options: ChartOptions) -> Any:
        self.events.append(("mount", surface.surface_id))
        return {"surface": surface.surface_id}

    def _draw(self, series: Tuple[Series, ...]) -> None:
        self.events.append(("update", len(series)))
        self.snapshots.append(series)

    def _release(self) -> None:
        self.events.append(("destroy", None))

    def _export(self, path: Path) -> None:
        path.write_text("recorded")


class FakeWebSocket:
    """Scripted websocket connection returning queued JSON messages."""

    def __init__(self, messages: Optional[List[Dict[str, Any]]] = None):
        self.incoming: List[Dict[str, Any]] = list(messages or [])
        self.sent: List[Dict[str, Any]] = []
        self.closed = False

    async def send(self, data: str) -> None:
        """Record an outgoing JSON frame."""
        self.sent.append(orjson.loads(data))

    async def recv(self) -> str:
        """Return the next scripted frame."""
        if not self.incoming:
            raise AssertionError("No scripted websocket message left")
        return orjson.dumps(self.incoming.pop(0)).decode()

    async def close(self) -> None:
        """Mark the connection closed."""
        self.closed = True


@pytest.fixture
def fake_data_source() -> FakeDataSource:
    """Provide an empty fake data source."""
    return FakeDataSource()


@pytest.fixture
def recording_adapter_factory():
    """Provide a factory that remembers every adapter it builds."""

    class Factory:
        def __init__(self):
            self.built: List[RecordingAdapter] = []

        def __call__(self) -> RecordingAdapter:
            adapter = RecordingAdapter()
            self.built.append(adapter)
            return adapter

        @property
        def last(self) -> RecordingAdapter:
            return self.built[-1]

    return Factory()


@pytest.fixture
def surface() -> ChartSurface:
    """Provide an empty drawing surface."""
    return ChartSurface(surface_id="chart-container", width=640)


@pytest.fixture
def fake_websocket_factory():
    """Provide the scripted websocket class."""
    return FakeWebSocket


@pytest.fixture
def make_timestamp():
    """Provide a helper building timestamps relative to a fixed base time."""
    return ts
