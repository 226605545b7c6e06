"""
Time-series data sources.

``DataSource`` is the boundary consumed by the update cycle: two async queries
returning chronologically ordered raw records. ``HomeAssistantDataSource``
implements it over the Home Assistant websocket API.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .config.settings import HomeAssistantSettings
from .errors import DataSourceError

logger = logging.getLogger(__name__)

# Compressed state keys used by history/history_during_period
_COMPRESSED_STATE_KEYS = {"s": "state", "a": "attributes", "lc": "last_changed", "lu": "last_updated"}

STATISTIC_FIELDS = ["min", "max", "mean", "sum", "state"]


class DataSource(Protocol):
    """Provider of raw history and statistic records."""

    async def fetch_history(
        self, entity_id: str, start_time: datetime, end_time: datetime
    ) -> List[Mapping[str, Any]]: ...

    async def fetch_statistics(
        self, entity_id: str, start_time: datetime, end_time: datetime, period: str
    ) -> List[Mapping[str, Any]]: ...


def expand_state_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``record`` with compressed keys expanded to full state fields."""
    if "state" in record:
        return dict(record)
    expanded: Dict[str, Any] = {}
    for key, value in record.items():
        expanded[_COMPRESSED_STATE_KEYS.get(key, key)] = value
    # last_changed is omitted when it equals last_updated
    if "last_changed" not in expanded and "last_updated" in expanded:
        expanded["last_changed"] = expanded["last_updated"]
    expanded.setdefault("attributes", {})
    return expanded


class HomeAssistantDataSource:
    """Websocket client for Home Assistant history, statistics and states."""

    def __init__(
        self,
        settings: HomeAssistantSettings,
        *,
        connection_factory: Optional[Callable[..., Any]] = None,
    ):
        self.settings = settings
        self._connection_factory = connection_factory or websockets.connect
        self._ws: Optional[Any] = None
        self._next_id = 1
        self._lock = asyncio.Lock()
        self._connect_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def connect(self) -> None:
        """Open the websocket and complete the auth handshake; concurrent callers share one connection."""
        async with self._connect_lock:
            if self._ws is None:
                await self._open()

    async def _open(self) -> None:
        timeout = self.settings.request_timeout_seconds
        try:
            ws = await asyncio.wait_for(
                self._connection_factory(self.settings.websocket_url, max_size=None, close_timeout=10),
                timeout=timeout,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            raise DataSourceError.request_failed("connect", str(exc)) from exc

        try:
            await self._authenticate(ws, timeout)
        except DataSourceError:
            await ws.close()
            raise
        self._ws = ws
        self._next_id = 1
        logger.info("Connected to Home Assistant at %s", self.settings.url)

    async def _authenticate(self, ws: Any, timeout: float) -> None:
        greeting = orjson.loads(await asyncio.wait_for(ws.recv(), timeout=timeout))
        if greeting.get("type") != "auth_required":
            raise DataSourceError.authentication_failed(f"unexpected greeting {greeting.get('type')!r}")

        await ws.send(orjson.dumps({"type": "auth", "access_token": self.settings.token}).decode())
        reply = orjson.loads(await asyncio.wait_for(ws.recv(), timeout=timeout))
        if reply.get("type") != "auth_ok":
            raise DataSourceError.authentication_failed(str(reply.get("message", "")))

    async def close(self) -> None:
        """Close the websocket connection."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()

    async def call(self, payload: Dict[str, Any]) -> Any:
        """Send one command and return its ``result`` payload."""
        await self.connect()
        async with self._lock:
            ws = self._ws
            if ws is None:
                raise DataSourceError.request_failed(str(payload.get("type")), "connection closed")
            message_id = self._next_id
            self._next_id += 1
            request = dict(payload, id=message_id)
            try:
                await ws.send(orjson.dumps(request).decode())
                response = await self._receive_result(ws, message_id)
            except ConnectionClosed as exc:
                self._ws = None
                raise DataSourceError.request_failed(str(payload.get("type")), "connection closed") from exc

        if not response.get("success", False):
            error = response.get("error") or {}
            raise DataSourceError.request_failed(str(payload.get("type")), str(error.get("message", "")))
        return response.get("result")

    async def _receive_result(self, ws: Any, message_id: int) -> Dict[str, Any]:
        timeout = self.settings.request_timeout_seconds
        while True:
            message = orjson.loads(await asyncio.wait_for(ws.recv(), timeout=timeout))
            if message.get("id") == message_id and message.get("type") == "result":
                return message
            logger.debug("Skipping unrelated websocket message %s", message.get("type"))

    async def fetch_history(
        self, entity_id: str, start_time: datetime, end_time: datetime
    ) -> List[Mapping[str, Any]]:
        result = await self.call(
            {
                "type": "history/history_during_period",
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
                "entity_ids": [entity_id],
                "include_start_time_state": True,
                "significant_changes_only": True,
                "minimal_response": False,
                "no_attributes": False,
            }
        )
        records = (result or {}).get(entity_id) or []
        return [expand_state_record(record) for record in records]

    async def fetch_statistics(
        self, entity_id: str, start_time: datetime, end_time: datetime, period: str
    ) -> List[Mapping[str, Any]]:
        result = await self.call(
            {
                "type": "recorder/statistics_during_period",
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
                "statistic_ids": [entity_id],
                "period": period,
                "types": STATISTIC_FIELDS,
            }
        )
        return list((result or {}).get(entity_id) or [])

    async def fetch_states(self) -> Dict[str, Mapping[str, Any]]:
        """Return the live state table keyed by entity id."""
        result = await self.call({"type": "get_states"})
        return {state["entity_id"]: state for state in result or [] if "entity_id" in state}


__all__ = ["DataSource", "HomeAssistantDataSource", "STATISTIC_FIELDS", "expand_state_record"]
