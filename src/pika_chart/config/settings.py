from __future__ import annotations

"""Connection settings for the Home Assistant data source."""


from dataclasses import dataclass
from functools import lru_cache

from .errors import ConfigurationError
from .runtime import env_float, env_str

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class HomeAssistantSettings:
    url: str
    token: str
    request_timeout_seconds: float

    @property
    def websocket_url(self) -> str:
        base = self.url.rstrip("/")
        if base.startswith("https://"):
            base = "wss://" + base[len("https://") :]
        elif base.startswith("http://"):
            base = "ws://" + base[len("http://") :]
        return f"{base}/api/websocket"


@lru_cache(maxsize=1)
def get_home_assistant_settings() -> HomeAssistantSettings:
    url = env_str("PIKA_CHART_HA_URL", required=True)
    token = env_str("PIKA_CHART_HA_TOKEN", required=True)
    timeout = env_float("PIKA_CHART_REQUEST_TIMEOUT", or_value=DEFAULT_REQUEST_TIMEOUT_SECONDS)
    if timeout is None or timeout <= 0:
        raise ConfigurationError.invalid_value("PIKA_CHART_REQUEST_TIMEOUT", timeout, "Must be positive")
    if not url.startswith(("http://", "https://", "ws://", "wss://")):
        raise ConfigurationError.invalid_format("PIKA_CHART_HA_URL", url, "an http(s) or ws(s) URL")
    return HomeAssistantSettings(url=url, token=token, request_timeout_seconds=float(timeout))


__all__ = ["DEFAULT_REQUEST_TIMEOUT_SECONDS", "HomeAssistantSettings", "get_home_assistant_settings"]
