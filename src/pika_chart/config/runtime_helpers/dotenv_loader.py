"""Reader for the optional ``.env`` files backing the ``env_*`` helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


def parse_dotenv_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Split one ``KEY=value`` line.

    Returns ``None`` for blank lines, comments and lines without ``=``. A value
    wrapped in matching quotes is unwrapped verbatim; an unquoted value ends at
    the first `` #``.
    """
    text = line.strip()
    if not text or text.startswith("#") or "=" not in text:
        return None
    if text.startswith(_EXPORT_PREFIX):
        text = text[len(_EXPORT_PREFIX) :]

    key, raw_value = text.split("=", 1)
    key = key.strip()
    if not key:
        return None

    value = raw_value.strip()
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return key, value[1:-1]
    comment_start = value.find(" #")
    if comment_start != -1:
        value = value[:comment_start].rstrip()
    return key, value


class DotenvLoader:
    """Loads ``KEY=value`` pairs from .env-style files."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Read ``path``; later assignments of a key win.

        Returns an empty mapping when the file does not exist.

        Raises:
            ConfigurationError: If the file exists but cannot be read
        """
        if not path.is_file():
            return {}
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Failed to load configuration from {path}") from exc

        values: Dict[str, str] = {}
        for line in content.splitlines():
            parsed = parse_dotenv_line(line)
            if parsed is not None:
                key, value = parsed
                values[key] = value
        return values
