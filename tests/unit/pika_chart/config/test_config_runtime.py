"""Tests for config.runtime module."""

import pytest

from pika_chart.config import runtime
from pika_chart.config.errors import ConfigurationError
from pika_chart.config.runtime_helpers import DotenvLoader, parse_dotenv_line


@pytest.fixture(autouse=True)
def isolated_dotenv(monkeypatch, tmp_path):
    """Point dotenv lookups at a temporary file and clear cached values."""
    env_file = tmp_path / ".env"
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", (env_file,))
    runtime.reset_default_values()
    yield env_file
    runtime.reset_default_values()


class TestEnvHelpers:
    """Tests for env_* helpers."""

    def test_env_str(self, monkeypatch) -> None:
        """Strings are stripped and blanks fall back to defaults."""
        monkeypatch.setenv("PIKA_TEST_STR", "  value ")
        monkeypatch.setenv("PIKA_TEST_BLANK", " ")

        assert runtime.env_str("PIKA_TEST_STR") == "value"
        assert runtime.env_str("PIKA_TEST_BLANK", "fallback") == "fallback"
        assert runtime.env_str("PIKA_TEST_UNSET", "fallback") == "fallback"

    def test_required_missing(self, monkeypatch) -> None:
        """Required variables raise when unset."""
        monkeypatch.delenv("PIKA_TEST_UNSET", raising=False)

        with pytest.raises(ConfigurationError, match="PIKA_TEST_UNSET"):
            runtime.env_str("PIKA_TEST_UNSET", required=True)

    def test_env_float(self, monkeypatch) -> None:
        """Floats are coerced and validated."""
        monkeypatch.setenv("PIKA_TEST_FLOAT", "2.5")
        monkeypatch.setenv("PIKA_TEST_BAD", "abc")

        assert runtime.env_float("PIKA_TEST_FLOAT") == 2.5
        assert runtime.env_float("PIKA_TEST_UNSET", 7.0) == 7.0
        with pytest.raises(ConfigurationError, match="float"):
            runtime.env_float("PIKA_TEST_BAD")

    def test_dotenv_fallback(self, monkeypatch, isolated_dotenv) -> None:
        """Values missing from the environment are read from the dotenv file."""
        monkeypatch.delenv("PIKA_TEST_DOTENV", raising=False)
        isolated_dotenv.write_text("# comment\nexport PIKA_TEST_DOTENV='from-file'\n")

        assert runtime.env_str("PIKA_TEST_DOTENV") == "from-file"

    def test_environment_wins_over_dotenv(self, monkeypatch, isolated_dotenv) -> None:
        """Process environment takes precedence."""
        isolated_dotenv.write_text("PIKA_TEST_DOTENV=from-file\n")
        monkeypatch.setenv("PIKA_TEST_DOTENV", "from-env")

        assert runtime.env_str("PIKA_TEST_DOTENV") == "from-env"


class TestDotenvLoader:
    """Tests for DotenvLoader."""

    def test_missing_file(self, tmp_path) -> None:
        """Absent files yield no values."""
        assert DotenvLoader.load_from_file(tmp_path / "nope.env") == {}

    def test_parses_lines(self, tmp_path) -> None:
        """Comments and malformed lines are skipped; quotes are removed."""
        path = tmp_path / "test.env"
        path.write_text('A=1\n\n# skipped\nnot a pair\nB="two"\nexport C = three\n')

        assert DotenvLoader.load_from_file(path) == {"A": "1", "B": "two", "C": "three"}

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("TOKEN=abc # rotated weekly", ("TOKEN", "abc")),
            ("TOKEN='a # b'", ("TOKEN", "a # b")),
            ("QUOTED=\"mismatched'", ("QUOTED", "\"mismatched'")),
            ("=orphan", None),
            ("   # comment", None),
        ],
    )
    def test_parse_dotenv_line(self, line, expected) -> None:
        """Inline comments end unquoted values; only matching quotes are removed."""
        assert parse_dotenv_line(line) == expected


class TestLoadJson:
    """Tests for load_json function."""

    def test_relative_to_base_dir(self, tmp_path) -> None:
        """Relative paths resolve against base_dir."""
        (tmp_path / "card.json").write_text('{"entities": ["sensor.a"]}')

        loaded = runtime.load_json("card.json", base_dir=tmp_path)

        assert loaded.payload == {"entities": ["sensor.a"]}
        assert loaded.path == tmp_path / "card.json"

    def test_invalid_json(self, tmp_path) -> None:
        """Malformed JSON raises a configuration error."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Failed to parse"):
            runtime.load_json(path)

    def test_top_level_must_be_object(self, tmp_path) -> None:
        """Top-level arrays are rejected."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="object"):
            runtime.load_json(path)
