"""Helper modules for runtime configuration."""

from .dotenv_loader import DotenvLoader, parse_dotenv_line

__all__ = ["DotenvLoader", "parse_dotenv_line"]
