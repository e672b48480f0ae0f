"""Configuration management for schemafield.

Loads environment variables (optionally from a .env file) and provides
centralized access to the defaults of the command line options.
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

from schemafield.analyzer.discovery import LANGUAGE_EXTENSIONS, SCOPES

__version__ = "1.0.0"

OUTPUT_FORMATS = ('text', 'table', 'json')

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self):
        """Initialize config by loading .env from the working directory."""
        load_dotenv(Path.cwd() / ".env")
        self._validate()

    def _validate(self):
        """Validate environment-provided values.

        Raises:
            ValueError: If a value is not one of the accepted choices
        """
        if self.language not in LANGUAGE_EXTENSIONS:
            raise ValueError(
                f"SCHEMAFIELD_LANGUAGE={self.language!r} is not supported. "
                f"Choose one of: {', '.join(LANGUAGE_EXTENSIONS)}"
            )
        if self.scope not in SCOPES:
            raise ValueError(
                f"SCHEMAFIELD_SCOPE={self.scope!r} is not supported. "
                f"Choose one of: {', '.join(SCOPES)}"
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"SCHEMAFIELD_FORMAT={self.output_format!r} is not supported. "
                f"Choose one of: {', '.join(OUTPUT_FORMATS)}"
            )
        # Raises on unparseable booleans
        self.include_tests

    @property
    def language(self) -> str:
        """Default language, 'go' unless SCHEMAFIELD_LANGUAGE says otherwise."""
        return os.getenv("SCHEMAFIELD_LANGUAGE", "go").strip().lower()

    @property
    def scope(self) -> str:
        """Default analysis scope ('package' or 'project')."""
        return os.getenv("SCHEMAFIELD_SCOPE", "package").strip().lower()

    @property
    def output_format(self) -> str:
        return os.getenv("SCHEMAFIELD_FORMAT", "text").strip().lower()

    @property
    def include_tests(self) -> bool:
        """Whether test files are analysed.

        Raises:
            ValueError: If SCHEMAFIELD_INCLUDE_TESTS is not a boolean
        """
        raw = os.getenv("SCHEMAFIELD_INCLUDE_TESTS", "true").strip().lower()
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise ValueError(f"SCHEMAFIELD_INCLUDE_TESTS={raw!r} is not a boolean")

    @property
    def exclude_dirs(self) -> List[str]:
        """Extra directory names to skip, comma separated."""
        raw = os.getenv("SCHEMAFIELD_EXCLUDE_DIRS", "")
        return [part.strip() for part in raw.split(",") if part.strip()]


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Forget the singleton so the next get_config() re-reads the environment."""
    global _config
    _config = None
