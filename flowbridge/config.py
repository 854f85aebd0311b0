"""Environment-driven settings for the flowbridge CLI."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping, Optional


OUTPUT_FORMATS = ("json", "yaml")
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    """Raised when an environment setting has an invalid value."""


@dataclass(frozen=True)
class ConverterSettings:
    log_level: str = "WARNING"
    output_format: str = "json"
    json_indent: int = 2

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


DEFAULT_SETTINGS = ConverterSettings()


def _parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"FLOWBRIDGE_LOG_LEVEL must be one of: {', '.join(_LOG_LEVELS)}")
    return level


def _parse_output_format(raw: str) -> str:
    output_format = raw.strip().lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"FLOWBRIDGE_OUTPUT_FORMAT must be one of: {', '.join(OUTPUT_FORMATS)}")
    return output_format


def _parse_indent(raw: str) -> int:
    text = raw.strip()
    if not text.isdigit():
        raise ConfigError(f"FLOWBRIDGE_JSON_INDENT must be a non-negative integer, got {raw!r}")
    return int(text)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ConverterSettings:
    env = os.environ if environ is None else environ
    return ConverterSettings(
        log_level=_parse_log_level(env.get("FLOWBRIDGE_LOG_LEVEL", DEFAULT_SETTINGS.log_level)),
        output_format=_parse_output_format(env.get("FLOWBRIDGE_OUTPUT_FORMAT", DEFAULT_SETTINGS.output_format)),
        json_indent=_parse_indent(env.get("FLOWBRIDGE_JSON_INDENT", str(DEFAULT_SETTINGS.json_indent))),
    )
