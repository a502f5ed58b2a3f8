"""Configuration loading and validation."""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import Any

import yaml

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MBOXCLASS_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/mboxclass/config.yaml")
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_ENCODING = "utf-8"
DEFAULT_PRECISION = 6
DEFAULT_SPAM_LABEL = "spam"


class ConfigurationError(ValueError):
    """Raised when configuration or command-line input is invalid."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    file: Path | None = None
    file_level: str | None = None


@dataclass(frozen=True)
class SpamConfig:
    """Defaults for the synthetic spam collection."""

    label: str = DEFAULT_SPAM_LABEL
    emails: int | None = None
    matches: Fraction | None = None

    @property
    def enabled(self) -> bool:
        return self.emails is not None and self.matches is not None


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    spam: SpamConfig = field(default_factory=SpamConfig)
    encoding: str = DEFAULT_ENCODING
    precision: int = DEFAULT_PRECISION


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicitly requested file (argument or ``$MBOXCLASS_CONFIG``) must exist.
    When only the default location is consulted and nothing is there, the
    built-in defaults are returned.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigurationError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s; using defaults", config_path)
        return Config()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError("Configuration root must be a mapping.")

    return _parse_config(raw)


def parse_matches(value: Any, field_name: str) -> Fraction:
    """Parse a non-negative rational such as ``9``, ``4.5`` or ``9/2`` exactly."""

    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a number.")
    try:
        if isinstance(value, float):
            # YAML floats are parsed from text; go back through repr to stay exact.
            result = Fraction(repr(value))
        else:
            result = Fraction(str(value).strip())
    except (ValueError, ZeroDivisionError) as exc:
        raise ConfigurationError(f"{field_name} must be a number, got {value!r}.") from exc
    if result < 0:
        raise ConfigurationError(f"{field_name} cannot be negative.")
    return result


def parse_email_count(value: Any, field_name: str) -> int:
    """Parse a non-negative integer email count."""

    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if isinstance(value, int):
        result = value
    else:
        try:
            result = int(str(value).strip())
        except ValueError as exc:
            raise ConfigurationError(
                f"{field_name} must be an integer, got {value!r}."
            ) from exc
    if result < 0:
        raise ConfigurationError(f"{field_name} cannot be negative.")
    return result


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    return Config(
        logging=_parse_logging(raw.get("logging")),
        spam=_parse_spam(raw.get("spam")),
        encoding=_parse_encoding(raw.get("encoding")),
        precision=_parse_precision(raw.get("precision")),
    )


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigurationError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    file_level = value.get("file_level")
    if file_level is not None:
        file_level = str(file_level).lower()
    file_value = value.get("file")
    if file_value is None:
        if file_level is not None:
            raise ConfigurationError("logging.file_level requires logging.file.")
        return LoggingConfig(level=level)
    if not isinstance(file_value, str) or not file_value.strip():
        raise ConfigurationError("logging.file must be a non-empty path.")
    return LoggingConfig(level=level, file=Path(file_value).expanduser(), file_level=file_level)


def _parse_spam(value: Any) -> SpamConfig:
    if value is None:
        return SpamConfig()
    if not isinstance(value, dict):
        raise ConfigurationError("spam must be a mapping.")
    label = str(value.get("label") or DEFAULT_SPAM_LABEL).strip()
    if not label:
        raise ConfigurationError("spam.label cannot be empty.")
    emails_value = value.get("emails")
    matches_value = value.get("matches")
    if (emails_value is None) != (matches_value is None):
        raise ConfigurationError("spam requires both 'emails' and 'matches'.")
    if emails_value is None:
        return SpamConfig(label=label)
    emails = parse_email_count(emails_value, "spam.emails")
    matches = parse_matches(matches_value, "spam.matches")
    if matches > emails:
        raise ConfigurationError("spam.matches cannot exceed spam.emails.")
    return SpamConfig(label=label, emails=emails, matches=matches)


def _parse_encoding(value: Any) -> str:
    if value is None:
        return DEFAULT_ENCODING
    encoding = str(value).strip()
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ConfigurationError(f"Unknown encoding: {encoding}") from exc
    return encoding


def _parse_precision(value: Any) -> int:
    if value is None:
        return DEFAULT_PRECISION
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError("precision must be a positive integer.")
    return value


__all__ = [
    "Config",
    "LoggingConfig",
    "SpamConfig",
    "ConfigurationError",
    "load_config",
    "parse_email_count",
    "parse_matches",
]
