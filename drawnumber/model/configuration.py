"""Game settings and the YAML file they are read from."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_CONFIG_FILE = Path(__file__).with_name("config.yml")
CONFIG_ENV = "DRAWNUMBER_CONFIG"

MIN_KEY = "minimum"
MAX_KEY = "maximum"
ATTEMPTS_KEY = "attempts"
_FIELDS = {MIN_KEY: "minimum", MAX_KEY: "maximum", ATTEMPTS_KEY: "attempts"}


class ConfigurationError(ValueError):
    """The configuration file is unreadable or holds an invalid value."""


@dataclass(frozen=True)
class Configuration:
    """Range and attempt budget of a game."""

    minimum: int = 0
    maximum: int = 100
    attempts: int = 10

    def is_consistent(self) -> bool:
        return self.attempts > 0 and self.minimum < self.maximum

    def replace(self, **changes: int) -> "Configuration":
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, int]:
        return dataclasses.asdict(self)


def _to_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigurationError(f"Value of '{key}' must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise ConfigurationError(f"Value of '{key}' must be an integer, got {raw!r}") from exc
    raise ConfigurationError(f"Value of '{key}' must be an integer, got {raw!r}")


def parse_configuration(data: Any, base: Optional[Configuration] = None) -> Configuration:
    """Build a configuration from a decoded YAML document."""
    configuration = base or Configuration()
    if data is None:
        return configuration
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping of settings")
    changes: Dict[str, int] = {}
    for key, raw in data.items():
        field = _FIELDS.get(str(key).strip().lower())
        if field is None:
            continue
        changes[field] = _to_int(field, raw)
    return configuration.replace(**changes)


def resolve_config_path(path: Union[str, os.PathLike, None] = None) -> Path:
    if path:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV)
    if env_path and env_path.strip():
        return Path(env_path.strip())
    return DEFAULT_CONFIG_FILE


def read_configuration(path: Union[str, os.PathLike, None] = None) -> Configuration:
    """Load the settings file, raising ``ConfigurationError`` on any failure."""
    config_path = resolve_config_path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {config_path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Configuration file {config_path} is not valid UTF-8: {exc.reason}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed configuration file {config_path}: {exc}") from exc
    return parse_configuration(data)


__all__ = [
    "CONFIG_ENV",
    "Configuration",
    "ConfigurationError",
    "DEFAULT_CONFIG_FILE",
    "parse_configuration",
    "read_configuration",
    "resolve_config_path",
]
