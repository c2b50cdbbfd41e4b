"""
Configuration management for the IO bridge.

Settings come from an optional YAML file:

    serializers:
      - iobridge.backends.raw:RawSerializer
      - mypackage.codecs:MsgPackSerializer
    duplicate_policy: first      # or "error"
    exec_timeout: null           # seconds; null waits forever
    encoding: utf-8
    log_level: WARNING

Omitted keys keep their defaults.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IOBRIDGE_CONFIG"

DEFAULT_SERIALIZERS = [
    "iobridge.backends.raw:RawSerializer",
    "iobridge.backends.json_backend:JsonSerializer",
    "iobridge.backends.yaml_backend:YamlSerializer",
]

DUPLICATE_POLICIES = ("first", "error")


class ConfigError(ValueError):
    """Raised when a configuration file is malformed."""
    pass


@dataclass(frozen=True)
class IOSettings:
    """
    Settings for one IO context.

    Properties:
        serializers:
            Backend classes to register, as "module:Class" strings,
            in lookup order
        duplicate_policy:
            "first" keeps the first backend registered under a type name,
            "error" refuses duplicate type names
        exec_timeout:
            Seconds to wait for a spawned process; None waits forever
        encoding:
            Text encoding used to decode process output
        log_level:
            Level applied to the package logger
    """

    serializers: List[str] = field(default_factory=lambda: list(DEFAULT_SERIALIZERS))
    duplicate_policy: str = "first"
    exec_timeout: Optional[float] = None
    encoding: str = "utf-8"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigError(
                f"duplicate_policy must be one of {DUPLICATE_POLICIES}, got {self.duplicate_policy!r}"
            )
        if self.exec_timeout is not None:
            if isinstance(self.exec_timeout, bool) or not isinstance(self.exec_timeout, (int, float)):
                raise ConfigError(f"exec_timeout must be a number, got {self.exec_timeout!r}")
            if self.exec_timeout <= 0:
                raise ConfigError(f"exec_timeout must be positive, got {self.exec_timeout!r}")
        if not isinstance(self.serializers, list) or not all(isinstance(s, str) for s in self.serializers):
            raise ConfigError("serializers must be a list of 'module:Class' strings")
        if logging.getLevelName(str(self.log_level).upper()) == f"Level {str(self.log_level).upper()}":
            raise ConfigError(f"Unknown log_level: {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IOSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)


def load_settings(config_path: Optional[str] = None) -> IOSettings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to the YAML file. If None, the IOBRIDGE_CONFIG
            environment variable is consulted; if that is unset too,
            defaults are returned.

    Raises:
        FileNotFoundError: If the named file does not exist
        ConfigError: If the file content is invalid
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        return IOSettings()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {config_path}: expected a mapping")

    logger.debug("Loaded IO settings from %s", config_path)
    return IOSettings.from_dict(data)


def configure_logging(settings: IOSettings) -> None:
    """Apply the configured level to the package logger."""
    logging.getLogger("iobridge").setLevel(str(settings.log_level).upper())
