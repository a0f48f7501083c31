"""Engine configuration.

Flags of the transition engine can be set in code or loaded from a YAML
file and validated before the first transition runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from statecycle.utils.logging import configure_logging
from statecycle.utils.result import ConfigError, Err, Ok, Result

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"

    def apply(self, stream: Any = None) -> None:
        """Configure structlog with these settings."""
        configure_logging(level=self.level, format_type=self.format, stream=stream)


@dataclass
class EngineConfig:
    """
    Configuration of one transition engine.

    Attributes:
        silent: Swallow hook failures after reporting them (abort only the
            remaining hooks of the failing list) instead of raising
        suppress_enter_on_self_loop: Skip ENTER hooks when a state
            transitions into itself
        suppress_exit_on_self_loop: Skip EXIT hooks when a state
            transitions into itself
        logging: Logging settings, applied with ``config.logging.apply()``
    """

    silent: bool = True
    suppress_enter_on_self_loop: bool = False
    suppress_exit_on_self_loop: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Result["EngineConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result["EngineConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Accepts the flags at the top level or nested under ``engine``.

        Args:
            data: Configuration dictionary

        Returns:
            Result with validated config or error
        """
        engine_data = data.get("engine", data)
        if not isinstance(engine_data, dict):
            return Err(ConfigError(field="engine", message="Must be a mapping"))

        flags: dict[str, bool] = {}
        for name in ("silent", "suppress_enter_on_self_loop", "suppress_exit_on_self_loop"):
            if name not in engine_data:
                continue
            value = engine_data[name]
            if not isinstance(value, bool):
                return Err(ConfigError(
                    field=name,
                    message=f"Must be a boolean, got {value!r}",
                ))
            flags[name] = value

        logging_data = data.get("logging", {}) or {}
        if not isinstance(logging_data, dict):
            return Err(ConfigError(field="logging", message="Must be a mapping"))

        config = cls(
            logging=LoggingConfig(
                level=str(logging_data.get("level", "info")),
                format=str(logging_data.get("format", "json")),
            ),
            **flags,
        )

        validation_result = config.validate()
        if validation_result.is_err():
            return Err(validation_result.unwrap_err())
        return Ok(config)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if self.logging.level.lower() not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level}",
            ))
        if self.logging.format.lower() not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format}",
            ))
        return Ok(None)


def load_config(path: Optional[Path] = None) -> Result[EngineConfig, ConfigError]:
    """
    Load configuration from a YAML file, falling back to defaults.

    Args:
        path: Configuration file (defaults to ./statecycle.yaml)

    Returns:
        Result with loaded config or error
    """
    if path is None:
        path = Path("./statecycle.yaml")

    path = Path(path)
    if not path.exists():
        return Ok(EngineConfig())

    return EngineConfig.from_yaml(path)
