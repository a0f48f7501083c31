"""Configuration module for statecycle."""

from statecycle.config.settings import EngineConfig, LoggingConfig, load_config

__all__ = ["EngineConfig", "LoggingConfig", "load_config"]
