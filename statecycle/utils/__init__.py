"""Utility modules for statecycle."""

from statecycle.utils.atomic import AtomicWriteError, atomic_write_json
from statecycle.utils.logging import (
    bind_cycle_id,
    configure_logging,
    get_cycle_id,
    get_logger,
    payload_summary,
)
from statecycle.utils.result import ConfigError, Err, HookFailure, Ok, Result, ResultError

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_cycle_id",
    "bind_cycle_id",
    "payload_summary",
    # Result
    "Ok",
    "Err",
    "Result",
    "ResultError",
    "HookFailure",
    "ConfigError",
    # Atomic writes
    "AtomicWriteError",
    "atomic_write_json",
]
