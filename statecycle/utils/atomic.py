"""Atomic JSON writes for state files.

State files are rewritten on every transition; writing through a temporary
file and renaming it keeps a crash from leaving a half-written file behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from statecycle.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""

    pass


def atomic_write_json(path: Path, data: Any, indent: int = 2) -> None:
    """
    Atomically replace ``path`` with ``data`` serialized as JSON.

    ``data`` is serialized before any file is touched, and nothing is
    coerced to a string on the way.

    Args:
        path: Target file path
        data: Data to serialize as JSON
        indent: JSON indentation level

    Raises:
        TypeError: If ``data`` holds a value JSON cannot represent
        AtomicWriteError: If the file cannot be written or renamed
    """
    text = json.dumps(data, indent=indent)
    path = Path(path)
    temp_path: Optional[Path] = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Same directory so the rename stays on one filesystem
        fd, name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        temp_path = Path(name)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        temp_path.replace(path)
    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    logger.debug("atomic_write_success", path=str(path))
