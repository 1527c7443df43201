"""Atomic JSON persistence helpers for batch checkpoints and artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _temp_path(filepath: Path) -> Path:
    return filepath.with_name(f"{filepath.name}.tmp")


def atomic_write_json(filepath: Path | str, data: Any, *, indent: int = 2) -> Path:
    """Write ``data`` as JSON through a temp file and an atomic rename.

    Readers never observe a truncated document: either the previous file or
    the complete new one is in place.

    Args:
        filepath: Destination file
        data: JSON-serialisable payload
        indent: Indentation passed to ``json.dump``

    Returns:
        The destination path

    Raises:
        OSError: If the temp file cannot be written or renamed
        TypeError: If ``data`` is not JSON serialisable
    """
    filepath = Path(filepath)
    temp_path = _temp_path(filepath)
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        temp_path.replace(filepath)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s", filepath)
    return filepath


def read_json(filepath: Path | str) -> Optional[Any]:
    """Load a JSON document, returning None when it is missing or unreadable.

    Corrupt files are logged and treated like missing ones so callers can
    fall back to a cold start.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        return None
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read %s: %s", filepath, e)
        return None
