"""Environment variable loading utilities."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Searched in order; later files win when override=True
ENV_FILENAMES = (".env", ".env.local")


def _candidate_env_files(env_file: Optional[str]) -> List[Path]:
    if env_file:
        env_path = Path(env_file)
        return [env_path] if env_path.exists() else []

    current = Path.cwd()
    candidates: List[Path] = []
    for directory in [*reversed(current.parents), current]:
        for filename in ENV_FILENAMES:
            candidate = directory / filename
            if candidate.exists():
                candidates.append(candidate)
    return candidates


def load_env(env_file: Optional[str] = None, override: bool = False) -> List[Path]:
    """Load environment variables from .env / .env.local files.
    
    Args:
        env_file: Path to a specific env file. If None, searches the current
                 directory and its parents for .env and .env.local.
        override: Whether to override existing environment variables.

    Returns:
        The files that were loaded, in load order.
    """
    env_paths = _candidate_env_files(env_file)
    if not env_paths:
        logger.debug("No .env file found, using system environment")
        return []

    loaded: List[Path] = []
    for path in env_paths:
        if path in loaded:
            continue
        load_dotenv(path, override=override)
        loaded.append(path)
        logger.debug("Loaded environment from %s", path)
    return loaded
