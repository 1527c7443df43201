"""Shared utility functions."""

from .logging import setup_logging
from .env import load_env
from .config_validator import ConfigurationError

__all__ = ["setup_logging", "load_env", "ConfigurationError"]
