"""Shared logging configuration for the content generation pipeline.

Every entry point (CLI, request handler) calls ``setup_logging`` once; library
modules only ever use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations
import logging
import os
import sys
from typing import Optional

# Chatty HTTP/SDK loggers that drown out batch progress at INFO
NOISY_LOGGERS = ("openai", "httpx", "httpcore", "urllib3", "werkzeug")


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """Configure root logger with console handler.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, reads from LOG_LEVEL env var or defaults to INFO.
        format_string: Custom format string. If None, uses default format.
        include_timestamp: Whether to include timestamp in log messages.
    
    Example:
        >>> setup_logging(level="DEBUG")
        >>> logger = logging.getLogger(__name__)
        >>> logger.debug("Debug message")
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()
    
    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            format_string = "[%(levelname)s] %(name)s: %(message)s"
    
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True  # Override any existing configuration
    )
    
    # Keep SDK request logs out of the batch output unless debugging
    noisy_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)
