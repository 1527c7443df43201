"""
Configuration validation utilities.

Environment-driven settings (API keys, batch sizes, delays) are read and
validated here so entry points fail fast with a readable message.
"""

import os
from typing import Any, Callable, Optional, TypeVar, Union

Number = Union[int, float]
N = TypeVar("N", int, float)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def require_env(name: str, description: Optional[str] = None) -> str:
    """
    Require an environment variable to be set.

    Args:
        name: Environment variable name
        description: Optional description of what the variable is used for

    Returns:
        The value of the environment variable

    Raises:
        ConfigurationError: If the environment variable is not set or empty
    """
    value = os.getenv(name)

    if not value:
        desc_msg = f" ({description})" if description else ""
        raise ConfigurationError(
            f"Missing required environment variable: {name}{desc_msg}\n"
            f"Please set {name} in your .env file or environment."
        )

    return value


def _check_bounds(name: str, value: Number, min_value: Optional[Number], max_value: Optional[Number]) -> None:
    if min_value is not None and value < min_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) is below minimum allowed value ({min_value})"
        )

    if max_value is not None and value > max_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) exceeds maximum allowed value ({max_value})"
        )


def _read_number(
    name: str,
    cast: Callable[[str], N],
    kind: str,
    default: Optional[N],
    min_value: Optional[Number],
    max_value: Optional[Number],
) -> N:
    raw = os.getenv(name)

    if not raw:
        if default is None:
            raise ConfigurationError(f"Missing required {kind} environment variable: {name}")
        return default

    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigurationError(
            f"Invalid {kind} value for {name}: '{raw}'\n"
            f"Expected a{'n' if kind[0] in 'aeiou' else ''} {kind} value."
        )

    _check_bounds(name, value, min_value, max_value)
    return value


def validate_int_env(name: str, default: Optional[int] = None, min_value: Optional[int] = None,
                     max_value: Optional[int] = None) -> int:
    """
    Validate an integer environment variable (worker counts, retry budgets).

    Raises:
        ConfigurationError: If the value is missing without default, not an
            integer, or out of bounds
    """
    return _read_number(name, int, "integer", default, min_value, max_value)


def validate_float_env(name: str, default: Optional[float] = None, min_value: Optional[float] = None,
                       max_value: Optional[float] = None) -> float:
    """Validate a numeric environment variable such as a delay in seconds."""
    return _read_number(name, float, "numeric", default, min_value, max_value)


def check_config_override(override: Optional[Any], env_name: str,
                          required: bool = True) -> Optional[Any]:
    """
    Return a programmatic override if given, else the environment value.

    Used by clients that accept credentials from a request payload but fall
    back to the process environment (e.g. ``OPENAI_API_KEY``).

    Raises:
        ConfigurationError: If required and neither override nor env is set
    """
    if override is not None:
        return override

    value = os.getenv(env_name)

    if required and not value:
        raise ConfigurationError(
            f"Missing required configuration: {env_name}\n"
            f"Provide via environment variable or programmatic override."
        )

    return value
