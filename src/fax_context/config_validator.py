"""
Configuration validation utilities.

Reads tuning values from the environment and turns malformed ones into
ConfigurationError with a message that names the variable.
"""
import os
from typing import Optional, Tuple
from .exceptions import ConfigurationError


def get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get optional environment variable.
    
    :param key: Environment variable name
    :param default: Default value if not set
    :return: Environment variable value or default
    """
    value = os.getenv(key, default)
    
    if value and _is_placeholder(value):
        # Warn but don't fail for optional configs
        import warnings
        warnings.warn(
            f"{key} appears to be a placeholder. Using default or None.",
            UserWarning
        )
        return default
    
    return value


def get_float_env(key: str, default: float) -> float:
    """
    Get a float setting from the environment.
    
    :param key: Environment variable name
    :param default: Value used when the variable is unset
    :return: Parsed float
    :raises: ConfigurationError if the value is not a number
    """
    raw = get_optional_env(key)
    if raw is None or raw.strip() == "":
        return default
    
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got '{raw}'")


def get_int_env(key: str, default: int) -> int:
    """
    Get an integer setting from the environment.
    
    :param key: Environment variable name
    :param default: Value used when the variable is unset
    :return: Parsed integer
    :raises: ConfigurationError if the value is not an integer
    """
    raw = get_optional_env(key)
    if raw is None or raw.strip() == "":
        return default
    
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{raw}'")


def parse_temporal_bands(key: str, raw: str) -> Tuple[Tuple[float, float], ...]:
    """
    Parse temporal bands written as "hours:confidence" pairs.
    
    Example: "1:0.8,6:0.6,24:0.4"
    
    :param key: Environment variable name (for error messages)
    :param raw: Raw value
    :return: Tuple of (hours, confidence) pairs
    :raises: ConfigurationError if a pair cannot be parsed
    """
    bands = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        
        hours, sep, confidence = chunk.partition(":")
        if not sep:
            raise ConfigurationError(
                f"{key} entries must look like 'hours:confidence', got '{chunk}'"
            )
        
        try:
            bands.append((float(hours), float(confidence)))
        except ValueError:
            raise ConfigurationError(f"{key} has a non-numeric entry: '{chunk}'")
    
    if not bands:
        raise ConfigurationError(f"{key} must contain at least one band.")
    
    return tuple(bands)


def _is_placeholder(value: str) -> bool:
    """Check if value is a placeholder."""
    if not value:
        return False
    
    placeholder_patterns = [
        "your_",
        "placeholder",
        "example",
        "xxx",
        "replace",
        "TODO",
    ]
    
    value_lower = value.lower()
    return any(pattern.lower() in value_lower for pattern in placeholder_patterns)
