"""Configuration exceptions: path filters and settings."""

from typing import Any

from .base import FrecenfileError


class ConfigurationError(FrecenfileError):
    """Base class for configuration-related errors."""

    pass


class InvalidFilterError(ConfigurationError):
    """Raised when a path-prefix filter is malformed."""

    def __init__(self, prefix: str, reason: str):
        super().__init__(
            f"Invalid path filter: {prefix!r}",
            details={"prefix": prefix, "reason": reason},
        )
        self.prefix = prefix
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
