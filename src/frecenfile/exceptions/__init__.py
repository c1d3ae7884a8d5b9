"""Exception hierarchy for frecenfile."""

from .base import FrecenfileError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidFilterError,
)
from .history import HistoryError, RepositoryUnavailableError

__all__ = [
    "FrecenfileError",
    "HistoryError",
    "RepositoryUnavailableError",
    "ConfigurationError",
    "InvalidFilterError",
    "InvalidConfigError",
]
