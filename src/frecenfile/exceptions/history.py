"""Reader-stage exceptions: the commit source could not produce history."""

from pathlib import Path
from typing import Union

from .base import FrecenfileError


class HistoryError(FrecenfileError):
    """Base class for errors raised while reading commit history."""

    pass


class RepositoryUnavailableError(HistoryError):
    """Raised when no commit history can be read for a location.

    Covers a missing directory, a directory outside any git work tree, a
    missing git executable, and a ``git log`` that exits with an error.
    """

    def __init__(self, repo_path: Union[str, Path], reason: str):
        super().__init__(
            f"Repository unavailable: {repo_path}",
            details={"repo_path": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason
