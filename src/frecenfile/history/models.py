"""Data models for history ingestion and scoring."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# path -> accumulated score
ScoreMap = dict[str, float]


class RenamePolicy(str, Enum):
    """Which side of a rename counts as touched."""

    BOTH = "both"  # old and new path
    NEW_ONLY = "new-only"


class SortDirection(str, Enum):
    DESCENDING = "descending"
    ASCENDING = "ascending"


@dataclass(frozen=True)
class CommitRecord:
    rank: int  # 0 = newest
    touched_paths: tuple[str, ...]  # repo-relative, POSIX separators, no duplicates

    def __post_init__(self) -> None:
        if self.rank < 0:
            raise ValueError(f"rank must be non-negative, got {self.rank}")


@dataclass(frozen=True)
class RankedEntry:
    path: str
    score: float
