"""Public API for frecenfile.

Example:
    >>> from frecenfile import analyze_repo
    >>>
    >>> for entry in analyze_repo(".", paths=["src"])[:10]:
    ...     print(entry.score, entry.path)
    >>>
    >>> # Oldest-and-rarest first, whole history
    >>> analyze_repo(".", max_commits=0, direction="ascending")
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from .config import DecayConfig, FrecencyConfig, load_config
from .history import (
    CommitRecord,
    CommitStreamReader,
    FrecencyAccumulator,
    PathFilter,
    RankedEntry,
    ScoreMap,
    SortDirection,
    rank_scores,
)
from .history.ranker import parse_direction
from .logging_config import get_logger

logger = get_logger(__name__)


def score_stream(
    records: Iterable[CommitRecord],
    paths: Union[str, Iterable[str], None] = None,
    decay: Optional[DecayConfig] = None,
    direction: Union[SortDirection, str] = SortDirection.DESCENDING,
) -> list[RankedEntry]:
    """Filter, accumulate and rank an arbitrary stream of commit records."""
    direction = parse_direction(direction)
    path_filter = PathFilter(paths)
    scores = FrecencyAccumulator(decay).consume(path_filter.apply(records))
    return rank_scores(scores, direction)


def compute_scores(
    repo_path: Union[str, Path] = ".",
    paths: Union[str, Iterable[str], None] = None,
    max_commits: Optional[int] = None,
    config: Optional[FrecencyConfig] = None,
) -> ScoreMap:
    """Read a repository's history and return the unordered score map.

    Args:
        repo_path: Any directory inside the work tree (default: cwd)
        paths: Optional repository-relative path prefixes to restrict to
        max_commits: Newest commits to read; 0 = whole history. Defaults to
            ``config.max_commits``.
        config: Run configuration; discovered with ``load_config()`` if None

    Raises:
        InvalidFilterError: A path prefix is malformed (raised before git runs)
        RepositoryUnavailableError: No history can be read at ``repo_path``
    """
    if config is None:
        config = load_config()
    if max_commits is None:
        max_commits = config.max_commits

    # Built first so a bad filter fails before any git work
    path_filter = PathFilter(paths)

    reader = CommitStreamReader(
        repo_path,
        max_commits=max_commits,
        rename_policy=config.rename_policy,
        git_timeout=config.git_timeout_seconds,
    )
    accumulator = FrecencyAccumulator(config.decay)
    scores = accumulator.consume(path_filter.apply(reader))

    logger.info(
        "Scored %d file(s) from %d commit(s)%s",
        len(scores),
        reader.commits_read,
        " (truncated)" if reader.truncated else "",
    )
    return scores


def analyze_repo(
    repo_path: Union[str, Path] = ".",
    paths: Union[str, Iterable[str], None] = None,
    max_commits: Optional[int] = None,
    direction: Union[SortDirection, str] = SortDirection.DESCENDING,
    config: Optional[FrecencyConfig] = None,
) -> list[RankedEntry]:
    """Compute and rank frecency scores for every file in a repository.

    See ``compute_scores`` for arguments and errors. ``direction`` selects
    highest-first (default) or lowest-first ordering; ties are always broken
    by ascending path.
    """
    direction = parse_direction(direction)
    scores = compute_scores(repo_path, paths=paths, max_commits=max_commits, config=config)
    return rank_scores(scores, direction)
