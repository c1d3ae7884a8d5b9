"""History ingestion and scoring: reader, path filter, accumulator, ranker."""

from .accumulator import DecayTable, FrecencyAccumulator
from .models import CommitRecord, RankedEntry, RenamePolicy, ScoreMap, SortDirection
from .path_filter import PathFilter
from .ranker import rank_scores
from .reader import CommitStreamReader, parse_log_lines

__all__ = [
    "CommitRecord",
    "CommitStreamReader",
    "DecayTable",
    "FrecencyAccumulator",
    "PathFilter",
    "RankedEntry",
    "RenamePolicy",
    "ScoreMap",
    "SortDirection",
    "parse_log_lines",
    "rank_scores",
]
