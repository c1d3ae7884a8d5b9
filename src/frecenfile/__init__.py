"""
frecenfile - frecency scores for files in a git repository

Blends how often and how recently each file changed, using nothing but
the commit log, so hot and trending files surface first.
"""

__version__ = "0.3.0"

from .api import analyze_repo, compute_scores, score_stream
from .config import DecayConfig, FrecencyConfig, load_config
from .history import CommitRecord, RankedEntry, SortDirection

__all__ = [
    "analyze_repo",  # Main entry point
    "compute_scores",
    "score_stream",  # Bring-your-own commit stream
    "load_config",
    "DecayConfig",
    "FrecencyConfig",
    "CommitRecord",
    "RankedEntry",
    "SortDirection",
]
