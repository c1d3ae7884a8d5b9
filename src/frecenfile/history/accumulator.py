"""Fold a commit stream into per-file frecency scores.

Each touch of path ``p`` by the commit at rank ``r`` adds

    decay(r) = base_weight * exp(-r / half_life)

to ``p``'s score. Repeated touches sum, so a file scores high by being
touched often, recently, or both. Scores only ever grow.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Optional

import numpy as np

from ..config import DecayConfig
from ..logging_config import get_logger
from .models import CommitRecord, ScoreMap

logger = get_logger(__name__)

# Smallest value a decay weight may take; keeps every rank strictly positive
DECAY_FLOOR = sys.float_info.min


class DecayTable:
    """Per-rank cache of decay weights.

    Weights are computed with numpy one block of ranks at a time and
    extended lazily as higher ranks are requested, so ``exp`` runs once per
    rank rather than once per (commit, path) pair. A rank more than
    ``MAX_GAP`` past the cached end is computed on its own and not cached.
    """

    BLOCK_SIZE = 1024
    MAX_GAP = 16 * BLOCK_SIZE

    def __init__(self, config: DecayConfig):
        self.config = config
        self._values = np.empty(0, dtype=np.float64)
        self._warned_floor = False

    def __len__(self) -> int:
        return len(self._values)

    def weight(self, rank: int) -> float:
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        if rank >= len(self._values) + self.MAX_GAP:
            value = self.config.weight(rank)
            if value < DECAY_FLOOR:
                self._warn_floor(rank)
            return max(value, DECAY_FLOOR)
        if rank >= len(self._values):
            self._extend(rank + 1)
        return float(self._values[rank])

    def _extend(self, needed: int) -> None:
        start = len(self._values)
        stop = max(needed, start + self.BLOCK_SIZE)
        ranks = np.arange(start, stop, dtype=np.float64)
        block = self.config.base_weight * np.exp(-ranks / self.config.half_life)
        if block[-1] < DECAY_FLOOR:
            self._warn_floor(start + int(np.argmax(block < DECAY_FLOOR)))
        block = np.maximum(block, DECAY_FLOOR)
        self._values = np.concatenate([self._values, block])

    def _warn_floor(self, rank: int) -> None:
        if self._warned_floor:
            return
        logger.warning(
            "Decay weight underflows beyond rank %d; older commits are clamped to %g",
            rank,
            DECAY_FLOOR,
        )
        self._warned_floor = True


class FrecencyAccumulator:
    """Sole owner and writer of the ``ScoreMap`` for one run."""

    def __init__(self, decay: Optional[DecayConfig] = None):
        self.decay = decay or DecayConfig()
        self._table = DecayTable(self.decay)
        self._scores: ScoreMap = {}
        self.commits_folded = 0
        self.touches_folded = 0

    @property
    def scores(self) -> Mapping[str, float]:
        """Read-only view of the scores accumulated so far."""
        return MappingProxyType(self._scores)

    def fold(self, record: CommitRecord) -> None:
        if not record.touched_paths:
            return
        weight = self._table.weight(record.rank)
        scores = self._scores
        for path in record.touched_paths:
            scores[path] = scores.get(path, 0.0) + weight
        self.commits_folded += 1
        self.touches_folded += len(record.touched_paths)

    def consume(self, records: Iterable[CommitRecord]) -> ScoreMap:
        """Fold every record and return a copy of the final score map."""
        for record in records:
            self.fold(record)
        logger.debug(
            "Folded %d touch(es) from %d commit(s) into %d file score(s)",
            self.touches_folded,
            self.commits_folded,
            len(self._scores),
        )
        return dict(self._scores)
