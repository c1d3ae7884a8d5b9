"""Tests for the decay table and frecency accumulator."""

import math

import pytest

from frecenfile.config import DecayConfig
from frecenfile.history.accumulator import DECAY_FLOOR, DecayTable, FrecencyAccumulator
from frecenfile.history.models import CommitRecord


def touches(*pairs):
    """Build records from (rank, paths) pairs."""
    return [CommitRecord(rank, tuple(paths)) for rank, paths in pairs]


class TestDecayTable:
    def test_matches_closed_form(self):
        config = DecayConfig(half_life=7.0, base_weight=2.0)
        table = DecayTable(config)
        for rank in (0, 1, 5, 100, 1023, 1024, 2000):
            assert table.weight(rank) == pytest.approx(2.0 * math.exp(-rank / 7.0), rel=1e-12)

    def test_extends_lazily_by_block(self):
        table = DecayTable(DecayConfig())
        assert len(table) == 0
        table.weight(0)
        assert len(table) == DecayTable.BLOCK_SIZE
        table.weight(DecayTable.BLOCK_SIZE + 3)
        assert len(table) == 2 * DecayTable.BLOCK_SIZE

    def test_strictly_decreasing_within_default_window(self):
        table = DecayTable(DecayConfig())
        weights = [table.weight(r) for r in range(3000)]
        assert all(a > b for a, b in zip(weights, weights[1:]))
        assert weights[-1] > 0.0

    def test_never_zero(self):
        table = DecayTable(DecayConfig(half_life=1.0))
        assert table.weight(10_000) == DECAY_FLOOR
        assert table.weight(10_000) > 0.0

    def test_sparse_huge_rank_not_cached(self):
        table = DecayTable(DecayConfig())
        assert table.weight(10**9) == DECAY_FLOOR
        assert len(table) == 0
        table.weight(0)
        assert table.weight(10**9) == DECAY_FLOOR
        assert len(table) == DecayTable.BLOCK_SIZE

    def test_sparse_rank_matches_closed_form(self):
        table = DecayTable(DecayConfig(half_life=10_000.0))
        rank = DecayTable.MAX_GAP + 5
        assert table.weight(rank) == pytest.approx(math.exp(-rank / 10_000.0), rel=1e-12)
        assert len(table) == 0

    def test_negative_rank_rejected(self):
        with pytest.raises(ValueError):
            DecayTable(DecayConfig()).weight(-1)


class TestFrecencyAccumulator:
    def test_sum_of_decays(self):
        config = DecayConfig(half_life=10.0)
        acc = FrecencyAccumulator(config)
        scores = acc.consume(touches((3, ["x"]), (8, ["x"])))

        expected = config.weight(3) + config.weight(8)
        assert scores["x"] == pytest.approx(expected)
        assert scores["x"] > config.weight(3)
        assert scores["x"] > config.weight(8)

    def test_recency_dominance(self):
        scores = FrecencyAccumulator().consume(touches((0, ["new"]), (2000, ["old"])))
        assert scores["new"] > scores["old"]

    def test_frequency_dominance(self):
        scores = FrecencyAccumulator().consume(
            touches((0, ["busy", "once"]), (500, ["busy"]), (1000, ["busy"]))
        )
        assert scores["busy"] > scores["once"]

    def test_recent_burst_beats_single_touch(self):
        scores = FrecencyAccumulator().consume(
            touches((0, ["hot", "cold"]), (1, ["hot"]), (2, ["hot"]))
        )
        assert scores["hot"] > scores["cold"]

    def test_scores_never_decrease(self):
        acc = FrecencyAccumulator()
        previous = 0.0
        for rank in range(50):
            acc.fold(CommitRecord(rank, ("f",)))
            assert acc.scores["f"] > previous
            previous = acc.scores["f"]

    def test_empty_records_skipped(self):
        acc = FrecencyAccumulator()
        scores = acc.consume(touches((0, []), (1, ["a"])))
        assert scores == {"a": pytest.approx(DecayConfig().weight(1))}
        assert acc.commits_folded == 1
        assert acc.touches_folded == 1

    def test_only_touched_paths_are_keys(self):
        scores = FrecencyAccumulator().consume(touches((0, ["a", "b"]), (1, ["c"])))
        assert set(scores) == {"a", "b", "c"}
        assert all(v > 0 for v in scores.values())

    def test_order_independent(self):
        stream = touches((0, ["a"]), (4, ["a", "b"]), (9, ["b"]))
        forward = FrecencyAccumulator().consume(stream)
        backward = FrecencyAccumulator().consume(list(reversed(stream)))
        assert forward == pytest.approx(backward)

    def test_scores_view_is_read_only(self):
        acc = FrecencyAccumulator()
        acc.fold(CommitRecord(0, ("a",)))
        with pytest.raises(TypeError):
            acc.scores["a"] = 0.0  # type: ignore[index]

    def test_consume_returns_a_copy(self):
        acc = FrecencyAccumulator()
        result = acc.consume(touches((0, ["a"])))
        result["a"] = -1.0
        assert acc.scores["a"] > 0

    def test_independent_configs_do_not_interfere(self):
        stream = touches((1, ["a"]))
        fast = FrecencyAccumulator(DecayConfig(half_life=1.0)).consume(stream)
        slow = FrecencyAccumulator(DecayConfig(half_life=100.0)).consume(stream)
        assert fast["a"] == pytest.approx(math.exp(-1.0))
        assert slow["a"] == pytest.approx(math.exp(-0.01))

    def test_old_but_frequent_stays_distinguishable(self):
        stream = touches(*[(r, ["old"]) for r in range(2990, 3000)])
        scores = FrecencyAccumulator().consume(stream)
        assert scores["old"] > 0.0


@pytest.mark.slow
def test_large_stream_fold():
    """50k commits x 5 paths should fold quickly and stay positive."""
    import time

    records = (CommitRecord(r, tuple(f"f{(r + k) % 200}.py" for k in range(5))) for r in range(50_000))
    start = time.perf_counter()
    scores = FrecencyAccumulator().consume(records)
    elapsed = time.perf_counter() - start

    assert len(scores) == 200
    assert min(scores.values()) > 0.0
    assert elapsed < 5.0
