"""Tests for the segment-aware path filter."""

import pytest

from frecenfile.exceptions import InvalidFilterError
from frecenfile.history.models import CommitRecord
from frecenfile.history.path_filter import PathFilter, normalize_prefix


class TestNormalizePrefix:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("src", "src"),
            ("src/", "src"),
            ("./src", "src"),
            ("src\\lib", "src/lib"),
            ("src/./lib/../core", "src/core"),
            (".", "."),
        ],
    )
    def test_normalization(self, raw, expected):
        assert normalize_prefix(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "/etc", "C:\\repo\\src", "../outside", "src/../.."])
    def test_rejected(self, raw):
        with pytest.raises(InvalidFilterError):
            normalize_prefix(raw)

    def test_error_carries_prefix_and_reason(self):
        with pytest.raises(InvalidFilterError) as exc_info:
            normalize_prefix("/abs/path")
        assert exc_info.value.prefix == "/abs/path"
        assert "absolute" in exc_info.value.reason


class TestPathFilter:
    def test_segment_aware_match(self):
        f = PathFilter(["src"])
        assert f.matches("src")
        assert f.matches("src/lib.rs")
        assert f.matches("src/deep/nested.rs")
        assert not f.matches("srcfoo.rs")
        assert not f.matches("docs/src/readme.md")

    def test_multiple_prefixes(self):
        f = PathFilter(["src/core", "docs"])
        assert f.matches("src/core/a.py")
        assert f.matches("docs/index.md")
        assert not f.matches("src/other.py")

    def test_single_string_is_one_prefix(self):
        f = PathFilter("src")
        assert f.prefixes == ("src",)
        assert f.matches("src/lib.rs")
        assert not f.matches("s")

    def test_inactive_without_prefixes(self):
        f = PathFilter()
        assert not f.active
        assert f.matches("anything/at/all.txt")

    def test_dot_matches_everything(self):
        assert not PathFilter(["."]).active

    def test_restricts_touched_paths(self):
        stream = [CommitRecord(0, ("src/lib.rs", "docs/readme.md"))]
        (record,) = PathFilter(["src"]).apply(stream)
        assert record == CommitRecord(0, ("src/lib.rs",))

    def test_empty_records_still_forwarded(self):
        stream = [
            CommitRecord(0, ("docs/a.md",)),
            CommitRecord(1, ("src/b.py",)),
        ]
        out = list(PathFilter(["src"]).apply(stream))
        assert out == [CommitRecord(0, ()), CommitRecord(1, ("src/b.py",))]

    def test_passthrough_returns_same_objects(self):
        stream = [CommitRecord(0, ("a",)), CommitRecord(1, ("b",))]
        out = list(PathFilter(None).apply(stream))
        assert all(a is b for a, b in zip(out, stream))

    def test_apply_is_lazy(self):
        def records():
            yield CommitRecord(0, ("src/a.py",))
            raise AssertionError("pulled too far")

        out = PathFilter(["src"]).apply(records())
        assert next(out) == CommitRecord(0, ("src/a.py",))

    def test_invalid_prefix_fails_at_construction(self):
        with pytest.raises(InvalidFilterError):
            PathFilter(["src", "/absolute"])
