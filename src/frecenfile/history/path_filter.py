"""Restrict commit records to files under a set of path prefixes."""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable, Iterator
from typing import Union

from ..exceptions import InvalidFilterError
from .models import CommitRecord

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def normalize_prefix(prefix: str) -> str:
    """Validate a prefix and bring it into repo-relative POSIX form.

    Raises:
        InvalidFilterError: Empty, absolute, or escaping the repository.
    """
    if not isinstance(prefix, str) or not prefix.strip():
        raise InvalidFilterError(str(prefix), "empty path")

    candidate = prefix.strip().replace("\\", "/")
    if candidate.startswith("/") or _WINDOWS_DRIVE_RE.match(candidate):
        raise InvalidFilterError(prefix, "absolute paths are not allowed; use a repository-relative path")

    normalized = posixpath.normpath(candidate)
    if normalized == ".." or normalized.startswith("../"):
        raise InvalidFilterError(prefix, "path escapes the repository root")
    return normalized


class PathFilter:
    """Segment-aware prefix filter over a commit stream.

    ``"src"`` matches ``"src"`` and ``"src/lib.rs"`` but not ``"srcfoo.rs"``.
    A prefix of ``"."`` matches every path. With no prefixes the filter is
    inactive and records pass through untouched. A single string is one
    prefix, not a sequence of one-character prefixes.
    """

    def __init__(self, prefixes: Union[str, Iterable[str], None] = None):
        if isinstance(prefixes, str):
            prefixes = (prefixes,)
        normalized = {normalize_prefix(p) for p in (prefixes or ())}
        self._match_all = "." in normalized
        self.prefixes: tuple[str, ...] = tuple(sorted(normalized))

    @property
    def active(self) -> bool:
        return bool(self.prefixes) and not self._match_all

    def matches(self, path: str) -> bool:
        if not self.active:
            return True
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.prefixes)

    def apply(self, records: Iterable[CommitRecord]) -> Iterator[CommitRecord]:
        """Yield every record, keeping only matching paths.

        Records left with no paths are still forwarded so ranks stay intact.
        """
        if not self.active:
            yield from records
            return

        for record in records:
            kept = tuple(p for p in record.touched_paths if self.matches(p))
            if len(kept) == len(record.touched_paths):
                yield record
            else:
                yield CommitRecord(rank=record.rank, touched_paths=kept)
