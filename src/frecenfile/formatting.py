"""Render ranked entries for output."""

import json
from collections.abc import Iterable

from .history import RankedEntry


def format_entry(entry: RankedEntry, path_only: bool = False) -> str:
    if path_only:
        return entry.path
    return f"{entry.score:.4f}\t{entry.path}"


def render_lines(entries: Iterable[RankedEntry], path_only: bool = False) -> list[str]:
    return [format_entry(entry, path_only=path_only) for entry in entries]


def entries_to_json(entries: Iterable[RankedEntry]) -> str:
    """JSON array of ``{"path", "score"}`` objects, in ranking order."""
    return json.dumps([{"path": e.path, "score": e.score} for e in entries], indent=2)
