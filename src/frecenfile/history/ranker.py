"""Order accumulated scores into the final ranking."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Union

from ..exceptions import InvalidConfigError
from .models import RankedEntry, SortDirection


def parse_direction(direction: Union[SortDirection, str]) -> SortDirection:
    try:
        return SortDirection(direction)
    except ValueError:
        raise InvalidConfigError(
            "direction", direction, "expected 'descending' or 'ascending'"
        ) from None


def rank_scores(
    scores: Mapping[str, float],
    direction: Union[SortDirection, str] = SortDirection.DESCENDING,
) -> list[RankedEntry]:
    """Sort every scored path by score, breaking ties by ascending path.

    The tie-break is the same in both directions, so identical input always
    produces identical output.
    """
    direction = parse_direction(direction)
    if direction is SortDirection.DESCENDING:
        ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    else:
        ordered = sorted(scores.items(), key=lambda item: (item[1], item[0]))
    return [RankedEntry(path=path, score=score) for path, score in ordered]
