"""Piece ordering strategies for greedy packers.

Greedy packers are sensitive to placement order, so running the same
packer over several orderings is the cheapest way to diversify the search.
Every strategy sorts descending and is stable, so pieces with equal keys
keep their input order.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Sequence

from cutplan.domain.value_objects import Cut


class SortStrategy(str, Enum):
    """Size metric used to order pieces (largest first)."""

    AREA = "area"
    PERIMETER = "perimeter"
    WIDTH = "width"
    HEIGHT = "height"
    LONG_SIDE = "long_side"
    SHORT_SIDE = "short_side"
    SIDE_RATIO = "side_ratio"
    DIAGONAL = "diagonal"


_SORT_KEYS: dict[SortStrategy, Callable[[Cut], float]] = {
    SortStrategy.AREA: lambda c: c.width * c.height,
    SortStrategy.PERIMETER: lambda c: 2 * (c.width + c.height),
    SortStrategy.WIDTH: lambda c: c.width,
    SortStrategy.HEIGHT: lambda c: c.height,
    SortStrategy.LONG_SIDE: lambda c: max(c.width, c.height),
    SortStrategy.SHORT_SIDE: lambda c: min(c.width, c.height),
    SortStrategy.SIDE_RATIO: lambda c: max(c.width, c.height) / min(c.width, c.height),
    SortStrategy.DIAGONAL: lambda c: math.hypot(c.width, c.height),
}


def sort_cuts(cuts: Sequence[Cut], strategy: SortStrategy) -> list[Cut]:
    """Return a new list of ``cuts`` ordered by ``strategy``, largest first."""
    return sorted(cuts, key=_SORT_KEYS[strategy], reverse=True)


def all_sort_strategies() -> tuple[SortStrategy, ...]:
    """All sort strategies in enumeration order."""
    return tuple(SortStrategy)
