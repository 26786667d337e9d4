"""Skyline packer.

The sheet is modelled as a horizontal profile: a left-to-right sequence of
segments, each recording the highest occupied y over its x range. Pieces
drop onto the profile and raise it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from cutplan.domain.value_objects import Cut, PlacedCut, Sheet

from ._free_space import EPSILON

logger = logging.getLogger(__name__)


class SkylineFitRule(str, Enum):
    """How candidate positions on the skyline are scored."""

    MIN_WASTE = "min_waste"
    BOTTOM_LEFT = "bottom_left"


@dataclass
class _SkylineNode:
    """Internal skyline segment.

    Attributes:
        x: Left edge of the segment.
        y: Height of the profile over the segment.
        width: Segment width.
    """

    x: float
    y: float
    width: float

    @property
    def right(self) -> float:
        return self.x + self.width


class SkylinePacker:
    """Bottom-up packer over a skyline profile.

    Each segment start is a candidate left edge for the piece. The piece
    plus its kerf margin spans one or more segments and lands on the highest
    of them. The chosen placement adds a segment at its top (plus kerf),
    trims the segments it covers and merges neighbours of equal height.

    Attributes:
        fit_rule: Rule scoring candidate positions.
    """

    name = "Skyline"

    def __init__(self, fit_rule: SkylineFitRule = SkylineFitRule.MIN_WASTE) -> None:
        self.fit_rule = fit_rule

    @property
    def variant(self) -> str:
        """Human-readable rule name."""
        return f"{self.name} ({self.fit_rule.value})"

    def pack(self, pieces: Sequence[Cut], sheet: Sheet) -> list[PlacedCut]:
        """Place unit pieces on ``sheet`` in the given order.

        Args:
            pieces: Unit pieces (quantity 1), already ordered.
            sheet: Target sheet.

        Returns:
            Placements for the pieces that fit.
        """
        skyline = [_SkylineNode(0.0, 0.0, sheet.width)]
        placed: list[PlacedCut] = []

        for piece in pieces:
            best_score: tuple[float, float] | None = None
            best: tuple[int, float, float, float, bool] | None = None

            for width, height, rotated in piece.orientations():
                for index, node in enumerate(skyline):
                    y = self._landing_height(skyline, index, width, height, sheet)
                    if y is None:
                        continue
                    if self.fit_rule == SkylineFitRule.MIN_WASTE:
                        waste = self._trapped_waste(skyline, index, width, y, sheet)
                        score = (waste, y)
                    else:
                        score = (y + height, node.x)
                    if best_score is None or score < best_score:
                        best_score = score
                        best = (index, y, width, height, rotated)

            if best is None:
                logger.debug("Piece '%s' does not fit, skipping", piece.id)
                continue

            index, y, width, height, rotated = best
            x = skyline[index].x
            placed.append(
                PlacedCut(
                    cut=piece,
                    x=x,
                    y=y,
                    width=width,
                    height=height,
                    rotated=rotated,
                )
            )
            self._add_level(skyline, index, x, y + height, width, sheet)

        return placed

    @staticmethod
    def _span_end(x: float, width: float, sheet: Sheet) -> float:
        """Right end of the region a piece claims, kerf margin included."""
        return min(x + width + sheet.kerf, sheet.width)

    def _landing_height(
        self,
        skyline: list[_SkylineNode],
        index: int,
        width: float,
        height: float,
        sheet: Sheet,
    ) -> float | None:
        """Y at which a piece starting at segment ``index`` would rest.

        Returns None if the piece would cross the right or top sheet edge.
        """
        x = skyline[index].x
        if x + width > sheet.width + EPSILON:
            return None

        end = self._span_end(x, width, sheet)
        y = skyline[index].y
        i = index
        while i < len(skyline) and skyline[i].x < end - EPSILON:
            y = max(y, skyline[i].y)
            if y + height > sheet.height + EPSILON:
                return None
            i += 1
        return y

    def _trapped_waste(
        self,
        skyline: list[_SkylineNode],
        index: int,
        width: float,
        y: float,
        sheet: Sheet,
    ) -> float:
        """Area left unusable between the profile and a piece resting at ``y``."""
        x = skyline[index].x
        end = self._span_end(x, width, sheet)
        waste = 0.0
        i = index
        while i < len(skyline) and skyline[i].x < end - EPSILON:
            node = skyline[i]
            covered = min(node.right, end) - node.x
            waste += (y - node.y) * covered
            i += 1
        return waste

    def _add_level(
        self,
        skyline: list[_SkylineNode],
        index: int,
        x: float,
        top: float,
        width: float,
        sheet: Sheet,
    ) -> None:
        """Raise the profile over a newly placed piece."""
        new_node = _SkylineNode(x, top + sheet.kerf, self._span_end(x, width, sheet) - x)
        skyline.insert(index, new_node)

        i = index + 1
        while i < len(skyline):
            node = skyline[i]
            previous = skyline[i - 1]
            if node.x >= previous.right - EPSILON:
                break
            shrink = previous.right - node.x
            node.x += shrink
            node.width -= shrink
            if node.width <= EPSILON:
                del skyline[i]
            else:
                break

        self._merge(skyline)

    @staticmethod
    def _merge(skyline: list[_SkylineNode]) -> None:
        """Merge neighbouring segments of equal height."""
        i = 0
        while i < len(skyline) - 1:
            if abs(skyline[i].y - skyline[i + 1].y) <= EPSILON:
                skyline[i].width += skyline[i + 1].width
                del skyline[i + 1]
            else:
                i += 1
