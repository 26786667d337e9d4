"""Guillotine free-rectangle packer.

Every split runs edge-to-edge across the free rectangle it divides, so the
whole layout can be produced by straight full-length cuts. This makes the
packer legal for hand-snap (manual) cutting.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from cutplan.domain.value_objects import Cut, PlacedCut, Rectangle, Sheet

from ._free_space import EPSILON, fits, prune_contained

logger = logging.getLogger(__name__)


class GuillotineSplitRule(str, Enum):
    """How the leftover of a used free rectangle is divided.

    A horizontal split yields a right child as tall as the piece and a top
    child as wide as the free rectangle; a vertical split yields a top child
    as wide as the piece and a right child as tall as the free rectangle.
    """

    SHORTER_LEFTOVER_AXIS = "shorter_leftover_axis"
    LONGER_LEFTOVER_AXIS = "longer_leftover_axis"
    MINIMIZE_AREA = "minimize_area"
    MAXIMIZE_AREA = "maximize_area"
    SHORTER_AXIS = "shorter_axis"
    LONGER_AXIS = "longer_axis"


class GuillotineFitRule(str, Enum):
    """How candidate free rectangles are scored (lower is better)."""

    BEST_AREA_FIT = "best_area_fit"
    BEST_SHORT_SIDE_FIT = "best_short_side_fit"
    BEST_LONG_SIDE_FIT = "best_long_side_fit"
    WORST_AREA_FIT = "worst_area_fit"
    WORST_SHORT_SIDE_FIT = "worst_short_side_fit"
    WORST_LONG_SIDE_FIT = "worst_long_side_fit"


def fit_score(width: float, height: float, rect: Rectangle, rule: GuillotineFitRule) -> float:
    """Score placing a ``width`` x ``height`` piece in ``rect``."""
    leftover_x = rect.width - width
    leftover_y = rect.height - height
    short_side = min(leftover_x, leftover_y)
    long_side = max(leftover_x, leftover_y)
    area = rect.area - width * height

    if rule == GuillotineFitRule.BEST_AREA_FIT:
        return area
    if rule == GuillotineFitRule.BEST_SHORT_SIDE_FIT:
        return short_side
    if rule == GuillotineFitRule.BEST_LONG_SIDE_FIT:
        return long_side
    if rule == GuillotineFitRule.WORST_AREA_FIT:
        return -area
    if rule == GuillotineFitRule.WORST_SHORT_SIDE_FIT:
        return -short_side
    return -long_side


def _split_horizontally(
    rect: Rectangle,
    width: float,
    height: float,
    right_width: float,
    top_height: float,
    rule: GuillotineSplitRule,
) -> bool:
    if rule == GuillotineSplitRule.SHORTER_LEFTOVER_AXIS:
        return right_width <= top_height
    if rule == GuillotineSplitRule.LONGER_LEFTOVER_AXIS:
        return right_width > top_height
    if rule in (GuillotineSplitRule.MINIMIZE_AREA, GuillotineSplitRule.MAXIMIZE_AREA):
        horizontal_area = right_width * height + rect.width * top_height
        vertical_area = width * top_height + right_width * rect.height
        if rule == GuillotineSplitRule.MINIMIZE_AREA:
            return horizontal_area <= vertical_area
        return horizontal_area > vertical_area
    if rule == GuillotineSplitRule.SHORTER_AXIS:
        return rect.width <= rect.height
    return rect.width > rect.height


def split_free_rectangle(
    rect: Rectangle,
    width: float,
    height: float,
    rule: GuillotineSplitRule,
    kerf: float,
) -> list[Rectangle]:
    """Split the leftover of ``rect`` after placing a piece at its origin.

    The kerf is removed along each split line. Returns 0-2 children.
    """
    right_width = rect.width - width - kerf
    top_height = rect.height - height - kerf
    has_right = right_width > EPSILON
    has_top = top_height > EPSILON

    right_x = rect.x + width + kerf
    top_y = rect.y + height + kerf

    if not has_right and not has_top:
        return []
    if not has_top:
        return [Rectangle(right_x, rect.y, right_width, rect.height)]
    if not has_right:
        return [Rectangle(rect.x, top_y, rect.width, top_height)]

    if _split_horizontally(rect, width, height, right_width, top_height, rule):
        return [
            Rectangle(right_x, rect.y, right_width, height),
            Rectangle(rect.x, top_y, rect.width, top_height),
        ]
    return [
        Rectangle(rect.x, top_y, width, top_height),
        Rectangle(right_x, rect.y, right_width, rect.height),
    ]


class GuillotinePacker:
    """Free-rectangle packer restricted to edge-to-edge splits.

    For each piece, every free rectangle and allowed orientation is scored
    with the fit rule and the globally best pair wins (first found on ties).
    The consumed rectangle is replaced by its split children and contained
    rectangles are pruned. Pieces that fit nowhere are skipped.

    Attributes:
        split_rule: Rule choosing the split direction.
        fit_rule: Rule scoring candidate free rectangles.
    """

    name = "Guillotine"

    def __init__(
        self,
        split_rule: GuillotineSplitRule = GuillotineSplitRule.MINIMIZE_AREA,
        fit_rule: GuillotineFitRule = GuillotineFitRule.BEST_AREA_FIT,
    ) -> None:
        self.split_rule = split_rule
        self.fit_rule = fit_rule

    @property
    def variant(self) -> str:
        """Human-readable rule combination."""
        return f"{self.name} ({self.split_rule.value}, {self.fit_rule.value})"

    def pack(self, pieces: Sequence[Cut], sheet: Sheet) -> list[PlacedCut]:
        """Place unit pieces on ``sheet`` in the given order.

        Args:
            pieces: Unit pieces (quantity 1), already ordered.
            sheet: Target sheet; its kerf is removed at every split.

        Returns:
            Placements for the pieces that fit.
        """
        free_rects: list[Rectangle] = [sheet.bounds]
        placed: list[PlacedCut] = []

        for piece in pieces:
            best_index = -1
            best_score = float("inf")
            best: tuple[float, float, bool] | None = None

            for index, rect in enumerate(free_rects):
                for width, height, rotated in piece.orientations():
                    if not fits(width, height, rect):
                        continue
                    score = fit_score(width, height, rect, self.fit_rule)
                    if score < best_score:
                        best_score = score
                        best_index = index
                        best = (width, height, rotated)

            if best is None:
                logger.debug("Piece '%s' does not fit, skipping", piece.id)
                continue

            width, height, rotated = best
            rect = free_rects[best_index]
            placed.append(
                PlacedCut(
                    cut=piece,
                    x=rect.x,
                    y=rect.y,
                    width=width,
                    height=height,
                    rotated=rotated,
                )
            )

            children = split_free_rectangle(rect, width, height, self.split_rule, sheet.kerf)
            free_rects[best_index:best_index + 1] = children
            prune_contained(free_rects)

        return placed
