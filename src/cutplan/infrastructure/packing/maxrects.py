"""MaxRects free-rectangle packer.

The free list holds maximal free rectangles which may overlap each other.
Layouts are usually denser than guillotine layouts but are not always
reachable with edge-to-edge cuts, so this packer is for machine cutting.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from cutplan.domain.value_objects import Cut, PlacedCut, Rectangle, Sheet

from ._free_space import EPSILON, fits, prune_contained

logger = logging.getLogger(__name__)


class MaxRectsFitRule(str, Enum):
    """How candidate positions are scored (lower tuple is better)."""

    BEST_SHORT_SIDE_FIT = "best_short_side_fit"
    BEST_LONG_SIDE_FIT = "best_long_side_fit"
    BEST_AREA_FIT = "best_area_fit"
    BOTTOM_LEFT = "bottom_left"
    CONTACT_POINT = "contact_point"


def contact_count(
    candidate: Rectangle,
    used: Sequence[Rectangle],
    sheet: Sheet,
) -> int:
    """Count sheet borders and placed pieces the candidate would sit against.

    A placed piece counts as touching when it shares a side with the
    candidate across a gap no wider than the kerf.
    """
    gap = sheet.kerf + EPSILON
    contacts = 0

    if candidate.x <= EPSILON:
        contacts += 1
    if candidate.y <= EPSILON:
        contacts += 1
    if candidate.right >= sheet.width - EPSILON:
        contacts += 1
    if candidate.top >= sheet.height - EPSILON:
        contacts += 1

    for other in used:
        overlaps_vertically = other.y < candidate.top and candidate.y < other.top
        overlaps_horizontally = other.x < candidate.right and candidate.x < other.right
        if overlaps_vertically and (
            0 <= candidate.x - other.right <= gap or 0 <= other.x - candidate.right <= gap
        ):
            contacts += 1
        elif overlaps_horizontally and (
            0 <= candidate.y - other.top <= gap or 0 <= other.y - candidate.top <= gap
        ):
            contacts += 1

    return contacts


def fit_score(
    width: float,
    height: float,
    rect: Rectangle,
    rule: MaxRectsFitRule,
    used: Sequence[Rectangle],
    sheet: Sheet,
) -> tuple[float, float]:
    """Score placing a ``width`` x ``height`` piece at the origin of ``rect``."""
    leftover_x = rect.width - width
    leftover_y = rect.height - height
    short_side = min(leftover_x, leftover_y)
    long_side = max(leftover_x, leftover_y)

    if rule == MaxRectsFitRule.BEST_SHORT_SIDE_FIT:
        return short_side, long_side
    if rule == MaxRectsFitRule.BEST_LONG_SIDE_FIT:
        return long_side, short_side
    if rule == MaxRectsFitRule.BEST_AREA_FIT:
        return rect.area - width * height, short_side
    if rule == MaxRectsFitRule.BOTTOM_LEFT:
        return rect.y, rect.x
    candidate = Rectangle(rect.x, rect.y, width, height)
    return -contact_count(candidate, used, sheet), rect.y


def split_free_rectangle(free: Rectangle, blocked: Rectangle) -> list[Rectangle] | None:
    """Carve ``blocked`` out of ``free``.

    Returns None when they do not intersect, otherwise up to four maximal
    rectangles covering the part of ``free`` left on each side of ``blocked``.
    """
    if not free.intersects(blocked):
        return None

    children: list[Rectangle] = []
    if blocked.y - free.y > EPSILON:
        children.append(Rectangle(free.x, free.y, free.width, blocked.y - free.y))
    if free.top - blocked.top > EPSILON:
        children.append(Rectangle(free.x, blocked.top, free.width, free.top - blocked.top))
    if blocked.x - free.x > EPSILON:
        children.append(Rectangle(free.x, free.y, blocked.x - free.x, free.height))
    if free.right - blocked.right > EPSILON:
        children.append(Rectangle(blocked.right, free.y, free.right - blocked.right, free.height))
    return children


class MaxRectsPacker:
    """Packer keeping every maximal free rectangle, overlaps allowed.

    After each placement, free rectangles that intersect the placed piece
    (grown by the kerf on every side) are replaced by up to four children,
    then rectangles contained in others are pruned.

    Attributes:
        fit_rule: Rule scoring candidate positions.
    """

    name = "MaxRects"

    def __init__(self, fit_rule: MaxRectsFitRule = MaxRectsFitRule.BEST_SHORT_SIDE_FIT) -> None:
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
        free_rects: list[Rectangle] = [sheet.bounds]
        used: list[Rectangle] = []
        placed: list[PlacedCut] = []
        kerf = sheet.kerf

        for piece in pieces:
            best_score: tuple[float, float] | None = None
            best: tuple[Rectangle, float, float, bool] | None = None

            for rect in free_rects:
                for width, height, rotated in piece.orientations():
                    if not fits(width, height, rect):
                        continue
                    score = fit_score(width, height, rect, self.fit_rule, used, sheet)
                    if best_score is None or score < best_score:
                        best_score = score
                        best = (rect, width, height, rotated)

            if best is None:
                logger.debug("Piece '%s' does not fit, skipping", piece.id)
                continue

            rect, width, height, rotated = best
            placed_rect = Rectangle(rect.x, rect.y, width, height)
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
            used.append(placed_rect)

            blocked = Rectangle(
                placed_rect.x - kerf,
                placed_rect.y - kerf,
                width + 2 * kerf,
                height + 2 * kerf,
            )
            kept: list[Rectangle] = []
            added: list[Rectangle] = []
            for free in free_rects:
                children = split_free_rectangle(free, blocked)
                if children is None:
                    kept.append(free)
                else:
                    added.extend(children)
            free_rects = kept + added
            prune_contained(free_rects)

        return placed
