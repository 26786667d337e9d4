"""First-fit decreasing shelf packer.

Used as a last-resort fallback when no optimizer candidate produces a
layout. Shelves are horizontal bands whose height is set by the first
piece placed on them; pieces fill each shelf left to right. Every cut is
edge-to-edge, so the layout is guillotine-compatible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from cutplan.domain.value_objects import Cut, PlacedCut, Sheet

from ._free_space import EPSILON

logger = logging.getLogger(__name__)


@dataclass
class _Shelf:
    """Internal shelf representation for packing algorithm.

    Attributes:
        y: Bottom Y position of shelf.
        height: Height of shelf (set by first piece placed).
        next_x: X position for the next piece on the shelf.
    """

    y: float
    height: float
    next_x: float = 0.0


class ShelfPacker:
    """Shelf algorithm with first-fit decreasing ordering."""

    name = "basic"

    @property
    def variant(self) -> str:
        """Human-readable name."""
        return "Shelf (first fit decreasing)"

    def pack(self, pieces: Sequence[Cut], sheet: Sheet) -> list[PlacedCut]:
        """Pack unit pieces onto shelves, largest area first.

        Each orientation is tried on the existing shelves first, then on a
        new shelf above the highest one.

        Args:
            pieces: Unit pieces (quantity 1).
            sheet: Target sheet.

        Returns:
            Placements for the pieces that fit.
        """
        shelves: list[_Shelf] = []
        placed: list[PlacedCut] = []
        kerf = sheet.kerf

        for piece in self._sort_by_area(pieces):
            placement = None

            for width, height, rotated in piece.orientations():
                if width > sheet.width + EPSILON or height > sheet.height + EPSILON:
                    continue

                # Try to fit on existing shelf
                for shelf in shelves:
                    if (
                        shelf.next_x + width <= sheet.width + EPSILON
                        and height <= shelf.height + EPSILON
                    ):
                        placement = self._place_on_shelf(piece, shelf, width, height, rotated, kerf)
                        break
                if placement is not None:
                    break

                # Try to create new shelf
                next_y = max((s.y + s.height + kerf for s in shelves), default=0.0)
                if next_y + height <= sheet.height + EPSILON:
                    shelf = _Shelf(y=next_y, height=height)
                    shelves.append(shelf)
                    placement = self._place_on_shelf(piece, shelf, width, height, rotated, kerf)
                    break

            if placement is None:
                logger.debug("Piece '%s' does not fit on any shelf", piece.id)
                continue
            placed.append(placement)

        return placed

    @staticmethod
    def _sort_by_area(pieces: Sequence[Cut]) -> list[Cut]:
        """Sort pieces by area (largest first), then by longest side."""
        return sorted(
            pieces,
            key=lambda p: (p.width * p.height, max(p.width, p.height)),
            reverse=True,
        )

    @staticmethod
    def _place_on_shelf(
        piece: Cut,
        shelf: _Shelf,
        width: float,
        height: float,
        rotated: bool,
        kerf: float,
    ) -> PlacedCut:
        """Place a piece on a shelf and update shelf state."""
        placement = PlacedCut(
            cut=piece,
            x=shelf.next_x,
            y=shelf.y,
            width=width,
            height=height,
            rotated=rotated,
        )
        shelf.next_x += width + kerf
        return placement
