"""Reusable leftover (remnant) extraction.

The sheet is rasterized to an occupancy grid and free space is decomposed
into rectangles by a greedy row-major scan. The scan is not guaranteed to
find the largest rectangles, and rectangles it returns may overlap; each
one is nevertheless entirely free of pieces and kerf.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cutplan.domain.value_objects import PlacedCut, Remnant, Sheet

logger = logging.getLogger(__name__)

# Snap tolerance when converting float coordinates to grid cells
_GRID_EPSILON = 1e-6


@dataclass(frozen=True)
class RemnantConfig:
    """Remnant extraction settings.

    Attributes:
        min_size: Minimum width and height of a reusable remnant.
        resolution: Grid cell size in sheet units.
    """

    min_size: float = 10.0
    resolution: float = 1.0

    def __post_init__(self) -> None:
        if self.min_size <= 0:
            raise ValueError("Minimum remnant size must be positive")
        if self.resolution <= 0:
            raise ValueError("Grid resolution must be positive")


class RemnantExtractor:
    """Finds free rectangles left on a sheet after packing.

    Attributes:
        config: Minimum size and grid resolution.
    """

    def __init__(self, config: RemnantConfig | None = None) -> None:
        self.config = config or RemnantConfig()

    def extract(self, placed_cuts: Sequence[PlacedCut], sheet: Sheet) -> list[Remnant]:
        """Free rectangles with both sides at least ``min_size``, largest first.

        Each piece blocks its own footprint grown by the kerf on its right
        and top edges. With nothing placed, the whole sheet is the only
        remnant.
        """
        min_size = self.config.min_size
        if not placed_cuts:
            if sheet.width >= min_size and sheet.height >= min_size:
                return [Remnant(0.0, 0.0, sheet.width, sheet.height)]
            return []

        occupied = self._occupancy_grid(placed_cuts, sheet)
        remnants: list[Remnant] = []

        for x, y, width, height in self._scan_free_rectangles(occupied):
            remnant = self._to_sheet_units(x, y, width, height, sheet)
            if remnant.width >= min_size and remnant.height >= min_size:
                remnants.append(remnant)

        remnants.sort(key=lambda r: r.area, reverse=True)
        logger.debug("Found %d remnants on %sx%s sheet", len(remnants), sheet.width, sheet.height)
        return remnants

    def _occupancy_grid(self, placed_cuts: Sequence[PlacedCut], sheet: Sheet) -> np.ndarray:
        """Boolean grid indexed ``[row, col]``; True where material is used."""
        resolution = self.config.resolution
        cols = math.ceil(sheet.width / resolution - _GRID_EPSILON)
        rows = math.ceil(sheet.height / resolution - _GRID_EPSILON)
        occupied = np.zeros((rows, cols), dtype=bool)

        for pc in placed_cuts:
            blocked = pc.rect.inflate(sheet.kerf)
            start_col = max(0, math.floor(blocked.x / resolution + _GRID_EPSILON))
            start_row = max(0, math.floor(blocked.y / resolution + _GRID_EPSILON))
            end_col = min(cols, math.ceil(blocked.right / resolution - _GRID_EPSILON))
            end_row = min(rows, math.ceil(blocked.top / resolution - _GRID_EPSILON))
            occupied[start_row:end_row, start_col:end_col] = True

        return occupied

    @staticmethod
    def _scan_free_rectangles(occupied: np.ndarray) -> list[tuple[int, int, int, int]]:
        """Greedy row-major decomposition of free cells into rectangles.

        From each free cell not yet covered by an earlier rectangle, the
        rectangle extends right while the row stays free, then up while the
        whole span stays free. Returns ``(col, row, width, height)`` in cells.
        """
        rows, cols = occupied.shape
        visited = np.zeros_like(occupied)
        rectangles: list[tuple[int, int, int, int]] = []

        for row in range(rows):
            col = 0
            while col < cols:
                candidates = ~occupied[row, col:] & ~visited[row, col:]
                offset = int(np.argmax(candidates))
                if not candidates[offset]:
                    break
                col += offset

                blocked_to_right = occupied[row, col:]
                width = int(np.argmax(blocked_to_right)) if blocked_to_right.any() else cols - col

                height = 1
                while row + height < rows and not occupied[row + height, col:col + width].any():
                    height += 1

                visited[row:row + height, col:col + width] = True
                rectangles.append((col, row, width, height))
                col += width

        return rectangles

    def _to_sheet_units(self, col: int, row: int, width: int, height: int, sheet: Sheet) -> Remnant:
        """Convert a cell rectangle to sheet units, clipped to the sheet."""
        resolution = self.config.resolution
        x = col * resolution
        y = row * resolution
        return Remnant(
            x=x,
            y=y,
            width=min(width * resolution, sheet.width - x),
            height=min(height * resolution, sheet.height - y),
        )
