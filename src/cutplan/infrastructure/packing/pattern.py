"""Grid-pattern packer for manual cutting.

Shop practice for hand-snapped sheets is to cut the dominant repeated piece
as a clean grid first and salvage the leftover strips afterwards. This packer
tries every uniform grid for every cut type, fills the strips to the right
of and above the grid with the remaining cuts, and keeps the best outcome.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Sequence

from cutplan.domain.value_objects import (
    Cut,
    CutLine,
    CutOrientation,
    PackingResult,
    PlacedCut,
    Rectangle,
    Sheet,
    calculate_utilization,
    remaining_cuts,
)

from ._free_space import EPSILON
from .optimizer import MultiStrategyOptimizer, OptimizerConfig

logger = logging.getLogger(__name__)

METHOD_NAME = "hybrid-pattern"

# Leftover strips narrower than this are not worth packing
MIN_STRIP_SIZE = 5.0

# Utilization differences below this are treated as ties
UTILIZATION_TOLERANCE = 0.01


@dataclass(frozen=True)
class GridPattern:
    """A uniform rows x cols grid of one cut type.

    Attributes:
        rows: Number of rows in the grid.
        cols: Number of columns in the grid.
        piece_width: Placed piece width.
        piece_height: Placed piece height.
        rotated: True if pieces are rotated 90 degrees.
        piece_count: Pieces actually placed (may leave grid cells empty).
    """

    rows: int
    cols: int
    piece_width: float
    piece_height: float
    rotated: bool
    piece_count: int

    @property
    def used_cols(self) -> int:
        """Columns holding at least one piece."""
        return min(self.cols, self.piece_count)

    @property
    def used_rows(self) -> int:
        """Rows holding at least one piece (filled row by row)."""
        return math.ceil(self.piece_count / self.cols)

    def pieces_in_column(self, col: int) -> int:
        """Number of pieces in column ``col``."""
        full_rows, extra = divmod(self.piece_count, self.cols)
        return full_rows + (1 if col < extra else 0)

    def block(self, kerf: float) -> Rectangle:
        """Bounding box of the placed pieces, kerf between them included."""
        width = self.used_cols * self.piece_width + (self.used_cols - 1) * kerf
        height = self.used_rows * self.piece_height + (self.used_rows - 1) * kerf
        return Rectangle(0.0, 0.0, width, height)


def _grid_capacity(length: float, piece: float, kerf: float) -> int:
    return math.floor((length + kerf) / (piece + kerf) + EPSILON)


def explore_patterns(cut: Cut, sheet: Sheet) -> list[GridPattern]:
    """Enumerate feasible grids for ``cut`` on ``sheet``.

    For each allowed orientation the largest grid is always included. When
    it holds more pieces than requested, every smaller grid holding no more
    than the requested quantity is included as well.
    """
    patterns: list[GridPattern] = []
    kerf = sheet.kerf

    for width, height, rotated in cut.orientations():
        if width > sheet.width + EPSILON or height > sheet.height + EPSILON:
            continue

        max_cols = _grid_capacity(sheet.width, width, kerf)
        max_rows = _grid_capacity(sheet.height, height, kerf)
        if max_cols <= 0 or max_rows <= 0:
            continue

        capacity = max_cols * max_rows
        patterns.append(
            GridPattern(
                rows=max_rows,
                cols=max_cols,
                piece_width=width,
                piece_height=height,
                rotated=rotated,
                piece_count=min(capacity, cut.quantity),
            )
        )

        if capacity <= cut.quantity:
            continue

        for cols in range(1, max_cols + 1):
            for rows in range(1, max_rows + 1):
                count = cols * rows
                if count > cut.quantity:
                    break
                patterns.append(
                    GridPattern(
                        rows=rows,
                        cols=cols,
                        piece_width=width,
                        piece_height=height,
                        rotated=rotated,
                        piece_count=count,
                    )
                )

    return patterns


def grid_cut_lines(pattern: GridPattern, sheet: Sheet) -> list[CutLine]:
    """Guillotine cut sequence separating the grid block and its pieces.

    First the block is cut off the sheet (a full-height vertical cut, then a
    horizontal cut across the block width), then the columns are separated
    with full-height cuts, then each column strip is cut into pieces.
    """
    kerf = sheet.kerf
    half_kerf = kerf / 2
    block = pattern.block(kerf)
    lines: list[CutLine] = []

    def add(orientation: CutOrientation, position: float, start: float, end: float) -> None:
        lines.append(
            CutLine(
                id=f"cut_{len(lines)}",
                orientation=orientation,
                position=position,
                start=start,
                end=end,
                order=len(lines) + 1,
            )
        )

    if block.right < sheet.width - EPSILON:
        add(CutOrientation.VERTICAL, block.right + half_kerf, 0.0, sheet.height)
    if block.top < sheet.height - EPSILON:
        add(CutOrientation.HORIZONTAL, block.top + half_kerf, 0.0, block.right)

    w, h = pattern.piece_width, pattern.piece_height
    for col in range(1, pattern.used_cols):
        position = col * w + (col - 1) * kerf + half_kerf
        add(CutOrientation.VERTICAL, position, 0.0, block.top)

    for col in range(pattern.used_cols):
        strip_x = col * (w + kerf)
        in_column = pattern.pieces_in_column(col)
        # A short column also needs a cut above its last piece
        cuts_needed = in_column if in_column < pattern.used_rows else in_column - 1
        for row in range(1, cuts_needed + 1):
            position = row * h + (row - 1) * kerf + half_kerf
            add(CutOrientation.HORIZONTAL, position, strip_x, strip_x + w)

    return lines


class PatternHybridPacker:
    """Grid pattern plus leftover-strip packer for manual cutting.

    Grid pieces are marked ``is_pattern=True`` and are always reachable by
    edge-to-edge cuts. Pieces packed into the leftover strips are marked
    ``is_pattern=False``; the strips themselves are separated from the grid
    by full-length cuts.

    Attributes:
        strip_optimizer: Optimizer used to fill leftover strips.
    """

    name = METHOD_NAME

    def __init__(self, strip_config: OptimizerConfig | None = None) -> None:
        self.strip_optimizer = MultiStrategyOptimizer(
            strip_config or OptimizerConfig.leftover_strip()
        )

    def pack(self, cuts: Sequence[Cut], sheet: Sheet) -> PackingResult:
        """Choose the grid pattern giving the best overall layout.

        Args:
            cuts: Cut list with quantities.
            sheet: Target sheet.

        Returns:
            The layout with the highest utilization (ties within 0.01 points
            go to more pieces, then to the first pattern found).
        """
        requested = sum(cut.quantity for cut in cuts)
        best: PackingResult | None = None
        explored = 0

        for cut in cuts:
            for pattern in explore_patterns(cut, sheet):
                explored += 1
                result = self._pack_with_pattern(pattern, cut, cuts, sheet, requested)
                if result.placed_count == 0:
                    continue
                if best is None or self._is_better(result, best):
                    best = result

        logger.debug("Explored %d grid patterns", explored)

        if best is None:
            return PackingResult.empty(method=METHOD_NAME, requested_count=requested)

        logger.info(
            "Pattern layout: %d/%d pieces, %.1f%% utilization",
            best.placed_count,
            requested,
            best.utilization,
        )
        return best

    @staticmethod
    def _is_better(candidate: PackingResult, incumbent: PackingResult) -> bool:
        difference = candidate.utilization - incumbent.utilization
        if abs(difference) > UTILIZATION_TOLERANCE:
            return difference > 0
        return candidate.placed_count > incumbent.placed_count

    def _pack_with_pattern(
        self,
        pattern: GridPattern,
        cut: Cut,
        all_cuts: Sequence[Cut],
        sheet: Sheet,
        requested: int,
    ) -> PackingResult:
        """Lay out ``pattern`` and fill the leftover strips."""
        kerf = sheet.kerf
        placed: list[PlacedCut] = []

        for index in range(pattern.piece_count):
            row, col = divmod(index, pattern.cols)
            placed.append(
                PlacedCut(
                    cut=replace(
                        cut,
                        id=f"{cut.id}_pattern_{index}",
                        quantity=1,
                        original_id=cut.source_id,
                    ),
                    x=col * (pattern.piece_width + kerf),
                    y=row * (pattern.piece_height + kerf),
                    width=pattern.piece_width,
                    height=pattern.piece_height,
                    rotated=pattern.rotated,
                    is_pattern=True,
                )
            )

        remaining = remaining_cuts(all_cuts, placed)

        for strip_index, strip in enumerate(self._leftover_strips(pattern, sheet)):
            if not remaining:
                break
            if strip.width < MIN_STRIP_SIZE or strip.height < MIN_STRIP_SIZE:
                continue

            strip_result = self.strip_optimizer.best(
                remaining, sheet.with_size(strip.width, strip.height)
            )
            for pc in strip_result.placed_cuts:
                moved = pc.translated(strip.x, strip.y, is_pattern=False)
                placed.append(
                    replace(moved, cut=replace(moved.cut, id=f"{moved.cut.id}_s{strip_index}"))
                )
            remaining = remaining_cuts(remaining, strip_result.placed_cuts)

        return PackingResult(
            placed_cuts=tuple(placed),
            utilization=calculate_utilization(placed, sheet),
            method=METHOD_NAME,
            requested_count=requested,
            cut_lines=tuple(grid_cut_lines(pattern, sheet)),
        )

    @staticmethod
    def _leftover_strips(pattern: GridPattern, sheet: Sheet) -> list[Rectangle]:
        """Strip right of the block (full height) and above it (block width)."""
        kerf = sheet.kerf
        block = pattern.block(kerf)
        strips: list[Rectangle] = []

        right_width = sheet.width - block.right - kerf
        if right_width > EPSILON:
            strips.append(Rectangle(block.right + kerf, 0.0, right_width, sheet.height))

        top_height = sheet.height - block.top - kerf
        if top_height > EPSILON:
            strips.append(Rectangle(0.0, block.top + kerf, block.right, top_height))

        return strips
