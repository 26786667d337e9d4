"""Cut list, sheet and packing result value objects."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Sequence

from ._errors import InvalidInputError
from ._geometry import CutLine, Rectangle, Remnant


class CuttingMethod(str, Enum):
    """How the sheet will be cut.

    - MANUAL: hand-snap cutting, only straight edge-to-edge (guillotine) cuts
    - MACHINE: CNC/automatic table, irregular layouts are allowed
    """

    MANUAL = "manual"
    MACHINE = "machine"


@dataclass(frozen=True)
class Cut:
    """A rectangular piece requested by an order.

    Attributes:
        id: Identifier of the cut line item.
        width: Piece width.
        height: Piece height.
        quantity: Number of identical pieces requested.
        label: Display label.
        allow_rotation: Whether the piece may be placed rotated 90 degrees.
        original_id: For expanded unit pieces, the id of the source cut.
    """

    id: str
    width: float
    height: float
    quantity: int = 1
    label: str = ""
    allow_rotation: bool = True
    original_id: str | None = None

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) and v > 0 for v in (self.width, self.height)):
            raise InvalidInputError(
                f"Cut '{self.id}' dimensions must be positive and finite "
                f"(got {self.width}x{self.height})"
            )
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise InvalidInputError(
                f"Cut '{self.id}' quantity must be a whole number (got {self.quantity!r})"
            )
        if self.quantity < 1:
            raise InvalidInputError(
                f"Cut '{self.id}' quantity must be at least 1 (got {self.quantity})"
            )

    @property
    def area(self) -> float:
        """Area of a single piece."""
        return self.width * self.height

    @property
    def total_area(self) -> float:
        """Area of all requested pieces."""
        return self.area * self.quantity

    @property
    def source_id(self) -> str:
        """Id of the cut line item this piece belongs to."""
        return self.original_id or self.id

    def orientations(self) -> Iterator[tuple[float, float, bool]]:
        """Yield ``(width, height, rotated)`` for each allowed orientation.

        Square pieces yield a single orientation since rotating them
        changes nothing.
        """
        yield self.width, self.height, False
        if self.allow_rotation and self.width != self.height:
            yield self.height, self.width, True

    def expand(self) -> list[Cut]:
        """Split this cut into ``quantity`` unit pieces.

        Each unit keeps a back-reference to this cut in ``original_id``.
        """
        return [
            replace(self, id=f"{self.id}_{i}", quantity=1, original_id=self.source_id)
            for i in range(self.quantity)
        ]


def expand_cuts(cuts: Sequence[Cut]) -> list[Cut]:
    """Expand every cut into unit pieces, preserving list order."""
    expanded: list[Cut] = []
    for cut in cuts:
        expanded.extend(cut.expand())
    return expanded


@dataclass(frozen=True)
class Sheet:
    """A stock sheet to cut pieces from.

    Attributes:
        width: Sheet width.
        height: Sheet height.
        kerf: Material consumed by each cut (0 for hand-snapped cuts).
        thickness: Material thickness in millimetres.
        cutting_method: Manual (guillotine only) or machine cutting.
    """

    width: float
    height: float
    kerf: float = 0.0
    thickness: float = 4.0
    cutting_method: CuttingMethod = CuttingMethod.MACHINE

    def __post_init__(self) -> None:
        if not (math.isfinite(self.width) and self.width > 0):
            raise InvalidInputError("Sheet width must be positive")
        if not (math.isfinite(self.height) and self.height > 0):
            raise InvalidInputError("Sheet height must be positive")
        if not (math.isfinite(self.kerf) and self.kerf >= 0):
            raise InvalidInputError("Kerf must be non-negative")
        if self.thickness <= 0:
            raise InvalidInputError("Sheet thickness must be positive")
        if self.cutting_method not in tuple(CuttingMethod):
            raise InvalidInputError(
                f"Unknown cutting method: {self.cutting_method!r}"
            )

    @property
    def area(self) -> float:
        """Total sheet area."""
        return self.width * self.height

    @property
    def bounds(self) -> Rectangle:
        """The whole sheet as a rectangle."""
        return Rectangle(0.0, 0.0, self.width, self.height)

    def with_size(self, width: float, height: float) -> Sheet:
        """Copy of this sheet with other dimensions (same kerf and method)."""
        return replace(self, width=width, height=height)


@dataclass(frozen=True)
class PlacedCut:
    """A unit piece placed on a sheet.

    ``width`` and ``height`` are the dimensions as placed, so they are swapped
    relative to ``cut`` when ``rotated`` is True.

    Attributes:
        cut: The unit piece being placed.
        x: Left edge position.
        y: Bottom edge position.
        width: Placed width.
        height: Placed height.
        rotated: True if the piece is rotated 90 degrees.
        is_pattern: True for grid-pattern pieces, False for pieces packed
            into leftover strips, None when not produced by the pattern packer.
    """

    cut: Cut
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False
    is_pattern: bool | None = None

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def rect(self) -> Rectangle:
        """Footprint of the piece on the sheet."""
        return Rectangle(self.x, self.y, self.width, self.height)

    @property
    def area(self) -> float:
        """Placed area."""
        return self.width * self.height

    def translated(self, dx: float, dy: float, is_pattern: bool | None = None) -> PlacedCut:
        """Copy of this placement shifted by ``(dx, dy)``."""
        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            is_pattern=self.is_pattern if is_pattern is None else is_pattern,
        )


def remaining_cuts(cuts: Sequence[Cut], placed_cuts: Sequence[PlacedCut]) -> list[Cut]:
    """Cuts still outstanding once ``placed_cuts`` are accounted for.

    Placed pieces are matched to cut line items by ``source_id``; line items
    with nothing left are dropped and the rest keep their order.
    """
    placed = Counter(pc.cut.source_id for pc in placed_cuts)
    remaining: list[Cut] = []
    for cut in cuts:
        left = cut.quantity - placed[cut.source_id]
        if left > 0:
            remaining.append(cut if left == cut.quantity else replace(cut, quantity=left))
        placed[cut.source_id] = max(0, -left)
    return remaining


def calculate_utilization(placed_cuts: Sequence[PlacedCut], sheet: Sheet) -> float:
    """Percentage of the sheet area covered by placed pieces."""
    used = sum(pc.area for pc in placed_cuts)
    return min(100.0, used / sheet.area * 100)


@dataclass(frozen=True)
class PackingResult:
    """Result of packing a cut list onto one sheet.

    Attributes:
        placed_cuts: Placed unit pieces.
        utilization: Placed area as a percentage of the sheet area.
        method: Name of the algorithm family that produced the layout.
        requested_count: Number of unit pieces that were requested.
        cut_lines: Guillotine cut lines (manual pattern layouts only).
        remnants: Reusable leftovers, largest first.
    """

    placed_cuts: tuple[PlacedCut, ...]
    utilization: float
    method: str
    requested_count: int = 0
    cut_lines: tuple[CutLine, ...] = ()
    remnants: tuple[Remnant, ...] = ()

    def __post_init__(self) -> None:
        if self.utilization < 0 or self.utilization > 100:
            raise ValueError("Utilization must be between 0 and 100")

    @property
    def placed_count(self) -> int:
        """Number of unit pieces placed."""
        return len(self.placed_cuts)

    @property
    def is_complete(self) -> bool:
        """True when every requested piece was placed."""
        return self.placed_count >= self.requested_count

    @property
    def used_area(self) -> float:
        """Total placed area."""
        return sum(pc.area for pc in self.placed_cuts)

    @classmethod
    def empty(cls, method: str, requested_count: int = 0) -> PackingResult:
        """A result with nothing placed."""
        return cls(
            placed_cuts=(),
            utilization=0.0,
            method=method,
            requested_count=requested_count,
        )
