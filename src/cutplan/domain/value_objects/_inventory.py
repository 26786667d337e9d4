"""Inventory and material fulfilment value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ._cuts import PlacedCut
from ._errors import InvalidInputError
from ._geometry import Remnant


class MaterialType(str, Enum):
    """Kinds of sheet material held in inventory."""

    GLASS = "glass"
    MIRROR = "mirror"
    ALUMINUM = "aluminum"


class SheetOrigin(str, Enum):
    """Where an inventory sheet came from."""

    PURCHASE = "purchase"
    REMNANT = "remnant"


class SheetStatus(str, Enum):
    """Lifecycle state of an inventory sheet.

    available -> reserved (suggestion accepted) -> used (physically cut).
    """

    AVAILABLE = "available"
    RESERVED = "reserved"
    USED = "used"
    DAMAGED = "damaged"


@dataclass(frozen=True)
class MaterialSheet:
    """A physical sheet held in inventory.

    Attributes:
        id: Inventory identifier.
        material_type: Kind of material.
        thickness: Material thickness in millimetres.
        width: Sheet width.
        height: Sheet height.
        origin: Purchased full sheet or remnant of an earlier order.
        status: Lifecycle state.
        cost: Purchase cost (remnants carry 0).
        parent_sheet_id: For remnants, the sheet they were cut from.
        source_order_id: For remnants, the order that produced them.
    """

    id: str
    material_type: MaterialType
    thickness: float
    width: float
    height: float
    origin: SheetOrigin = SheetOrigin.PURCHASE
    status: SheetStatus = SheetStatus.AVAILABLE
    cost: float = 0.0
    parent_sheet_id: str | None = None
    source_order_id: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(f"Sheet '{self.id}' dimensions must be positive")
        if self.thickness <= 0:
            raise InvalidInputError(f"Sheet '{self.id}' thickness must be positive")
        if self.cost < 0:
            raise InvalidInputError(f"Sheet '{self.id}' cost must be non-negative")

    @property
    def area(self) -> float:
        """Total sheet area."""
        return self.width * self.height

    @property
    def is_remnant(self) -> bool:
        """True for sheets that are leftovers from earlier orders."""
        return self.origin == SheetOrigin.REMNANT


@dataclass(frozen=True)
class SheetPlan:
    """Placement plan for one inventory sheet within a suggestion."""

    sheet: MaterialSheet
    placed_cuts: tuple[PlacedCut, ...]
    utilization: float
    waste_area: float
    remnants: tuple[Remnant, ...] = ()

    @property
    def piece_count(self) -> int:
        """Number of pieces cut from this sheet."""
        return len(self.placed_cuts)


@dataclass(frozen=True)
class OptimizationSuggestion:
    """A candidate plan for fulfilling an order from inventory.

    Suggestions are advisory; accepting one (and reserving its sheets) is
    done by the caller.

    Attributes:
        suggestion_number: Order in which the suggestion was generated.
        strategy: Name of the strategy that produced it.
        sheet_details: Per-sheet placement plans.
        total_utilization: Used area over total area of all sheets, in percent.
        total_waste: Unused area summed across all sheets.
        total_cost: Sum of sheet costs.
        uses_remnants: True if any remnant sheet is consumed.
        estimated_remnants: Leftovers expected after cutting.
    """

    suggestion_number: int
    strategy: str
    sheet_details: tuple[SheetPlan, ...]
    total_utilization: float
    total_waste: float
    total_cost: float
    uses_remnants: bool
    estimated_remnants: tuple[Remnant, ...] = ()

    @property
    def sheets_used(self) -> tuple[str, ...]:
        """Ids of the inventory sheets this suggestion consumes."""
        return tuple(plan.sheet.id for plan in self.sheet_details)

    @property
    def piece_count(self) -> int:
        """Number of pieces placed across all sheets."""
        return sum(plan.piece_count for plan in self.sheet_details)


@dataclass(frozen=True)
class SuggestionResult:
    """Ranked suggestions for an order; index 0 is the default choice."""

    suggestions: tuple[OptimizationSuggestion, ...]
    best_suggestion: OptimizationSuggestion | None
