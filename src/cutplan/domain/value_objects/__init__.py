"""Value objects for the cutting domain.

This module provides immutable data types used throughout the packing
engine. All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

from ._errors import InvalidInputError, PackingInvariantError

# Geometry
from ._geometry import CutLine, CutOrientation, Rectangle, Remnant

# Cut lists, sheets and results
from ._cuts import (
    Cut,
    CuttingMethod,
    PackingResult,
    PlacedCut,
    Sheet,
    calculate_utilization,
    expand_cuts,
    remaining_cuts,
)

# Inventory and suggestions
from ._inventory import (
    MaterialSheet,
    MaterialType,
    OptimizationSuggestion,
    SheetOrigin,
    SheetPlan,
    SheetStatus,
    SuggestionResult,
)

__all__ = [
    "Cut",
    "CutLine",
    "CutOrientation",
    "CuttingMethod",
    "InvalidInputError",
    "MaterialSheet",
    "MaterialType",
    "OptimizationSuggestion",
    "PackingInvariantError",
    "PackingResult",
    "PlacedCut",
    "Rectangle",
    "Remnant",
    "Sheet",
    "SheetOrigin",
    "SheetPlan",
    "SheetStatus",
    "SuggestionResult",
    "calculate_utilization",
    "expand_cuts",
    "remaining_cuts",
]
