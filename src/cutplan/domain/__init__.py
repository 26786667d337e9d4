"""Domain layer - cut lists, sheets, inventory and cutting rules."""

from .cut_rules import (
    CutValidation,
    ValidationStatus,
    get_method_recommendation,
    get_minimum_dimension,
    validate_cut_dimensions,
)
from .value_objects import (
    Cut,
    CutLine,
    CutOrientation,
    CuttingMethod,
    InvalidInputError,
    MaterialSheet,
    MaterialType,
    OptimizationSuggestion,
    PackingInvariantError,
    PackingResult,
    PlacedCut,
    Rectangle,
    Remnant,
    Sheet,
    SheetOrigin,
    SheetPlan,
    SheetStatus,
    SuggestionResult,
    calculate_utilization,
    expand_cuts,
    remaining_cuts,
)

__all__ = [
    # Value objects
    "Cut",
    "CutLine",
    "CutOrientation",
    "CuttingMethod",
    "MaterialSheet",
    "MaterialType",
    "OptimizationSuggestion",
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
    # Errors
    "InvalidInputError",
    "PackingInvariantError",
    # Cut rules
    "CutValidation",
    "ValidationStatus",
    "get_method_recommendation",
    "get_minimum_dimension",
    "validate_cut_dimensions",
]
