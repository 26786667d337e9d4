"""Application layer - packing, material suggestions and inventory use cases."""

from .inventory import (
    change_status,
    derive_remnant_sheets,
    derive_suggestion_remnants,
    select_inventory_remnants,
)
from .packing_service import PackingConfig, PackingService, calculate_remnants, pack
from .suggestions import (
    MaterialSuggestionEngine,
    SuggestionConfig,
    SuggestionStrategy,
    generate_material_suggestions,
)

__all__ = [
    # Packing
    "PackingConfig",
    "PackingService",
    "calculate_remnants",
    "pack",
    # Suggestions
    "MaterialSuggestionEngine",
    "SuggestionConfig",
    "SuggestionStrategy",
    "generate_material_suggestions",
    # Inventory
    "change_status",
    "derive_remnant_sheets",
    "derive_suggestion_remnants",
    "select_inventory_remnants",
]
