"""Job file schema, loading and conversion.

Public API:
    - JobConfiguration: Root job file model
    - SheetConfig, CutConfig, InventorySheetConfig, OrderConfig: Job sections
    - OptimizerConfigSchema, RemnantConfigSchema, SuggestionConfigSchema:
      Engine tuning sections
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for job file errors
    - config_to_*: Convert job sections to domain objects and settings

Example:
    >>> from pathlib import Path
    >>> from cutplan.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     job = load_config(Path("order-42.json"))
    ...     print(f"{len(job.cuts)} line items")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from cutplan.application.config.adapter import (
    config_to_cuts,
    config_to_inventory,
    config_to_packing_config,
    config_to_sheet,
    config_to_suggestion_config,
    optimizer_config_from_schema,
)
from cutplan.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from cutplan.application.config.schema import (
    SUPPORTED_VERSIONS,
    CutConfig,
    InventorySheetConfig,
    JobConfiguration,
    OptimizerConfigSchema,
    OrderConfig,
    RemnantConfigSchema,
    SheetConfig,
    SuggestionConfigSchema,
)

__all__ = [
    # Schema
    "SUPPORTED_VERSIONS",
    "CutConfig",
    "InventorySheetConfig",
    "JobConfiguration",
    "OptimizerConfigSchema",
    "OrderConfig",
    "RemnantConfigSchema",
    "SheetConfig",
    "SuggestionConfigSchema",
    # Loader
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    # Adapters
    "config_to_cuts",
    "config_to_inventory",
    "config_to_packing_config",
    "config_to_sheet",
    "config_to_suggestion_config",
    "optimizer_config_from_schema",
]
