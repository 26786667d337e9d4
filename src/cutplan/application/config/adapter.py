"""Conversion of job file models into domain objects and engine settings."""

from cutplan.application.config.schema import (
    CutConfig,
    InventorySheetConfig,
    JobConfiguration,
    OptimizerConfigSchema,
)
from cutplan.application.packing_service import PackingConfig
from cutplan.application.suggestions import SuggestionConfig
from cutplan.domain.value_objects import Cut, MaterialSheet, Sheet
from cutplan.infrastructure.packing import OptimizerConfig
from cutplan.infrastructure.remnants import RemnantConfig


def config_to_sheet(config: JobConfiguration) -> Sheet | None:
    """The job's sheet, or None if the job only defines an order."""
    if config.sheet is None:
        return None
    return Sheet(
        width=config.sheet.width,
        height=config.sheet.height,
        kerf=config.sheet.kerf,
        thickness=config.sheet.thickness,
        cutting_method=config.sheet.cutting_method,
    )


def config_to_cuts(config: JobConfiguration) -> list[Cut]:
    """The job's cut list in file order."""
    return [_cut_from_config(cut) for cut in config.cuts]


def _cut_from_config(cut: CutConfig) -> Cut:
    return Cut(
        id=cut.id,
        width=cut.width,
        height=cut.height,
        quantity=cut.quantity,
        label=cut.label,
        allow_rotation=cut.allow_rotation,
    )


def config_to_inventory(config: JobConfiguration) -> list[MaterialSheet]:
    """The job's inventory records in file order."""
    return [_sheet_from_config(sheet) for sheet in config.inventory]


def _sheet_from_config(sheet: InventorySheetConfig) -> MaterialSheet:
    return MaterialSheet(
        id=sheet.id,
        material_type=sheet.material_type,
        thickness=sheet.thickness,
        width=sheet.width,
        height=sheet.height,
        origin=sheet.origin,
        status=sheet.status,
        cost=sheet.cost,
        parent_sheet_id=sheet.parent_sheet_id,
        source_order_id=sheet.source_order_id,
    )


def optimizer_config_from_schema(schema: OptimizerConfigSchema) -> OptimizerConfig:
    """Engine optimizer settings; omitted lists keep their defaults."""
    overrides = {
        name: tuple(value)
        for name, value in (
            ("sort_strategies", schema.sort_strategies),
            ("guillotine_split_rules", schema.guillotine_split_rules),
            ("guillotine_fit_rules", schema.guillotine_fit_rules),
            ("maxrects_fit_rules", schema.maxrects_fit_rules),
            ("skyline_fit_rules", schema.skyline_fit_rules),
        )
        if value is not None
    }
    return OptimizerConfig(
        max_workers=schema.max_workers,
        time_budget=schema.time_budget,
        **overrides,
    )


def config_to_packing_config(config: JobConfiguration) -> PackingConfig:
    """Packing settings from the optimizer and remnant sections."""
    return PackingConfig(
        optimizer=optimizer_config_from_schema(config.optimizer),
        remnants=RemnantConfig(
            min_size=config.remnants.min_size,
            resolution=config.remnants.resolution,
        ),
    )


def config_to_suggestion_config(config: JobConfiguration) -> SuggestionConfig:
    """Suggestion engine settings from the suggestions section."""
    section = config.suggestions
    return SuggestionConfig(
        thickness_tolerance=section.thickness_tolerance,
        utilization_tie_window=section.utilization_tie_window,
        max_full_sheets=section.max_full_sheets,
        max_suggestions=section.max_suggestions,
        min_inventory_remnant=section.min_inventory_remnant,
    )
