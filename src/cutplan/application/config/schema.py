"""Pydantic schema models for cutting job files.

A job file is a JSON document describing a cut list together with the sheet
to pack it on and/or the inventory to fulfil it from. Domain enums are
reused directly so that values stay in sync with the engine.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cutplan.domain.value_objects import (
    CuttingMethod,
    MaterialType,
    SheetOrigin,
    SheetStatus,
)
from cutplan.infrastructure.packing import (
    GuillotineFitRule,
    GuillotineSplitRule,
    MaxRectsFitRule,
    SkylineFitRule,
    SortStrategy,
)

# Supported schema versions for job files
# Version 1.0: Sheet, cuts, inventory and order
# Version 1.1: Optimizer, remnant and suggestion tuning sections
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


class SheetConfig(BaseModel):
    """Stock sheet to pack a cut list on.

    Attributes:
        width: Sheet width.
        height: Sheet height.
        kerf: Material removed by each cut.
        thickness: Material thickness in millimetres.
        cutting_method: Manual (hand snapped) or machine cutting.
    """

    model_config = ConfigDict(extra="forbid")

    width: float = Field(..., gt=0, description="Sheet width")
    height: float = Field(..., gt=0, description="Sheet height")
    kerf: float = Field(default=0.0, ge=0, description="Cutting tool kerf")
    thickness: float = Field(default=4.0, gt=0, description="Material thickness in mm")
    cutting_method: CuttingMethod = Field(
        default=CuttingMethod.MACHINE, description="Manual or machine cutting"
    )


class CutConfig(BaseModel):
    """One line item of the cut list."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Unique line item id")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)
    label: str = ""
    allow_rotation: bool = True


class InventorySheetConfig(BaseModel):
    """A sheet or remnant held in inventory."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    material_type: MaterialType
    thickness: float = Field(..., gt=0, description="Material thickness in mm")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    origin: SheetOrigin = SheetOrigin.PURCHASE
    status: SheetStatus = SheetStatus.AVAILABLE
    cost: float = Field(default=0.0, ge=0, description="Purchase cost")
    parent_sheet_id: str | None = None
    source_order_id: str | None = None


class OrderConfig(BaseModel):
    """Material requirements of the order being fulfilled from inventory."""

    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, description="Order id, stamped on derived remnants")
    material_type: MaterialType
    thickness: float = Field(..., gt=0, description="Material thickness in mm")
    kerf: float = Field(default=0.0, ge=0)
    cutting_method: CuttingMethod = CuttingMethod.MACHINE


class OptimizerConfigSchema(BaseModel):
    """Orderings and rule sets tried by the optimizer.

    Omitted lists keep the engine defaults. An empty list disables that
    packer family.
    """

    model_config = ConfigDict(extra="forbid")

    sort_strategies: list[SortStrategy] | None = Field(default=None, min_length=1)
    guillotine_split_rules: list[GuillotineSplitRule] | None = None
    guillotine_fit_rules: list[GuillotineFitRule] | None = None
    maxrects_fit_rules: list[MaxRectsFitRule] | None = None
    skyline_fit_rules: list[SkylineFitRule] | None = None
    max_workers: int = Field(default=1, ge=1, le=64, description="Thread pool size")
    time_budget: float | None = Field(
        default=None, gt=0, description="Seconds after which no new candidates start"
    )

    @model_validator(mode="after")
    def validate_packer_enabled(self) -> "OptimizerConfigSchema":
        """At least one packer family must remain enabled."""
        guillotine = self.guillotine_split_rules != [] and self.guillotine_fit_rules != []
        maxrects = self.maxrects_fit_rules != []
        skyline = self.skyline_fit_rules != []
        if not (guillotine or maxrects or skyline):
            raise ValueError("At least one packer family must be enabled")
        return self


class RemnantConfigSchema(BaseModel):
    """Remnant extraction settings."""

    model_config = ConfigDict(extra="forbid")

    min_size: float = Field(default=10.0, gt=0, description="Minimum remnant side")
    resolution: float = Field(default=1.0, gt=0, description="Occupancy grid cell size")


class SuggestionConfigSchema(BaseModel):
    """Material suggestion settings."""

    model_config = ConfigDict(extra="forbid")

    thickness_tolerance: float = Field(default=0.5, ge=0)
    utilization_tie_window: float = Field(
        default=5.0,
        ge=0,
        description="Utilization gap (points) within which cost decides",
    )
    max_full_sheets: int = Field(default=3, ge=1)
    max_suggestions: int = Field(default=5, ge=1)
    min_inventory_remnant: float = Field(
        default=200.0, gt=0, description="Smallest side of a remnant kept in inventory"
    )


class JobConfiguration(BaseModel):
    """Root model of a cutting job file.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        sheet: Sheet to pack on (needed for packing and checks)
        cuts: The cut list
        inventory: Sheets and remnants available for suggestions
        order: Material requirements (needed for suggestions)
        optimizer: Optimizer tuning (v1.1+)
        remnants: Remnant extraction tuning (v1.1+)
        suggestions: Suggestion engine tuning (v1.1+)

    Example:
        >>> config = JobConfiguration(
        ...     schema_version="1.0",
        ...     sheet=SheetConfig(width=100, height=100),
        ...     cuts=[CutConfig(id="a", width=60, height=60)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    sheet: SheetConfig | None = Field(default=None, description="Sheet to pack on")
    cuts: list[CutConfig] = Field(..., min_length=1)
    inventory: list[InventorySheetConfig] = Field(default_factory=list)
    order: OrderConfig | None = None
    optimizer: OptimizerConfigSchema = Field(default_factory=OptimizerConfigSchema)
    remnants: RemnantConfigSchema = Field(default_factory=RemnantConfigSchema)
    suggestions: SuggestionConfigSchema = Field(default_factory=SuggestionConfigSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of them."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @field_validator("cuts")
    @classmethod
    def validate_unique_cut_ids(cls, v: list[CutConfig]) -> list[CutConfig]:
        """Cut ids identify line items and must be unique."""
        seen: set[str] = set()
        for cut in v:
            if cut.id in seen:
                raise ValueError(f"Duplicate cut id '{cut.id}'")
            seen.add(cut.id)
        return v

    @field_validator("inventory")
    @classmethod
    def validate_unique_inventory_ids(
        cls, v: list[InventorySheetConfig]
    ) -> list[InventorySheetConfig]:
        """Inventory ids must be unique."""
        seen: set[str] = set()
        for sheet in v:
            if sheet.id in seen:
                raise ValueError(f"Duplicate inventory sheet id '{sheet.id}'")
            seen.add(sheet.id)
        return v

    @model_validator(mode="after")
    def validate_has_target(self) -> "JobConfiguration":
        """A job needs a sheet to pack on or an order to fulfil."""
        if self.sheet is None and self.order is None:
            raise ValueError("Job must define a 'sheet', an 'order', or both")
        return self
