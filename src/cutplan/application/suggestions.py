"""Material suggestion engine.

Given an order's cut list and the current inventory, proposes which sheets
and remnants to cut it from. Several independent strategies are tried and
their plans ranked; nothing is reserved here, accepting a suggestion is up
to the caller.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, TypeVar

from cutplan.domain.value_objects import (
    Cut,
    CuttingMethod,
    InvalidInputError,
    MaterialSheet,
    MaterialType,
    OptimizationSuggestion,
    PackingResult,
    Remnant,
    Sheet,
    SheetPlan,
    SheetStatus,
    SuggestionResult,
    remaining_cuts,
)

from .inventory import select_inventory_remnants
from .packing_service import PackingConfig, PackingService

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class SuggestionStrategy(str, Enum):
    """Names of the fulfilment strategies."""

    REMNANTS_ONLY = "remnants_only"
    SINGLE_FULL_SHEET = "single_full_sheet"
    REMNANTS_AND_FULL_SHEET = "remnants_and_full_sheet"
    MULTIPLE_FULL_SHEETS = "multiple_full_sheets"


@dataclass(frozen=True)
class SuggestionConfig:
    """Suggestion engine settings.

    Attributes:
        thickness_tolerance: Largest thickness difference (mm) accepted
            between an inventory sheet and the order.
        utilization_tie_window: Utilization gap (percentage points) within
            which two suggestions are ranked by cost instead.
        max_full_sheets: Most full sheets the multi-sheet strategy may use.
        max_suggestions: Default number of suggestions returned.
        min_inventory_remnant: Smallest side a leftover needs to be expected
            back in inventory.
    """

    thickness_tolerance: float = 0.5
    utilization_tie_window: float = 5.0
    max_full_sheets: int = 3
    max_suggestions: int = 5
    min_inventory_remnant: float = 200.0

    def __post_init__(self) -> None:
        if self.thickness_tolerance < 0:
            raise ValueError("Thickness tolerance must be non-negative")
        if self.utilization_tie_window < 0:
            raise ValueError("Utilization tie window must be non-negative")
        if self.max_full_sheets < 1:
            raise ValueError("max_full_sheets must be at least 1")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")
        if self.min_inventory_remnant <= 0:
            raise ValueError("Minimum inventory remnant size must be positive")


class MaterialSuggestionEngine:
    """Builds and ranks inventory fulfilment plans.

    Strategies, each yielding at most one suggestion:

    1. Remnants only, largest remnant first, until the cut list is done.
    2. The smallest single full sheet that takes the whole cut list.
    3. Remnants first, then the smallest full sheet taking the remainder.
    4. Up to ``max_full_sheets`` full sheets, smallest first.

    Suggestions using remnants rank first. Among the rest, higher total
    utilization wins unless the gap is within the tie window, in which case
    the cheaper plan wins.

    Attributes:
        config: Engine settings.
        packing_service: Packs cuts onto each candidate sheet.
    """

    def __init__(
        self,
        config: SuggestionConfig | None = None,
        packing_config: PackingConfig | None = None,
    ) -> None:
        self.config = config or SuggestionConfig()
        self.packing_service = PackingService(packing_config)

    def suggest(
        self,
        cuts: Sequence[Cut],
        available_sheets: Sequence[MaterialSheet],
        material_type: MaterialType | str,
        thickness: float,
        kerf: float,
        cutting_method: CuttingMethod | str,
        max_suggestions: int | None = None,
    ) -> SuggestionResult:
        """Generate ranked suggestions for an order.

        Args:
            cuts: The order's cut list.
            available_sheets: Inventory to choose from (any status).
            material_type: Required material.
            thickness: Required thickness in millimetres.
            kerf: Kerf of the cutting tool.
            cutting_method: Manual or machine cutting.
            max_suggestions: Number of suggestions to return; defaults to
                the configured value.

        Returns:
            Ranked suggestions; empty when nothing in inventory can take the
            whole cut list.

        Raises:
            InvalidInputError: If the material type, cutting method, kerf or
                suggestion limit is invalid.
        """
        material = _parse_enum(MaterialType, material_type, "material type")
        method = _parse_enum(CuttingMethod, cutting_method, "cutting method")
        if kerf < 0:
            raise InvalidInputError("Kerf must be non-negative")
        limit = self.config.max_suggestions if max_suggestions is None else max_suggestions
        if limit < 1:
            raise InvalidInputError("max_suggestions must be at least 1")

        candidates = self._filter_inventory(available_sheets, material, thickness)
        if not cuts or not candidates:
            logger.info(
                "No suggestions: %d cuts, %d matching inventory sheets",
                len(cuts),
                len(candidates),
            )
            return SuggestionResult(suggestions=(), best_suggestion=None)

        remnants = sorted(
            (s for s in candidates if s.is_remnant), key=lambda s: s.area, reverse=True
        )
        full_sheets = sorted((s for s in candidates if not s.is_remnant), key=lambda s: s.area)

        strategies: list[tuple[SuggestionStrategy, Callable[[], list[SheetPlan] | None]]] = [
            (
                SuggestionStrategy.REMNANTS_ONLY,
                lambda: self._remnants_only(cuts, remnants, kerf, method),
            ),
            (
                SuggestionStrategy.SINGLE_FULL_SHEET,
                lambda: self._single_full_sheet(cuts, full_sheets, kerf, method),
            ),
            (
                SuggestionStrategy.REMNANTS_AND_FULL_SHEET,
                lambda: self._remnants_and_full_sheet(cuts, remnants, full_sheets, kerf, method),
            ),
            (
                SuggestionStrategy.MULTIPLE_FULL_SHEETS,
                lambda: self._multiple_full_sheets(cuts, full_sheets, kerf, method),
            ),
        ]

        suggestions: list[OptimizationSuggestion] = []
        for name, strategy in strategies:
            plans = strategy()
            if plans is None:
                logger.debug("Strategy %s found no plan", name.value)
                continue
            suggestions.append(self._build_suggestion(len(suggestions) + 1, name.value, plans))

        ranked = sorted(suggestions, key=functools.cmp_to_key(self._compare))[:limit]
        logger.info("Generated %d suggestions (%d returned)", len(suggestions), len(ranked))
        return SuggestionResult(
            suggestions=tuple(ranked),
            best_suggestion=ranked[0] if ranked else None,
        )

    def _filter_inventory(
        self,
        sheets: Sequence[MaterialSheet],
        material: MaterialType,
        thickness: float,
    ) -> list[MaterialSheet]:
        tolerance = self.config.thickness_tolerance
        return [
            s
            for s in sheets
            if s.status == SheetStatus.AVAILABLE
            and s.material_type == material
            and abs(s.thickness - thickness) <= tolerance
        ]

    def _compare(self, a: OptimizationSuggestion, b: OptimizationSuggestion) -> int:
        if a.uses_remnants != b.uses_remnants:
            return -1 if a.uses_remnants else 1
        gap = a.total_utilization - b.total_utilization
        if abs(gap) > self.config.utilization_tie_window:
            return -1 if gap > 0 else 1
        return (a.total_cost > b.total_cost) - (a.total_cost < b.total_cost)

    # =========================================================================
    # Strategies
    # =========================================================================

    def _remnants_only(
        self,
        cuts: Sequence[Cut],
        remnants: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
    ) -> list[SheetPlan] | None:
        if not remnants:
            return None
        plans, remaining = self._fill_sheets(cuts, remnants, kerf, method)
        if remaining or not plans:
            return None
        return plans

    def _single_full_sheet(
        self,
        cuts: Sequence[Cut],
        full_sheets: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
    ) -> list[SheetPlan] | None:
        plan = self._smallest_complete_sheet(cuts, full_sheets, kerf, method)
        return [plan] if plan is not None else None

    def _remnants_and_full_sheet(
        self,
        cuts: Sequence[Cut],
        remnants: Sequence[MaterialSheet],
        full_sheets: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
    ) -> list[SheetPlan] | None:
        if not remnants or not full_sheets:
            return None
        plans, remaining = self._fill_sheets(cuts, remnants, kerf, method)
        # Nothing placed on remnants or nothing left over: covered by the
        # single-sheet and remnants-only strategies
        if not plans or not remaining:
            return None
        final = self._smallest_complete_sheet(remaining, full_sheets, kerf, method)
        if final is None:
            return None
        return plans + [final]

    def _multiple_full_sheets(
        self,
        cuts: Sequence[Cut],
        full_sheets: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
    ) -> list[SheetPlan] | None:
        if not full_sheets:
            return None
        plans, remaining = self._fill_sheets(
            cuts, full_sheets, kerf, method, max_sheets=self.config.max_full_sheets
        )
        # One sheet taking everything is the single-sheet strategy's plan
        if remaining or len(plans) < 2:
            return None
        return plans

    # =========================================================================
    # Helpers
    # =========================================================================

    def _pack_on(
        self,
        cuts: Sequence[Cut],
        sheet: MaterialSheet,
        kerf: float,
        method: CuttingMethod,
    ) -> PackingResult:
        target = Sheet(
            width=sheet.width,
            height=sheet.height,
            kerf=kerf,
            thickness=sheet.thickness,
            cutting_method=method,
        )
        return self.packing_service.pack(cuts, target)

    def _fill_sheets(
        self,
        cuts: Sequence[Cut],
        sheets: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
        max_sheets: int | None = None,
    ) -> tuple[list[SheetPlan], list[Cut]]:
        """Greedily pack into ``sheets`` in order; return plans and leftover cuts."""
        plans: list[SheetPlan] = []
        remaining = list(cuts)
        for sheet in sheets:
            if not remaining:
                break
            if max_sheets is not None and len(plans) >= max_sheets:
                break
            result = self._pack_on(remaining, sheet, kerf, method)
            if result.placed_count == 0:
                continue
            plans.append(_sheet_plan(sheet, result))
            remaining = remaining_cuts(remaining, result.placed_cuts)
        return plans, remaining

    def _smallest_complete_sheet(
        self,
        cuts: Sequence[Cut],
        full_sheets: Sequence[MaterialSheet],
        kerf: float,
        method: CuttingMethod,
    ) -> SheetPlan | None:
        """Plan for the smallest sheet (by area) that takes every cut."""
        for sheet in full_sheets:
            result = self._pack_on(cuts, sheet, kerf, method)
            if result.is_complete:
                return _sheet_plan(sheet, result)
        return None

    def _build_suggestion(
        self,
        number: int,
        strategy: str,
        plans: Sequence[SheetPlan],
    ) -> OptimizationSuggestion:
        total_area = sum(plan.sheet.area for plan in plans)
        total_waste = sum(plan.waste_area for plan in plans)
        utilization = (total_area - total_waste) / total_area * 100 if total_area > 0 else 0.0
        min_side = self.config.min_inventory_remnant
        estimated: list[Remnant] = [
            remnant
            for plan in plans
            for remnant in select_inventory_remnants(plan.remnants, min_side)
        ]
        return OptimizationSuggestion(
            suggestion_number=number,
            strategy=strategy,
            sheet_details=tuple(plans),
            total_utilization=utilization,
            total_waste=total_waste,
            total_cost=sum(plan.sheet.cost for plan in plans),
            uses_remnants=any(plan.sheet.is_remnant for plan in plans),
            estimated_remnants=tuple(estimated),
        )


def _sheet_plan(sheet: MaterialSheet, result: PackingResult) -> SheetPlan:
    return SheetPlan(
        sheet=sheet,
        placed_cuts=result.placed_cuts,
        utilization=result.utilization,
        waste_area=max(0.0, sheet.area - result.used_area),
        remnants=result.remnants,
    )


def _parse_enum(enum_type: type[E], value: E | str, label: str) -> E:
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidInputError(f"Unknown {label}: {value!r}") from None


def generate_material_suggestions(
    cuts: Sequence[Cut],
    available_sheets: Sequence[MaterialSheet],
    material_type: MaterialType | str,
    thickness: float,
    kerf: float,
    cutting_method: CuttingMethod | str,
    max_suggestions: int = 5,
    config: SuggestionConfig | None = None,
) -> SuggestionResult:
    """Ranked inventory fulfilment suggestions for a cut list.

    See :class:`MaterialSuggestionEngine` for the strategies and ranking.
    """
    engine = MaterialSuggestionEngine(config)
    return engine.suggest(
        cuts,
        available_sheets,
        material_type,
        thickness,
        kerf,
        cutting_method,
        max_suggestions=max_suggestions,
    )
