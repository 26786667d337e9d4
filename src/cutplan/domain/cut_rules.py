"""Minimum safe cut dimensions by material thickness and cutting method.

Very narrow strips break when snapped by hand or chip on the cutting table.
These tables give the smallest recommended side for each glass thickness.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .value_objects import Cut, CuttingMethod, Sheet


@dataclass(frozen=True)
class MinDimensionRule:
    """Smallest recommended piece side for material up to ``thickness`` mm."""

    thickness: float
    min_dimension: float


MANUAL_RULES: tuple[MinDimensionRule, ...] = (
    MinDimensionRule(thickness=3, min_dimension=15),
    MinDimensionRule(thickness=4, min_dimension=15),
    MinDimensionRule(thickness=5, min_dimension=18),
    MinDimensionRule(thickness=6, min_dimension=18),
    MinDimensionRule(thickness=8, min_dimension=20),
    MinDimensionRule(thickness=10, min_dimension=25),
)

MACHINE_RULES: tuple[MinDimensionRule, ...] = (
    MinDimensionRule(thickness=3, min_dimension=10),
    MinDimensionRule(thickness=4, min_dimension=12),
    MinDimensionRule(thickness=5, min_dimension=15),
    MinDimensionRule(thickness=6, min_dimension=18),
    MinDimensionRule(thickness=8, min_dimension=22),
    MinDimensionRule(thickness=10, min_dimension=25),
)

# Pieces within this factor of the minimum get a warning
WARNING_FACTOR = 1.1


class ValidationStatus(str, Enum):
    """Outcome of a cut dimension check."""

    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class CutValidation:
    """Result of checking one cut against the minimum dimension rules."""

    status: ValidationStatus
    message: str
    min_dimension: float


def rules_for(method: CuttingMethod) -> tuple[MinDimensionRule, ...]:
    """Rule table for a cutting method."""
    return MANUAL_RULES if method == CuttingMethod.MANUAL else MACHINE_RULES


def get_minimum_dimension(thickness: float, method: CuttingMethod) -> float:
    """Smallest recommended side for a thickness and cutting method.

    Thicknesses beyond the table use its last entry.
    """
    rules = rules_for(method)
    for rule in rules:
        if thickness <= rule.thickness:
            return rule.min_dimension
    return rules[-1].min_dimension


def validate_cut_dimensions(cut: Cut, sheet: Sheet) -> CutValidation:
    """Check a cut's smallest side against the rules for ``sheet``."""
    min_dimension = get_minimum_dimension(sheet.thickness, sheet.cutting_method)
    smallest = min(cut.width, cut.height)

    if smallest < min_dimension:
        method = (
            "manual cutting"
            if sheet.cutting_method == CuttingMethod.MANUAL
            else "machine cutting"
        )
        return CutValidation(
            status=ValidationStatus.DANGER,
            message=(
                f"Dimension too small for {method}. "
                f"Recommended minimum: {min_dimension:g}"
            ),
            min_dimension=min_dimension,
        )
    if smallest < min_dimension * WARNING_FACTOR:
        return CutValidation(
            status=ValidationStatus.WARNING,
            message=f"Close to the minimum dimension ({min_dimension:g}). Cut with care.",
            min_dimension=min_dimension,
        )
    return CutValidation(
        status=ValidationStatus.SAFE,
        message="Dimensions are safe to cut",
        min_dimension=min_dimension,
    )


def get_method_recommendation(cuts: Sequence[Cut], sheet: Sheet) -> str | None:
    """Suggest machine cutting when manual cuts fall below the safe minimum.

    Returns None for machine sheets or when every cut is safe by hand.
    """
    if sheet.cutting_method == CuttingMethod.MACHINE:
        return None

    min_dimension = get_minimum_dimension(sheet.thickness, CuttingMethod.MANUAL)
    problematic = [c for c in cuts if min(c.width, c.height) < min_dimension]
    if problematic:
        return (
            f"{len(problematic)} cut(s) are hard to snap by hand. "
            "Consider machine cutting for better precision."
        )
    return None
