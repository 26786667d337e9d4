"""Inventory bookkeeping after a cut plan is executed.

These functions only compute the new records; storing them is the
caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from cutplan.domain.value_objects import (
    InvalidInputError,
    MaterialSheet,
    OptimizationSuggestion,
    Rectangle,
    Remnant,
    SheetOrigin,
    SheetPlan,
    SheetStatus,
)

logger = logging.getLogger(__name__)

# Smallest side a leftover needs to go back into inventory
DEFAULT_MIN_INVENTORY_REMNANT = 200.0

_ALLOWED_TRANSITIONS: dict[SheetStatus, frozenset[SheetStatus]] = {
    SheetStatus.AVAILABLE: frozenset(
        {SheetStatus.RESERVED, SheetStatus.USED, SheetStatus.DAMAGED}
    ),
    SheetStatus.RESERVED: frozenset(
        {SheetStatus.AVAILABLE, SheetStatus.USED, SheetStatus.DAMAGED}
    ),
    SheetStatus.USED: frozenset(),
    SheetStatus.DAMAGED: frozenset(),
}


def change_status(sheet: MaterialSheet, status: SheetStatus) -> MaterialSheet:
    """Copy of ``sheet`` moved to ``status``.

    Sheets go available -> reserved -> used; a reservation can be released
    and any sheet not yet used can be written off as damaged.

    Raises:
        InvalidInputError: If the transition is not allowed.
    """
    if status == sheet.status:
        return sheet
    if status not in _ALLOWED_TRANSITIONS[sheet.status]:
        raise InvalidInputError(
            f"Sheet '{sheet.id}' cannot go from {sheet.status.value} to {status.value}"
        )
    return replace(sheet, status=status)


def select_inventory_remnants(
    remnants: Sequence[Remnant],
    min_size: float = DEFAULT_MIN_INVENTORY_REMNANT,
) -> list[Remnant]:
    """Remnants worth storing, largest first and without overlaps.

    Extracted remnants may overlap each other. Larger ones are kept first;
    any remnant overlapping one already kept is skipped so that no material
    is counted twice.
    """
    kept: list[Remnant] = []
    for remnant in sorted(remnants, key=lambda r: r.area, reverse=True):
        if remnant.width < min_size or remnant.height < min_size:
            continue
        footprint = _footprint(remnant)
        if any(footprint.intersects(_footprint(other)) for other in kept):
            continue
        kept.append(remnant)
    return kept


def _footprint(remnant: Remnant) -> Rectangle:
    return Rectangle(remnant.x, remnant.y, remnant.width, remnant.height)


def derive_remnant_sheets(
    plan: SheetPlan,
    source_order_id: str | None = None,
    min_size: float = DEFAULT_MIN_INVENTORY_REMNANT,
) -> list[MaterialSheet]:
    """New inventory records for the reusable leftovers of an executed plan.

    Each record is an available remnant of the consumed sheet's material
    and thickness, at no cost, pointing back to the consumed sheet.

    Args:
        plan: The executed sheet plan (its remnants must be computed).
        source_order_id: Order the plan belonged to.
        min_size: Smallest side a remnant needs to be stored.

    Returns:
        One record per stored remnant, largest first. Ids are
        ``"<sheet id>-R<n>"``.
    """
    parent = plan.sheet
    records = [
        MaterialSheet(
            id=f"{parent.id}-R{index}",
            material_type=parent.material_type,
            thickness=parent.thickness,
            width=remnant.width,
            height=remnant.height,
            origin=SheetOrigin.REMNANT,
            status=SheetStatus.AVAILABLE,
            cost=0.0,
            parent_sheet_id=parent.id,
            source_order_id=source_order_id,
        )
        for index, remnant in enumerate(select_inventory_remnants(plan.remnants, min_size), start=1)
    ]
    logger.info(
        "Sheet %s leaves %d reusable remnants (of %d found)",
        parent.id,
        len(records),
        len(plan.remnants),
    )
    return records


def derive_suggestion_remnants(
    suggestion: OptimizationSuggestion,
    source_order_id: str | None = None,
    min_size: float = DEFAULT_MIN_INVENTORY_REMNANT,
) -> list[MaterialSheet]:
    """Inventory records every sheet of ``suggestion`` would leave behind."""
    return [
        record
        for plan in suggestion.sheet_details
        for record in derive_remnant_sheets(plan, source_order_id, min_size)
    ]
