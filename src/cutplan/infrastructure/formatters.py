"""Text and JSON output for packing results and material suggestions."""

from __future__ import annotations

import json
from typing import Any, Sequence

from cutplan.domain import CutValidation, ValidationStatus
from cutplan.domain.value_objects import (
    Cut,
    CutLine,
    CutOrientation,
    MaterialSheet,
    OptimizationSuggestion,
    PackingResult,
    PlacedCut,
    Remnant,
    Sheet,
    SheetPlan,
    SuggestionResult,
)


class PackingReportFormatter:
    """Formats a single-sheet packing result as a table."""

    def format(self, result: PackingResult, sheet: Sheet) -> str:
        """Format placements, cut lines and remnants of ``result``."""
        lines = [
            "CUTTING PLAN",
            "=" * 70,
            f"Sheet: {sheet.width:g} x {sheet.height:g} "
            f"(kerf {sheet.kerf:g}, {sheet.thickness:g}mm, {sheet.cutting_method.value})",
            f"Method: {result.method}",
            f"Placed: {result.placed_count}/{result.requested_count} pieces",
            f"Utilization: {result.utilization:.1f}%",
            "",
        ]

        if not result.placed_cuts:
            lines.append("No pieces placed.")
        else:
            lines.extend(
                [
                    f"{'Piece':<24} {'X':>8} {'Y':>8} {'Width':>8} {'Height':>8}  Notes",
                    "-" * 70,
                ]
            )
            for pc in result.placed_cuts:
                lines.append(
                    f"{pc.cut.id:<24} {pc.x:>8.1f} {pc.y:>8.1f} "
                    f"{pc.width:>8.1f} {pc.height:>8.1f}  {self._notes(pc)}"
                )

        if not result.is_complete:
            lines.append("")
            lines.append(
                f"WARNING: {result.requested_count - result.placed_count} "
                "piece(s) did not fit on this sheet"
            )

        if result.cut_lines:
            lines.append("")
            lines.append("CUT SEQUENCE")
            lines.append("-" * 70)
            lines.extend(self._format_cut_line(line) for line in result.cut_lines)

        lines.append("")
        lines.append(format_remnants(result.remnants))
        return "\n".join(lines)

    @staticmethod
    def _notes(pc: PlacedCut) -> str:
        notes: list[str] = []
        if pc.cut.label:
            notes.append(pc.cut.label)
        if pc.rotated:
            notes.append("rotated")
        if pc.is_pattern:
            notes.append("pattern")
        return ", ".join(notes)

    @staticmethod
    def _format_cut_line(line: CutLine) -> str:
        axis = "x" if line.orientation == CutOrientation.VERTICAL else "y"
        return (
            f"{line.order:>3}. {line.orientation.value:<10} at {axis}={line.position:.1f} "
            f"from {line.start:.1f} to {line.end:.1f}"
        )


def format_remnants(remnants: Sequence[Remnant]) -> str:
    """Remnant list, one per line."""
    if not remnants:
        return "No reusable remnants."
    lines = [f"REMNANTS ({len(remnants)})"]
    for remnant in remnants:
        lines.append(f"  at ({remnant.x:.1f}, {remnant.y:.1f}): {remnant.describe()}")
    return "\n".join(lines)


class SuggestionReportFormatter:
    """Formats ranked material suggestions."""

    def format(
        self,
        result: SuggestionResult,
        new_remnants: Sequence[MaterialSheet] = (),
    ) -> str:
        """Format every suggestion, best first.

        ``new_remnants`` are the inventory records the recommended plan
        would add; they are listed after the suggestions.
        """
        if not result.suggestions:
            return "No suitable material found in inventory."

        lines = ["MATERIAL SUGGESTIONS", "=" * 70]
        for rank, suggestion in enumerate(result.suggestions, start=1):
            marker = " (recommended)" if rank == 1 else ""
            lines.append("")
            lines.append(f"#{rank} {suggestion.strategy}{marker}")
            lines.append(
                f"  Utilization: {suggestion.total_utilization:.1f}%  "
                f"Waste: {suggestion.total_waste:.0f}  "
                f"Cost: {suggestion.total_cost:.2f}"
            )
            for plan in suggestion.sheet_details:
                lines.append(self._format_plan(plan))
            if suggestion.estimated_remnants:
                lines.append(f"  Expected remnants: {len(suggestion.estimated_remnants)}")

        if new_remnants:
            lines.append("")
            lines.append(f"NEW INVENTORY REMNANTS ({len(new_remnants)})")
            for record in new_remnants:
                order = f", order {record.source_order_id}" if record.source_order_id else ""
                lines.append(
                    f"  {record.id}: {record.width:g} x {record.height:g} "
                    f"from {record.parent_sheet_id}{order}"
                )
        return "\n".join(lines)

    @staticmethod
    def _format_plan(plan: SheetPlan) -> str:
        kind = "remnant" if plan.sheet.is_remnant else "sheet"
        return (
            f"  - {kind} {plan.sheet.id} ({plan.sheet.width:g} x {plan.sheet.height:g}): "
            f"{plan.piece_count} pieces, {plan.utilization:.1f}%"
        )


class CutValidationFormatter:
    """Formats per-cut dimension checks."""

    _SYMBOLS = {
        ValidationStatus.SAFE: "OK  ",
        ValidationStatus.WARNING: "WARN",
        ValidationStatus.DANGER: "FAIL",
    }

    def format(
        self,
        checks: Sequence[tuple[Cut, CutValidation]],
        recommendation: str | None = None,
    ) -> str:
        """Format ``(cut, validation)`` pairs and an optional recommendation."""
        lines = ["CUT DIMENSION CHECK", "=" * 70]
        for cut, validation in checks:
            lines.append(
                f"[{self._SYMBOLS[validation.status]}] {cut.id:<16} "
                f"{cut.width:g} x {cut.height:g}: {validation.message}"
            )
        if recommendation:
            lines.append("")
            lines.append(f"Recommendation: {recommendation}")
        return "\n".join(lines)


class JsonExporter:
    """Exports results as JSON."""

    def export_packing(self, result: PackingResult, sheet: Sheet) -> str:
        """Export a packing result as a JSON string."""
        data = {
            "sheet": {
                "width": sheet.width,
                "height": sheet.height,
                "kerf": sheet.kerf,
                "thickness": sheet.thickness,
                "cutting_method": sheet.cutting_method.value,
            },
            **self._packing_data(result),
        }
        return json.dumps(data, indent=2)

    def export_suggestions(
        self,
        result: SuggestionResult,
        new_remnants: Sequence[MaterialSheet] = (),
    ) -> str:
        """Export ranked suggestions and planned inventory remnants as JSON."""
        data = {
            "suggestions": [self._suggestion_data(s) for s in result.suggestions],
            "best_suggestion": (
                result.best_suggestion.suggestion_number if result.best_suggestion else None
            ),
            "new_inventory_remnants": [
                {
                    "id": record.id,
                    "material_type": record.material_type.value,
                    "thickness": record.thickness,
                    "width": record.width,
                    "height": record.height,
                    "parent_sheet_id": record.parent_sheet_id,
                    "source_order_id": record.source_order_id,
                }
                for record in new_remnants
            ],
        }
        return json.dumps(data, indent=2)

    def _packing_data(self, result: PackingResult) -> dict[str, Any]:
        return {
            "method": result.method,
            "utilization": round(result.utilization, 4),
            "requested_count": result.requested_count,
            "placed_count": result.placed_count,
            "is_complete": result.is_complete,
            "placed_cuts": [self._placed_cut_data(pc) for pc in result.placed_cuts],
            "cut_lines": [
                {
                    "id": line.id,
                    "orientation": line.orientation.value,
                    "position": line.position,
                    "start": line.start,
                    "end": line.end,
                    "order": line.order,
                }
                for line in result.cut_lines
            ],
            "remnants": [self._remnant_data(r) for r in result.remnants],
        }

    @staticmethod
    def _placed_cut_data(pc: PlacedCut) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": pc.cut.id,
            "source_id": pc.cut.source_id,
            "label": pc.cut.label,
            "x": pc.x,
            "y": pc.y,
            "width": pc.width,
            "height": pc.height,
            "rotated": pc.rotated,
        }
        if pc.is_pattern is not None:
            data["is_pattern"] = pc.is_pattern
        return data

    @staticmethod
    def _remnant_data(remnant: Remnant) -> dict[str, Any]:
        return {
            "x": remnant.x,
            "y": remnant.y,
            "width": remnant.width,
            "height": remnant.height,
            "area": remnant.area,
        }

    def _suggestion_data(self, suggestion: OptimizationSuggestion) -> dict[str, Any]:
        return {
            "suggestion_number": suggestion.suggestion_number,
            "strategy": suggestion.strategy,
            "sheets_used": list(suggestion.sheets_used),
            "total_utilization": round(suggestion.total_utilization, 4),
            "total_waste": suggestion.total_waste,
            "total_cost": suggestion.total_cost,
            "uses_remnants": suggestion.uses_remnants,
            "sheet_details": [
                {
                    "sheet_id": plan.sheet.id,
                    "origin": plan.sheet.origin.value,
                    "width": plan.sheet.width,
                    "height": plan.sheet.height,
                    "utilization": round(plan.utilization, 4),
                    "waste_area": plan.waste_area,
                    "placed_cuts": [self._placed_cut_data(pc) for pc in plan.placed_cuts],
                }
                for plan in suggestion.sheet_details
            ],
            "estimated_remnants": [self._remnant_data(r) for r in suggestion.estimated_remnants],
        }
