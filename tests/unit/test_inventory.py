"""Tests for inventory status changes and remnant derivation."""

from __future__ import annotations

import pytest

from cutplan.application import (
    change_status,
    derive_remnant_sheets,
    derive_suggestion_remnants,
    select_inventory_remnants,
)
from cutplan.domain.value_objects import (
    InvalidInputError,
    MaterialSheet,
    MaterialType,
    OptimizationSuggestion,
    Remnant,
    SheetOrigin,
    SheetPlan,
    SheetStatus,
)


@pytest.fixture
def full_sheet() -> MaterialSheet:
    """A purchased 6mm glass sheet."""
    return MaterialSheet(
        id="S-1",
        material_type=MaterialType.GLASS,
        thickness=6,
        width=2400,
        height=1200,
        cost=120,
    )


class TestChangeStatus:
    """Tests for the sheet lifecycle."""

    def test_reserve_then_use(self, full_sheet: MaterialSheet) -> None:
        reserved = change_status(full_sheet, SheetStatus.RESERVED)
        used = change_status(reserved, SheetStatus.USED)

        assert reserved.status == SheetStatus.RESERVED
        assert used.status == SheetStatus.USED
        assert full_sheet.status == SheetStatus.AVAILABLE

    def test_release_reservation(self, full_sheet: MaterialSheet) -> None:
        reserved = change_status(full_sheet, SheetStatus.RESERVED)
        assert change_status(reserved, SheetStatus.AVAILABLE).status == SheetStatus.AVAILABLE

    def test_same_status_is_noop(self, full_sheet: MaterialSheet) -> None:
        assert change_status(full_sheet, SheetStatus.AVAILABLE) is full_sheet

    @pytest.mark.parametrize("terminal", [SheetStatus.USED, SheetStatus.DAMAGED])
    def test_terminal_states(self, full_sheet: MaterialSheet, terminal: SheetStatus) -> None:
        done = change_status(full_sheet, terminal)
        with pytest.raises(InvalidInputError, match="cannot go from"):
            change_status(done, SheetStatus.AVAILABLE)


class TestSelectInventoryRemnants:
    """Tests for choosing which leftovers to store."""

    def test_filters_small_remnants(self) -> None:
        remnants = [Remnant(0, 0, 500, 150), Remnant(0, 200, 300, 300)]
        assert select_inventory_remnants(remnants) == [Remnant(0, 200, 300, 300)]

    def test_skips_overlapping_keeps_largest(self) -> None:
        remnants = [
            Remnant(600, 0, 400, 1000),
            Remnant(0, 600, 1000, 400),
            Remnant(0, 0, 300, 300),
        ]

        kept = select_inventory_remnants(remnants)

        assert kept == [Remnant(600, 0, 400, 1000), Remnant(0, 0, 300, 300)]

    def test_custom_minimum(self) -> None:
        assert select_inventory_remnants([Remnant(0, 0, 50, 50)], min_size=50) == [Remnant(0, 0, 50, 50)]


class TestDeriveRemnantSheets:
    """Tests for turning plan leftovers into inventory records."""

    def test_records_inherit_material(self, full_sheet: MaterialSheet) -> None:
        plan = SheetPlan(
            sheet=full_sheet,
            placed_cuts=(),
            utilization=60,
            waste_area=1_152_000,
            remnants=(Remnant(1600, 0, 800, 1200), Remnant(0, 900, 1600, 300), Remnant(0, 0, 50, 50)),
        )

        records = derive_remnant_sheets(plan, source_order_id="ORD-7")

        assert [r.id for r in records] == ["S-1-R1", "S-1-R2"]
        for record in records:
            assert record.origin == SheetOrigin.REMNANT
            assert record.status == SheetStatus.AVAILABLE
            assert record.cost == 0
            assert record.material_type == MaterialType.GLASS
            assert record.thickness == 6
            assert record.parent_sheet_id == "S-1"
            assert record.source_order_id == "ORD-7"
        assert (records[0].width, records[0].height) == (800, 1200)

    def test_no_remnants(self, full_sheet: MaterialSheet) -> None:
        plan = SheetPlan(sheet=full_sheet, placed_cuts=(), utilization=100, waste_area=0)
        assert derive_remnant_sheets(plan) == []


class TestDeriveSuggestionRemnants:
    """Tests for the records a whole suggestion would add to inventory."""

    def test_collects_every_sheet(self, full_sheet: MaterialSheet) -> None:
        second = MaterialSheet(
            id="S-2", material_type=MaterialType.GLASS, thickness=6, width=1000, height=1000
        )
        suggestion = OptimizationSuggestion(
            suggestion_number=1,
            strategy="multiple_full_sheets",
            sheet_details=(
                SheetPlan(
                    sheet=full_sheet,
                    placed_cuts=(),
                    utilization=66.7,
                    waste_area=960_000,
                    remnants=(Remnant(1600, 0, 800, 1200),),
                ),
                SheetPlan(
                    sheet=second,
                    placed_cuts=(),
                    utilization=70,
                    waste_area=300_000,
                    remnants=(Remnant(0, 700, 1000, 300), Remnant(0, 0, 100, 100)),
                ),
            ),
            total_utilization=67.5,
            total_waste=1_260_000,
            total_cost=120,
            uses_remnants=False,
        )

        records = derive_suggestion_remnants(suggestion, source_order_id="ORD-9")

        assert [r.id for r in records] == ["S-1-R1", "S-2-R1"]
        assert [r.parent_sheet_id for r in records] == ["S-1", "S-2"]
        assert all(r.source_order_id == "ORD-9" for r in records)

    def test_minimum_size_applies(self, full_sheet: MaterialSheet) -> None:
        suggestion = OptimizationSuggestion(
            suggestion_number=1,
            strategy="single_full_sheet",
            sheet_details=(
                SheetPlan(
                    sheet=full_sheet,
                    placed_cuts=(),
                    utilization=90,
                    waste_area=288_000,
                    remnants=(Remnant(0, 0, 400, 150),),
                ),
            ),
            total_utilization=90,
            total_waste=288_000,
            total_cost=120,
            uses_remnants=False,
        )

        assert derive_suggestion_remnants(suggestion) == []
        assert len(derive_suggestion_remnants(suggestion, min_size=100)) == 1
