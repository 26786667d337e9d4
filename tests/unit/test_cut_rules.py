"""Tests for minimum cut dimension rules."""

from __future__ import annotations

import pytest

from cutplan.domain import (
    ValidationStatus,
    get_method_recommendation,
    get_minimum_dimension,
    validate_cut_dimensions,
)
from cutplan.domain.value_objects import Cut, CuttingMethod, Sheet


class TestGetMinimumDimension:
    """Tests for the thickness/method lookup tables."""

    @pytest.mark.parametrize(
        "thickness,method,expected",
        [
            (3, CuttingMethod.MANUAL, 15),
            (4, CuttingMethod.MANUAL, 15),
            (6, CuttingMethod.MANUAL, 18),
            (8, CuttingMethod.MANUAL, 20),
            (3, CuttingMethod.MACHINE, 10),
            (4, CuttingMethod.MACHINE, 12),
            (8, CuttingMethod.MACHINE, 22),
            (10, CuttingMethod.MACHINE, 25),
        ],
    )
    def test_table_values(self, thickness: float, method: CuttingMethod, expected: float) -> None:
        assert get_minimum_dimension(thickness, method) == expected

    def test_between_entries_uses_next_thicker(self) -> None:
        assert get_minimum_dimension(4.5, CuttingMethod.MACHINE) == 15

    def test_thicker_than_table_uses_last_entry(self) -> None:
        assert get_minimum_dimension(12, CuttingMethod.MANUAL) == 25
        assert get_minimum_dimension(19, CuttingMethod.MACHINE) == 25


class TestValidateCutDimensions:
    """Tests for per-cut validation."""

    @pytest.fixture
    def manual_4mm(self) -> Sheet:
        return Sheet(width=100, height=100, thickness=4, cutting_method=CuttingMethod.MANUAL)

    def test_safe(self, manual_4mm: Sheet) -> None:
        result = validate_cut_dimensions(Cut(id="a", width=40, height=20), manual_4mm)
        assert result.status == ValidationStatus.SAFE
        assert result.min_dimension == 15

    def test_below_minimum_is_danger(self, manual_4mm: Sheet) -> None:
        result = validate_cut_dimensions(Cut(id="a", width=100, height=10), manual_4mm)
        assert result.status == ValidationStatus.DANGER
        assert "manual cutting" in result.message
        assert "15" in result.message

    def test_close_to_minimum_is_warning(self, manual_4mm: Sheet) -> None:
        """Smallest side below 110% of the minimum warns."""
        result = validate_cut_dimensions(Cut(id="a", width=100, height=16), manual_4mm)
        assert result.status == ValidationStatus.WARNING

    def test_exactly_minimum_warns_not_fails(self, manual_4mm: Sheet) -> None:
        result = validate_cut_dimensions(Cut(id="a", width=15, height=50), manual_4mm)
        assert result.status == ValidationStatus.WARNING

    def test_machine_rules_are_more_permissive(self) -> None:
        sheet = Sheet(width=100, height=100, thickness=4)
        result = validate_cut_dimensions(Cut(id="a", width=100, height=14), sheet)
        assert result.status == ValidationStatus.SAFE


class TestGetMethodRecommendation:
    """Tests for the manual-to-machine recommendation."""

    def test_machine_sheet_never_recommends(self) -> None:
        sheet = Sheet(width=100, height=100)
        assert get_method_recommendation([Cut(id="a", width=5, height=5)], sheet) is None

    def test_manual_sheet_with_narrow_cuts(self) -> None:
        sheet = Sheet(width=100, height=100, cutting_method=CuttingMethod.MANUAL)
        cuts = [Cut(id="a", width=5, height=50), Cut(id="b", width=40, height=40)]

        recommendation = get_method_recommendation(cuts, sheet)

        assert recommendation is not None
        assert recommendation.startswith("1 cut(s)")
        assert "machine cutting" in recommendation

    def test_manual_sheet_with_safe_cuts(self) -> None:
        sheet = Sheet(width=100, height=100, cutting_method=CuttingMethod.MANUAL)
        assert get_method_recommendation([Cut(id="a", width=40, height=40)], sheet) is None
