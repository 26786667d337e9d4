"""Tests for the packing service and module-level entry points."""

from __future__ import annotations

import pytest

from cutplan.application import PackingConfig, PackingService, calculate_remnants, pack
from cutplan.domain.value_objects import Cut, PlacedCut, Remnant, Sheet
from cutplan.infrastructure import RemnantConfig
from cutplan.infrastructure.packing import OptimizerConfig, SortStrategy


class TestPackingService:
    """Tests for routing and remnant attachment."""

    def test_empty_cut_list(self, machine_sheet: Sheet) -> None:
        result = PackingService().pack([], machine_sheet)

        assert result.placed_count == 0
        assert result.method == "none"
        assert result.is_complete
        assert result.remnants == (Remnant(0, 0, 100, 100),)

    def test_machine_sheet_uses_optimizer(self, machine_sheet: Sheet) -> None:
        result = PackingService().pack([Cut(id="a", width=40, height=30, quantity=3)], machine_sheet)

        assert result.method in {"Guillotine", "MaxRects", "Skyline"}
        assert result.is_complete
        assert result.cut_lines == ()

    def test_manual_sheet_uses_pattern_packer(self, manual_sheet: Sheet) -> None:
        result = PackingService().pack([Cut(id="a", width=40, height=30, quantity=3)], manual_sheet)

        assert result.method == "hybrid-pattern"
        assert result.is_complete
        assert result.cut_lines

    def test_remnants_attached(self, machine_sheet: Sheet) -> None:
        result = PackingService().pack([Cut(id="a", width=100, height=60)], machine_sheet)
        assert result.remnants == (Remnant(0, 60, 100, 40),)

    def test_remnant_config_applied(self, machine_sheet: Sheet) -> None:
        config = PackingConfig(remnants=RemnantConfig(min_size=50))
        result = PackingService(config).pack([Cut(id="a", width=100, height=60)], machine_sheet)
        assert result.remnants == ()

    def test_shelf_fallback_when_optimizer_finds_nothing(
        self, machine_sheet: Sheet, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(OptimizerConfig, "packers", lambda self: [])

        result = PackingService().pack([Cut(id="a", width=50, height=50, quantity=2)], machine_sheet)

        assert result.method == "basic"
        assert result.placed_count == 2

    def test_oversized_order_skips_shelf_fallback(
        self, machine_sheet: Sheet, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("INFO", logger="cutplan"):
            result = PackingService().pack([Cut(id="a", width=120, height=40)], machine_sheet)

        assert result.method == "none"
        assert result.placed_count == 0
        assert result.requested_count == 1
        assert "falling back to shelf packing" not in caplog.text

    def test_rotated_fit_still_reaches_fallback(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(OptimizerConfig, "packers", lambda self: [])
        sheet = Sheet(width=40, height=120)

        result = PackingService().pack([Cut(id="a", width=100, height=30)], sheet)

        assert result.method == "basic"

    def test_incomplete_result_logged(
        self, machine_sheet: Sheet, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = PackingConfig(optimizer=OptimizerConfig(sort_strategies=(SortStrategy.AREA,)))

        with caplog.at_level("INFO", logger="cutplan"):
            result = PackingService(config).pack(
                [Cut(id="a", width=80, height=80, quantity=2)], machine_sheet
            )

        assert not result.is_complete
        assert "Only 1 of 2 pieces fit" in caplog.text


class TestModuleFunctions:
    """Tests for pack and calculate_remnants."""

    def test_pack_defaults(self, machine_sheet: Sheet) -> None:
        result = pack([Cut(id="a", width=50, height=50)], machine_sheet)
        assert result.utilization == pytest.approx(25.0)

    def test_calculate_remnants(self, machine_sheet: Sheet) -> None:
        placed = [PlacedCut(cut=Cut(id="a", width=60, height=60), x=0, y=0, width=60, height=60)]

        remnants = calculate_remnants(placed, machine_sheet, RemnantConfig(min_size=10))

        assert len(remnants) == 2
        assert all(r.area == 4000 for r in remnants)
