"""Tests for remnant extraction."""

from __future__ import annotations

import pytest

from cutplan.domain.value_objects import Cut, PlacedCut, Rectangle, Remnant, Sheet
from cutplan.infrastructure import RemnantConfig, RemnantExtractor


def _placed(x: float, y: float, width: float, height: float) -> PlacedCut:
    return PlacedCut(
        cut=Cut(id=f"p{x}-{y}", width=width, height=height),
        x=x,
        y=y,
        width=width,
        height=height,
    )


class TestRemnantConfig:
    """Tests for RemnantConfig validation."""

    def test_defaults(self) -> None:
        config = RemnantConfig()
        assert config.min_size == 10
        assert config.resolution == 1

    @pytest.mark.parametrize("kwargs", [{"min_size": 0}, {"resolution": -1}])
    def test_rejects_non_positive(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            RemnantConfig(**kwargs)


class TestRemnantExtractor:
    """Tests for RemnantExtractor.extract."""

    def test_empty_placement_returns_whole_sheet(self, machine_sheet: Sheet) -> None:
        assert RemnantExtractor().extract([], machine_sheet) == [Remnant(0, 0, 100, 100)]

    def test_empty_small_sheet_has_no_remnant(self) -> None:
        assert RemnantExtractor().extract([], Sheet(width=8, height=100)) == []

    def test_corner_piece_leaves_right_and_top_regions(self, machine_sheet: Sheet) -> None:
        remnants = RemnantExtractor().extract([_placed(0, 0, 60, 60)], machine_sheet)

        assert remnants == [Remnant(60, 0, 40, 100), Remnant(0, 60, 100, 40)]

    def test_kerf_blocks_right_and_top_edges(self) -> None:
        sheet = Sheet(width=100, height=100, kerf=2)

        remnants = RemnantExtractor().extract([_placed(0, 0, 60, 60)], sheet)

        assert remnants == [Remnant(62, 0, 38, 100), Remnant(0, 62, 100, 38)]

    def test_fractional_kerf_rounds_blocked_area_up(self) -> None:
        sheet = Sheet(width=100, height=100, kerf=0.3)

        remnants = RemnantExtractor().extract([_placed(0, 0, 60, 60)], sheet)

        assert remnants[0] == Remnant(61, 0, 39, 100)

    def test_small_leftovers_filtered(self, machine_sheet: Sheet) -> None:
        remnants = RemnantExtractor().extract([_placed(0, 0, 95, 95)], machine_sheet)
        assert remnants == []

    def test_min_size_configurable(self, machine_sheet: Sheet) -> None:
        extractor = RemnantExtractor(RemnantConfig(min_size=5))
        remnants = extractor.extract([_placed(0, 0, 95, 95)], machine_sheet)
        assert {(r.width, r.height) for r in remnants} == {(5, 100), (100, 5)}

    def test_sorted_by_area_descending(self, machine_sheet: Sheet) -> None:
        remnants = RemnantExtractor().extract([_placed(0, 0, 30, 80)], machine_sheet)

        areas = [r.area for r in remnants]
        assert areas == sorted(areas, reverse=True)
        assert remnants[0] == Remnant(30, 0, 70, 100)

    def test_remnants_avoid_pieces(self) -> None:
        sheet = Sheet(width=150, height=120, kerf=0.5)
        placed = [_placed(0, 0, 50, 40), _placed(50.5, 0, 30, 70), _placed(0, 40.5, 45, 45)]

        remnants = RemnantExtractor().extract(placed, sheet)

        assert remnants
        for remnant in remnants:
            footprint = Rectangle(remnant.x, remnant.y, remnant.width, remnant.height)
            assert sheet.bounds.contains(footprint)
            assert remnant.width >= 10 and remnant.height >= 10
            for pc in placed:
                assert not footprint.intersects(pc.rect.inflate(sheet.kerf))

    def test_coarse_resolution_clips_to_sheet(self) -> None:
        sheet = Sheet(width=105, height=100)
        extractor = RemnantExtractor(RemnantConfig(resolution=10))

        remnants = extractor.extract([_placed(0, 0, 50, 100)], sheet)

        assert remnants == [Remnant(50, 0, 55, 100)]
