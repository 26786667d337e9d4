"""Tests for grid pattern exploration and the pattern-hybrid packer."""

from __future__ import annotations

import pytest

from cutplan.domain.value_objects import (
    Cut,
    CutOrientation,
    CuttingMethod,
    Rectangle,
    Sheet,
)
from cutplan.infrastructure.packing import (
    GridPattern,
    PatternHybridPacker,
    explore_patterns,
    grid_cut_lines,
)


class TestGridPattern:
    """Tests for GridPattern geometry."""

    def test_partial_grid_counts(self) -> None:
        pattern = GridPattern(rows=3, cols=3, piece_width=30, piece_height=30, rotated=False, piece_count=4)

        assert pattern.used_cols == 3
        assert pattern.used_rows == 2
        assert [pattern.pieces_in_column(c) for c in range(3)] == [2, 1, 1]

    def test_block_includes_kerf_between_pieces(self) -> None:
        pattern = GridPattern(rows=2, cols=2, piece_width=30, piece_height=20, rotated=False, piece_count=4)
        assert pattern.block(kerf=2) == Rectangle(0, 0, 62, 42)


class TestExplorePatterns:
    """Tests for grid enumeration."""

    def test_exact_capacity_yields_single_grid(self, manual_sheet: Sheet) -> None:
        patterns = explore_patterns(Cut(id="a", width=60, height=60), manual_sheet)

        assert len(patterns) == 1
        assert (patterns[0].rows, patterns[0].cols, patterns[0].piece_count) == (1, 1, 1)

    def test_sub_grids_when_capacity_exceeds_quantity(self, manual_sheet: Sheet) -> None:
        patterns = explore_patterns(Cut(id="t", width=30, height=30, quantity=4), manual_sheet)

        full = patterns[0]
        assert (full.rows, full.cols, full.piece_count) == (3, 3, 4)
        sub_grids = {(p.cols, p.rows) for p in patterns[1:]}
        assert sub_grids == {(1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (3, 1)}
        assert all(p.piece_count <= 4 for p in patterns)

    def test_both_orientations(self, manual_sheet: Sheet) -> None:
        patterns = explore_patterns(Cut(id="r", width=40, height=20, quantity=2), manual_sheet)

        assert {p.rotated for p in patterns} == {False, True}
        assert len(patterns) == 8

    def test_kerf_reduces_capacity(self) -> None:
        sheet = Sheet(width=100, height=100, kerf=1, cutting_method=CuttingMethod.MANUAL)
        patterns = explore_patterns(Cut(id="q", width=50, height=50, quantity=4), sheet)
        assert (patterns[0].rows, patterns[0].cols) == (1, 1)

    def test_kerf_exactly_fills_sheet(self) -> None:
        sheet = Sheet(width=101, height=101, kerf=1, cutting_method=CuttingMethod.MANUAL)
        patterns = explore_patterns(Cut(id="q", width=50, height=50, quantity=4), sheet)
        assert (patterns[0].rows, patterns[0].cols) == (2, 2)

    def test_oversized_cut_has_no_pattern(self, manual_sheet: Sheet) -> None:
        assert explore_patterns(Cut(id="x", width=120, height=10), manual_sheet) == []


class TestGridCutLines:
    """Tests for the guillotine cut sequence of a grid."""

    def test_two_by_two_block(self, manual_sheet: Sheet) -> None:
        pattern = GridPattern(rows=3, cols=2, piece_width=30, piece_height=30, rotated=False, piece_count=4)

        lines = grid_cut_lines(pattern, manual_sheet)

        summary = [(l.orientation, l.position, l.start, l.end) for l in lines]
        assert summary == [
            (CutOrientation.VERTICAL, 60, 0, 100),
            (CutOrientation.HORIZONTAL, 60, 0, 60),
            (CutOrientation.VERTICAL, 30, 0, 60),
            (CutOrientation.HORIZONTAL, 30, 0, 30),
            (CutOrientation.HORIZONTAL, 30, 30, 60),
        ]
        assert [l.order for l in lines] == [1, 2, 3, 4, 5]
        assert [l.id for l in lines] == ["cut_0", "cut_1", "cut_2", "cut_3", "cut_4"]

    def test_short_column_cut_above_last_piece(self, manual_sheet: Sheet) -> None:
        pattern = GridPattern(rows=3, cols=3, piece_width=30, piece_height=30, rotated=False, piece_count=4)

        lines = grid_cut_lines(pattern, manual_sheet)

        column_two = [l for l in lines if l.orientation == CutOrientation.HORIZONTAL and l.start == 60]
        assert [l.position for l in column_two] == [30]

    def test_cut_lines_centred_on_kerf(self) -> None:
        sheet = Sheet(width=100, height=100, kerf=2, cutting_method=CuttingMethod.MANUAL)
        pattern = GridPattern(rows=1, cols=2, piece_width=30, piece_height=30, rotated=False, piece_count=2)

        lines = grid_cut_lines(pattern, sheet)

        assert lines[0].position == pytest.approx(63)
        assert lines[2].position == pytest.approx(31)

    def test_full_sheet_grid_has_no_block_cuts(self, manual_sheet: Sheet) -> None:
        pattern = GridPattern(rows=2, cols=2, piece_width=50, piece_height=50, rotated=False, piece_count=4)
        lines = grid_cut_lines(pattern, manual_sheet)
        assert len(lines) == 3


class TestPatternHybridPacker:
    """Tests for PatternHybridPacker."""

    def test_grid_and_leftover_strips(self, manual_sheet: Sheet) -> None:
        cuts = [Cut(id="panel", width=60, height=60), Cut(id="tile", width=30, height=30, quantity=4)]

        result = PatternHybridPacker().pack(cuts, manual_sheet)

        assert result.method == "hybrid-pattern"
        assert result.is_complete
        assert result.utilization == pytest.approx(72.0)
        assert any(pc.is_pattern for pc in result.placed_cuts)
        assert any(pc.is_pattern is False for pc in result.placed_cuts)
        assert result.cut_lines

    def test_piece_ids_unique(self, manual_sheet: Sheet) -> None:
        cuts = [Cut(id="panel", width=60, height=60), Cut(id="tile", width=30, height=30, quantity=4)]

        result = PatternHybridPacker().pack(cuts, manual_sheet)

        ids = [pc.cut.id for pc in result.placed_cuts]
        assert len(ids) == len(set(ids))

    def test_strips_do_not_repeat_pieces(self) -> None:
        """Pieces used in the right strip are not packed again above the grid."""
        sheet = Sheet(width=100, height=100, cutting_method=CuttingMethod.MANUAL)
        cuts = [Cut(id="panel", width=60, height=60), Cut(id="tile", width=20, height=20, quantity=12)]

        result = PatternHybridPacker().pack(cuts, sheet)

        tiles = [pc for pc in result.placed_cuts if pc.cut.source_id == "tile"]
        assert len(tiles) == 12
        assert result.placed_count == 13
        assert result.utilization == pytest.approx(84.0)

    def test_uniform_order_uses_pattern_only(self, manual_sheet: Sheet) -> None:
        result = PatternHybridPacker().pack([Cut(id="q", width=50, height=50, quantity=4)], manual_sheet)

        assert result.placed_count == 4
        assert all(pc.is_pattern for pc in result.placed_cuts)
        assert result.utilization == pytest.approx(100.0)

    def test_nothing_fits(self, manual_sheet: Sheet) -> None:
        result = PatternHybridPacker().pack([Cut(id="x", width=200, height=10)], manual_sheet)

        assert result.placed_count == 0
        assert result.method == "hybrid-pattern"
        assert not result.is_complete
