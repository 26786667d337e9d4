"""Single-sheet packing heuristics and the multi-strategy optimizer."""

from .guillotine import GuillotineFitRule, GuillotinePacker, GuillotineSplitRule
from .maxrects import MaxRectsFitRule, MaxRectsPacker
from .optimizer import MultiStrategyOptimizer, OptimizerConfig, Packer, PackingStrategy
from .pattern import GridPattern, PatternHybridPacker, explore_patterns, grid_cut_lines
from .shelf import ShelfPacker
from .skyline import SkylineFitRule, SkylinePacker
from .sorting import SortStrategy, all_sort_strategies, sort_cuts

__all__ = [
    # Orderings
    "SortStrategy",
    "all_sort_strategies",
    "sort_cuts",
    # Packers
    "GuillotineFitRule",
    "GuillotinePacker",
    "GuillotineSplitRule",
    "MaxRectsFitRule",
    "MaxRectsPacker",
    "ShelfPacker",
    "SkylineFitRule",
    "SkylinePacker",
    # Optimizer
    "MultiStrategyOptimizer",
    "OptimizerConfig",
    "Packer",
    "PackingStrategy",
    # Manual cutting
    "GridPattern",
    "PatternHybridPacker",
    "explore_patterns",
    "grid_cut_lines",
]
