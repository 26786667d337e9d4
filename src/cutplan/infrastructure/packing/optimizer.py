"""Multi-strategy packing optimizer.

Runs every combination of piece ordering and packer rule set on the same
sheet and keeps the best layout. Each run is independent and side-effect
free, so runs can be spread over a thread pool; results are always reduced
in the fixed enumeration order so the outcome does not depend on scheduling.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol, Sequence

from cutplan.domain.value_objects import (
    Cut,
    PackingResult,
    PlacedCut,
    Sheet,
    calculate_utilization,
    expand_cuts,
)

from .guillotine import GuillotineFitRule, GuillotinePacker, GuillotineSplitRule
from .maxrects import MaxRectsFitRule, MaxRectsPacker
from .skyline import SkylineFitRule, SkylinePacker
from .sorting import SortStrategy, sort_cuts

logger = logging.getLogger(__name__)


class Packer(Protocol):
    """A single-sheet packing heuristic."""

    name: str

    @property
    def variant(self) -> str: ...

    def pack(self, pieces: Sequence[Cut], sheet: Sheet) -> list[PlacedCut]: ...


@dataclass(frozen=True)
class OptimizerConfig:
    """Which orderings and rule sets the optimizer tries.

    Attributes:
        sort_strategies: Piece orderings to try.
        guillotine_split_rules: Split rules crossed with the fit rules below.
        guillotine_fit_rules: Guillotine fit rules.
        maxrects_fit_rules: MaxRects fit rules.
        skyline_fit_rules: Skyline fit rules.
        max_workers: Thread pool size; 1 runs candidates sequentially.
        time_budget: Wall-clock seconds after which no further candidates are
            started (sequential mode only). None means unlimited.
    """

    sort_strategies: tuple[SortStrategy, ...] = tuple(SortStrategy)
    guillotine_split_rules: tuple[GuillotineSplitRule, ...] = (
        GuillotineSplitRule.MINIMIZE_AREA,
        GuillotineSplitRule.MAXIMIZE_AREA,
        GuillotineSplitRule.SHORTER_LEFTOVER_AXIS,
        GuillotineSplitRule.LONGER_LEFTOVER_AXIS,
    )
    guillotine_fit_rules: tuple[GuillotineFitRule, ...] = (
        GuillotineFitRule.BEST_AREA_FIT,
        GuillotineFitRule.BEST_SHORT_SIDE_FIT,
        GuillotineFitRule.BEST_LONG_SIDE_FIT,
    )
    maxrects_fit_rules: tuple[MaxRectsFitRule, ...] = tuple(MaxRectsFitRule)
    skyline_fit_rules: tuple[SkylineFitRule, ...] = tuple(SkylineFitRule)
    max_workers: int = 1
    time_budget: float | None = None

    def __post_init__(self) -> None:
        if not self.sort_strategies:
            raise ValueError("At least one sort strategy is required")
        has_guillotine = bool(self.guillotine_split_rules and self.guillotine_fit_rules)
        if not (has_guillotine or self.maxrects_fit_rules or self.skyline_fit_rules):
            raise ValueError("At least one packer rule set is required")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.time_budget is not None and self.time_budget <= 0:
            raise ValueError("Time budget must be positive")

    @classmethod
    def leftover_strip(cls) -> OptimizerConfig:
        """Reduced rule set used to fill leftover strips of grid patterns."""
        return cls(
            sort_strategies=(SortStrategy.AREA,),
            guillotine_split_rules=(GuillotineSplitRule.MINIMIZE_AREA,),
            guillotine_fit_rules=(GuillotineFitRule.BEST_AREA_FIT,),
            maxrects_fit_rules=(
                MaxRectsFitRule.BEST_SHORT_SIDE_FIT,
                MaxRectsFitRule.BEST_AREA_FIT,
            ),
            skyline_fit_rules=(SkylineFitRule.MIN_WASTE,),
        )

    def packers(self) -> list[Packer]:
        """Packer instances in enumeration order."""
        packers: list[Packer] = []
        for split_rule in self.guillotine_split_rules:
            for fit_rule in self.guillotine_fit_rules:
                packers.append(GuillotinePacker(split_rule, fit_rule))
        packers.extend(MaxRectsPacker(rule) for rule in self.maxrects_fit_rules)
        packers.extend(SkylinePacker(rule) for rule in self.skyline_fit_rules)
        return packers


@dataclass(frozen=True)
class PackingStrategy:
    """Outcome of one (ordering, packer) combination.

    Attributes:
        name: Packer variant including its rules.
        algorithm: Packer family name.
        sort_strategy: Ordering used.
        utilization: Placed area as a percentage of the sheet.
        placed_cuts: Placements produced.
    """

    name: str
    algorithm: str
    sort_strategy: SortStrategy
    utilization: float
    placed_cuts: tuple[PlacedCut, ...]

    @property
    def placed_count(self) -> int:
        """Number of pieces placed."""
        return len(self.placed_cuts)


class MultiStrategyOptimizer:
    """Searches orderings x packer rules for the best single-sheet layout.

    Complete layouts (every piece placed) rank by utilization, highest first.
    When none is complete, partial layouts rank by pieces placed, then by
    utilization. Ties keep enumeration order.

    Attributes:
        config: Orderings, rule sets and execution options.
    """

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()

    def optimize(self, cuts: Sequence[Cut], sheet: Sheet) -> list[PackingStrategy]:
        """Run every combination and return the ranked candidates.

        Args:
            cuts: Cut list; quantities are expanded into unit pieces.
            sheet: Target sheet.

        Returns:
            Complete candidates ranked by utilization, or, if there are none,
            partial candidates ranked by pieces placed. Empty if nothing fits.
        """
        pieces = expand_cuts(cuts)
        tasks: list[tuple[SortStrategy, list[Cut], Packer]] = []
        for strategy in self.config.sort_strategies:
            ordered = sort_cuts(pieces, strategy)
            for packer in self.config.packers():
                tasks.append((strategy, ordered, packer))

        logger.debug(
            "Optimizing %d pieces on %sx%s sheet with %d candidates",
            len(pieces),
            sheet.width,
            sheet.height,
            len(tasks),
        )

        results = self._run_all(tasks, sheet)

        complete = [r for r in results if r.placed_count == len(pieces)]
        if complete:
            return sorted(complete, key=lambda r: -r.utilization)

        partial = [r for r in results if r.placed_count > 0]
        return sorted(partial, key=lambda r: (-r.placed_count, -r.utilization))

    def best(self, cuts: Sequence[Cut], sheet: Sheet) -> PackingResult:
        """Best layout as a PackingResult (method "none" if nothing fits)."""
        requested = sum(cut.quantity for cut in cuts)
        ranked = self.optimize(cuts, sheet)
        if not ranked:
            return PackingResult.empty(method="none", requested_count=requested)

        winner = ranked[0]
        logger.info(
            "Best layout: %s sorted by %s, %d/%d pieces, %.1f%% utilization",
            winner.name,
            winner.sort_strategy.value,
            winner.placed_count,
            requested,
            winner.utilization,
        )
        return PackingResult(
            placed_cuts=winner.placed_cuts,
            utilization=winner.utilization,
            method=winner.algorithm,
            requested_count=requested,
        )

    def _run_all(
        self,
        tasks: list[tuple[SortStrategy, list[Cut], Packer]],
        sheet: Sheet,
    ) -> list[PackingStrategy]:
        """Run candidates, keeping enumeration order and dropping failures."""
        if self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                outcomes = list(
                    pool.map(lambda task: self._run_one(*task, sheet), tasks)
                )
            return [o for o in outcomes if o is not None]

        results: list[PackingStrategy] = []
        budget = self.config.time_budget
        started = time.monotonic()
        for count, task in enumerate(tasks, start=1):
            outcome = self._run_one(*task, sheet)
            if outcome is not None:
                results.append(outcome)
            if budget is not None and time.monotonic() - started > budget:
                logger.info(
                    "Time budget of %.2fs spent after %d of %d candidates",
                    budget,
                    count,
                    len(tasks),
                )
                break
        return results

    @staticmethod
    def _run_one(
        strategy: SortStrategy,
        pieces: list[Cut],
        packer: Packer,
        sheet: Sheet,
    ) -> PackingStrategy | None:
        """Run one candidate; a failing packer is logged and excluded."""
        try:
            placed = packer.pack(pieces, sheet)
        except Exception:
            logger.warning(
                "Candidate %s sorted by %s failed",
                packer.variant,
                strategy.value,
                exc_info=True,
            )
            return None

        return PackingStrategy(
            name=packer.variant,
            algorithm=packer.name,
            sort_strategy=strategy,
            utilization=calculate_utilization(placed, sheet),
            placed_cuts=tuple(placed),
        )
