"""Single-sheet packing entry points.

Routes a cut list to the right packer for the sheet's cutting method and
attaches the reusable remnants of the resulting layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence

from cutplan.domain.value_objects import (
    Cut,
    CuttingMethod,
    PackingResult,
    PlacedCut,
    Remnant,
    Sheet,
    calculate_utilization,
    expand_cuts,
)
from cutplan.infrastructure.packing import (
    MultiStrategyOptimizer,
    OptimizerConfig,
    PatternHybridPacker,
    ShelfPacker,
)
from cutplan.infrastructure.remnants import RemnantConfig, RemnantExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackingConfig:
    """Settings for a packing run.

    Attributes:
        optimizer: Orderings and rule sets for machine cutting.
        strip_optimizer: Rule set used to fill leftover strips of grid
            patterns (manual cutting).
        remnants: Remnant extraction settings.
    """

    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    strip_optimizer: OptimizerConfig = field(default_factory=OptimizerConfig.leftover_strip)
    remnants: RemnantConfig = field(default_factory=RemnantConfig)


class PackingService:
    """Packs a cut list onto one sheet.

    Manual sheets use the grid-pattern packer, whose layouts can be hand
    snapped. Machine sheets use the multi-strategy optimizer, falling back
    to a shelf packer when no optimizer candidate produced a layout.
    """

    def __init__(self, config: PackingConfig | None = None) -> None:
        self.config = config or PackingConfig()
        self.optimizer = MultiStrategyOptimizer(self.config.optimizer)
        self.pattern_packer = PatternHybridPacker(self.config.strip_optimizer)
        self.remnant_extractor = RemnantExtractor(self.config.remnants)

    def pack(self, cuts: Sequence[Cut], sheet: Sheet) -> PackingResult:
        """Pack ``cuts`` onto ``sheet`` and attach its remnants.

        Args:
            cuts: Cut list with quantities.
            sheet: Target sheet.

        Returns:
            The best layout found. Check ``is_complete`` to see whether every
            piece fit.
        """
        if not cuts:
            return replace(
                PackingResult.empty(method="none"),
                remnants=tuple(self.remnant_extractor.extract([], sheet)),
            )

        if sheet.cutting_method == CuttingMethod.MANUAL:
            result = self.pattern_packer.pack(cuts, sheet)
        else:
            result = self.optimizer.best(cuts, sheet)
            if result.method == "none" and any(_fits_sheet(cut, sheet) for cut in cuts):
                result = self._pack_basic(cuts, sheet)

        if not result.is_complete:
            logger.info(
                "Only %d of %d pieces fit on %sx%s sheet",
                result.placed_count,
                result.requested_count,
                sheet.width,
                sheet.height,
            )

        remnants = self.remnant_extractor.extract(result.placed_cuts, sheet)
        return replace(result, remnants=tuple(remnants))

    def _pack_basic(self, cuts: Sequence[Cut], sheet: Sheet) -> PackingResult:
        """Shelf layout used when the optimizer found nothing."""
        logger.info("Optimizer found no layout, falling back to shelf packing")
        placed = ShelfPacker().pack(expand_cuts(cuts), sheet)
        return PackingResult(
            placed_cuts=tuple(placed),
            utilization=calculate_utilization(placed, sheet),
            method=ShelfPacker.name,
            requested_count=sum(cut.quantity for cut in cuts),
        )


def _fits_sheet(cut: Cut, sheet: Sheet) -> bool:
    return any(w <= sheet.width and h <= sheet.height for w, h, _ in cut.orientations())


def pack(
    cuts: Sequence[Cut],
    sheet: Sheet,
    config: PackingConfig | None = None,
) -> PackingResult:
    """Pack a cut list onto one sheet; see :class:`PackingService`."""
    return PackingService(config).pack(cuts, sheet)


def calculate_remnants(
    placed_cuts: Sequence[PlacedCut],
    sheet: Sheet,
    config: RemnantConfig | None = None,
) -> list[Remnant]:
    """Reusable leftovers of a packed sheet, largest first."""
    return RemnantExtractor(config).extract(placed_cuts, sheet)
