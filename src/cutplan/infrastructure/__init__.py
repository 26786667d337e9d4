"""Infrastructure layer - packing heuristics, remnant extraction and formatters."""

from .formatters import (
    CutValidationFormatter,
    JsonExporter,
    PackingReportFormatter,
    SuggestionReportFormatter,
    format_remnants,
)
from .remnants import RemnantConfig, RemnantExtractor

__all__ = [
    # Remnants
    "RemnantConfig",
    "RemnantExtractor",
    # Formatters
    "CutValidationFormatter",
    "JsonExporter",
    "PackingReportFormatter",
    "SuggestionReportFormatter",
    "format_remnants",
]
