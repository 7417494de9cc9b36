"""Temporal Resolution

Interpretation of selected tokens into instants and ranges, and confidence
scoring of the result.
"""

from .confidence_calculator import ConfidenceCalculation, ConfidenceCalculator, ConfidenceLevel
from .temporal_interpreter import DateRange, TemporalContext, TemporalInterpreter

__all__ = [
    "ConfidenceCalculation",
    "ConfidenceCalculator",
    "ConfidenceLevel",
    "DateRange",
    "TemporalContext",
    "TemporalInterpreter",
]
