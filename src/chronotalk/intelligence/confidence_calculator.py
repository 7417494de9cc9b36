"""Confidence Calculator for temporal resolution

Scores how reliable a resolved temporal context is. The score starts at
1.0 and is reduced for conflicts and for low-specificity token sets.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence

from ..core.logging_manager import LoggingManager
from ..processors.tokens import TIME_BEARING_KINDS, TemporalToken


class ConfidenceLevel(Enum):
    """Confidence level categories."""
    VERY_HIGH = "very_high"    # 0.9-1.0
    HIGH = "high"              # 0.75-0.89
    MEDIUM = "medium"          # 0.5-0.74
    LOW = "low"                # 0.25-0.49
    VERY_LOW = "very_low"      # 0.0-0.24


@dataclass
class ConfidenceCalculation:
    """Confidence score with the penalties that produced it."""
    overall_confidence: float
    confidence_level: ConfidenceLevel
    penalties: List[str] = field(default_factory=list)


class ConfidenceCalculator:
    """Penalty-based confidence scoring for resolved token sets."""

    CONFLICT_PENALTY = 0.2
    MISSING_TIME_PENALTY = 0.1
    LOW_PRIORITY_PENALTY = 0.2
    LOW_PRIORITY_THRESHOLD = 50

    def __init__(self):
        self.logger = LoggingManager.get_logger(__name__)

    def calculate_confidence(
        self,
        tokens: Sequence[TemporalToken],
        conflicts: Sequence[str]
    ) -> ConfidenceCalculation:
        """Score a resolved token set.
        
        Args:
            tokens: Tokens that survived selection
            conflicts: Conflict descriptions recorded during resolution
            
        Returns:
            Confidence calculation clamped to [0, 1]
        """
        if not tokens:
            return ConfidenceCalculation(0.0, ConfidenceLevel.VERY_LOW, ["no temporal tokens"])

        score = 1.0
        penalties: List[str] = []

        if conflicts:
            score -= self.CONFLICT_PENALTY * len(conflicts)
            penalties.append(f"{len(conflicts)} conflict(s)")

        if not any(token.kind in TIME_BEARING_KINDS for token in tokens):
            score -= self.MISSING_TIME_PENALTY
            penalties.append("no time-bearing token")

        if max(token.priority for token in tokens) < self.LOW_PRIORITY_THRESHOLD:
            score -= self.LOW_PRIORITY_PENALTY
            penalties.append("only low-priority tokens")

        score = round(min(1.0, max(0.0, score)), 4)
        self.logger.debug(f"Confidence {score} after penalties {penalties}")
        return ConfidenceCalculation(score, self.determine_confidence_level(score), penalties)

    @staticmethod
    def determine_confidence_level(score: float) -> ConfidenceLevel:
        """Determine confidence level from score."""
        if score >= 0.9:
            return ConfidenceLevel.VERY_HIGH
        elif score >= 0.75:
            return ConfidenceLevel.HIGH
        elif score >= 0.5:
            return ConfidenceLevel.MEDIUM
        elif score >= 0.25:
            return ConfidenceLevel.LOW
        else:
            return ConfidenceLevel.VERY_LOW

    def export_calculation_details(self, calculation: ConfidenceCalculation) -> Dict[str, Any]:
        return {
            "overall_confidence": calculation.overall_confidence,
            "confidence_level": calculation.confidence_level.value,
            "penalties": list(calculation.penalties),
        }
