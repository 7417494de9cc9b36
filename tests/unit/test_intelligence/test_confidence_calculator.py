"""
Unit tests for the ConfidenceCalculator component.
"""

import pytest

from chronotalk.intelligence.confidence_calculator import ConfidenceCalculator, ConfidenceLevel
from chronotalk.processors.tokens import (
    ClockTime,
    DurationOffset,
    OffsetMode,
    OffsetUnit,
    Span,
    TemporalToken,
    TokenKind,
    WeekdayRef,
)


def make_token(kind, value=None, start=0, text="x"):
    return TemporalToken(Span(start, len(text)), text, kind, value)


class TestConfidenceCalculator:
    """Test suite for ConfidenceCalculator"""

    @pytest.fixture
    def calculator(self):
        return ConfidenceCalculator()

    @pytest.mark.unit
    def test_no_tokens(self, calculator):
        result = calculator.calculate_confidence([], [])

        assert result.overall_confidence == 0.0
        assert result.confidence_level is ConfidenceLevel.VERY_LOW

    @pytest.mark.unit
    def test_time_bearing_tokens_score_full(self, calculator):
        result = calculator.calculate_confidence([make_token(TokenKind.ABSOLUTE_TIME, ClockTime(11))], [])

        assert result.overall_confidence == pytest.approx(1.0)
        assert result.penalties == []

    @pytest.mark.unit
    def test_missing_time_penalty(self, calculator):
        result = calculator.calculate_confidence([make_token(TokenKind.WEEKDAY, WeekdayRef(6))], [])

        assert result.overall_confidence == pytest.approx(0.9)
        assert result.confidence_level is ConfidenceLevel.VERY_HIGH

    @pytest.mark.unit
    def test_conflict_penalty(self, calculator):
        tokens = [make_token(TokenKind.ABSOLUTE_TIME, ClockTime(20)), make_token(TokenKind.ABSOLUTE_TIME, ClockTime(19))]

        result = calculator.calculate_confidence(tokens, ["Multiple time specifications found"])

        assert result.overall_confidence == pytest.approx(0.8)
        assert result.confidence_level is ConfidenceLevel.HIGH

    @pytest.mark.unit
    def test_low_priority_penalty(self, calculator):
        """Test a lone duration offset loses both the time and priority penalties"""
        offset = DurationOffset(3, OffsetUnit.DAY, OffsetMode.FROM_NOW)

        result = calculator.calculate_confidence([make_token(TokenKind.DURATION_OFFSET, offset)], [])

        assert result.overall_confidence == pytest.approx(0.7)
        assert result.confidence_level is ConfidenceLevel.MEDIUM

    @pytest.mark.unit
    def test_clamped_at_zero(self, calculator):
        tokens = [make_token(TokenKind.ABSOLUTE_DATE)]

        result = calculator.calculate_confidence(tokens, ["a", "b", "c", "d", "e"])

        assert result.overall_confidence == 0.0

    @pytest.mark.unit
    @pytest.mark.parametrize("score,level", [
        (1.0, ConfidenceLevel.VERY_HIGH),
        (0.9, ConfidenceLevel.VERY_HIGH),
        (0.8, ConfidenceLevel.HIGH),
        (0.6, ConfidenceLevel.MEDIUM),
        (0.3, ConfidenceLevel.LOW),
        (0.1, ConfidenceLevel.VERY_LOW),
    ])
    def test_levels(self, score, level):
        assert ConfidenceCalculator.determine_confidence_level(score) is level

    @pytest.mark.unit
    def test_export_calculation_details(self, calculator):
        result = calculator.calculate_confidence([make_token(TokenKind.WEEKDAY, WeekdayRef(2))], [])

        details = calculator.export_calculation_details(result)

        assert details["overall_confidence"] == pytest.approx(0.9)
        assert details["confidence_level"] == "very_high"
        assert details["penalties"] == ["no time-bearing token"]
