"""Token Processing

Data model, time grammar, candidate detection and deduplication for
temporal tokens.
"""

from .tokens import (
    ClockTime,
    DateParts,
    DurationOffset,
    OffsetMode,
    OffsetUnit,
    PartOfDay,
    RelativeDay,
    Span,
    TemporalToken,
    TokenKind,
    WeekdayRef,
    WeekModifier,
    WeekSpecifier,
)
from .time_grammar import ParsedTime, parse_time, resolve_time_range
from .token_selector import TokenSelector
from .recognizer import DateparserRecognizer, FallbackRecognizer, RecognizedDate
from .token_detector import TokenDetector

__all__ = [
    "ClockTime",
    "DateParts",
    "DurationOffset",
    "OffsetMode",
    "OffsetUnit",
    "PartOfDay",
    "RelativeDay",
    "Span",
    "TemporalToken",
    "TokenKind",
    "WeekdayRef",
    "WeekModifier",
    "WeekSpecifier",
    "ParsedTime",
    "parse_time",
    "resolve_time_range",
    "TokenSelector",
    "DateparserRecognizer",
    "FallbackRecognizer",
    "RecognizedDate",
    "TokenDetector",
]
