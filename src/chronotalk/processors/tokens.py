"""Temporal token data model

Tokens are immutable values produced per parse call. Each token carries its
location in the source text, the matched text and a kind with a payload.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class TokenKind(Enum):
    """Closed set of token kinds, ordered by selection priority."""
    TIME_RANGE = "time_range"
    ABSOLUTE_TIME = "absolute_time"
    WEEKDAY = "weekday"
    RELATIVE_WEEK = "relative_week"
    RELATIVE_DAY = "relative_day"
    WEEKEND = "weekend"
    PART_OF_DAY = "part_of_day"
    ORDINAL_DAY = "ordinal_day"
    DURATION_OFFSET = "duration_offset"
    ABSOLUTE_DATE = "absolute_date"
    CONNECTOR = "connector"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self]


_PRIORITIES = {
    TokenKind.TIME_RANGE: 90,
    TokenKind.ABSOLUTE_TIME: 80,
    TokenKind.WEEKDAY: 75,
    TokenKind.RELATIVE_WEEK: 74,
    TokenKind.RELATIVE_DAY: 73,
    TokenKind.WEEKEND: 72,
    TokenKind.PART_OF_DAY: 70,
    TokenKind.ORDINAL_DAY: 60,
    TokenKind.DURATION_OFFSET: 40,
    TokenKind.ABSOLUTE_DATE: 10,
    TokenKind.CONNECTOR: 5,
}

TIME_BEARING_KINDS = frozenset({
    TokenKind.ABSOLUTE_TIME,
    TokenKind.TIME_RANGE,
    TokenKind.PART_OF_DAY,
})


class WeekModifier(Enum):
    """Qualifier attached to a weekday."""
    THIS = "this"
    NEXT = "next"
    LAST = "last"


class RelativeDay(Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    YESTERDAY = "yesterday"
    TONIGHT = "tonight"

    @property
    def day_offset(self) -> int:
        return {"tomorrow": 1, "yesterday": -1}.get(self.value, 0)


class PartOfDay(Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    NOON = "noon"
    MIDNIGHT = "midnight"


class OffsetUnit(Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class OffsetMode(Enum):
    """FROM_NOW moves the result away from the reference time, SHIFT moves an existing event."""
    FROM_NOW = "from_now"
    SHIFT = "shift"


@dataclass(frozen=True)
class Span:
    """Location of a match in the source text."""
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def intersection_length(self, other: 'Span') -> int:
        return max(0, min(self.end, other.end) - max(self.start, other.start))

    def contains(self, other: 'Span') -> bool:
        return self.start <= other.start and other.end <= self.end

    @classmethod
    def from_bounds(cls, start: int, end: int) -> 'Span':
        return cls(start, end - start)


@dataclass(frozen=True)
class ClockTime:
    """Time of day in 24-hour form."""
    hour: int
    minute: int = 0

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class WeekdayRef:
    """Weekday index (1=Sunday ... 7=Saturday) with an optional modifier."""
    index: int
    modifier: Optional[WeekModifier] = None


@dataclass(frozen=True)
class WeekSpecifier:
    """Which week a phrase refers to, relative to the reference week."""
    direction: WeekModifier
    count: int = 0

    @classmethod
    def this_week(cls) -> 'WeekSpecifier':
        return cls(WeekModifier.THIS, 0)

    @classmethod
    def next_week(cls, count: int = 1) -> 'WeekSpecifier':
        return cls(WeekModifier.NEXT, count)

    @classmethod
    def last_week(cls, count: int = 1) -> 'WeekSpecifier':
        return cls(WeekModifier.LAST, count)

    @property
    def offset(self) -> int:
        if self.direction is WeekModifier.NEXT:
            return self.count
        if self.direction is WeekModifier.LAST:
            return -self.count
        return 0


@dataclass(frozen=True)
class DurationOffset:
    value: int
    unit: OffsetUnit
    mode: OffsetMode


@dataclass(frozen=True)
class DateParts:
    """Calendar components recognized by the fallback recognizer."""
    year: int
    month: int
    day: int
    hour: Optional[int] = None
    minute: Optional[int] = None

    @property
    def has_time(self) -> bool:
        return self.hour is not None


@dataclass(frozen=True)
class TemporalToken:
    """A classified, located span of temporal meaning.

    ``value`` depends on ``kind``: ClockTime for absolute times, a
    (ClockTime, ClockTime) pair for ranges, WeekdayRef, WeekSpecifier (or None
    for a bare weekend), RelativeDay, PartOfDay, an int day of month,
    DurationOffset, DateParts, or None for connectors.
    """
    span: Span
    text: str
    kind: TokenKind
    value: Any = None

    @property
    def priority(self) -> int:
        return self.kind.priority

    def __repr__(self) -> str:
        return f"TemporalToken({self.kind.value}, {self.text!r}@{self.span.start}, {self.value!r})"
