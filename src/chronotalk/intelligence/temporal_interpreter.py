"""Temporal Interpreter

Turns the deduplicated token list into a concrete instant or date range,
using an explicit reference time and the user's calendar preferences.
Resolution never reads the system clock.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from dateutil import tz
from dateutil.relativedelta import relativedelta

from ..core.config_manager import Preferences
from ..core.logging_manager import LoggingManager
from ..processors.tokens import (
    ClockTime,
    DurationOffset,
    OffsetMode,
    OffsetUnit,
    PartOfDay,
    TemporalToken,
    TokenKind,
    WeekdayRef,
    WeekModifier,
    WeekSpecifier,
)
from .confidence_calculator import ConfidenceCalculator, ConfidenceLevel

SATURDAY = 7
MULTIPLE_TIMES_CONFLICT = "Multiple time specifications found"

# [start, end) clock windows; the end is exclusive
PART_OF_DAY_WINDOWS: Dict[PartOfDay, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    PartOfDay.MORNING: ((6, 0), (12, 0)),
    PartOfDay.AFTERNOON: ((12, 0), (18, 0)),
    PartOfDay.EVENING: ((18, 0), (22, 0)),
    PartOfDay.NIGHT: ((22, 0), (24, 0)),
    PartOfDay.NOON: ((11, 30), (12, 30)),
    PartOfDay.MIDNIGHT: ((23, 30), (24, 30)),
}

_ONE_SECOND = timedelta(seconds=1)


def weekday_index(day: date) -> int:
    """Canonical weekday index, 1=Sunday ... 7=Saturday."""
    return (day.weekday() + 1) % 7 + 1


@dataclass(frozen=True)
class DateRange:
    """Closed interval; ``end`` is the last second included."""
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class TemporalContext:
    """Resolved temporal meaning of an utterance."""
    final_date: datetime
    confidence: float
    duration: Optional[timedelta] = None
    date_range: Optional[DateRange] = None
    conflicts: Tuple[str, ...] = ()
    is_range_query: bool = False
    resolved_tokens: Tuple[TemporalToken, ...] = ()
    shift: Optional[relativedelta] = None

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceCalculator.determine_confidence_level(self.confidence)

    @property
    def is_empty(self) -> bool:
        return not self.resolved_tokens


@dataclass
class _Resolution:
    """Mutable scratch state for one interpret call."""
    reference: datetime
    clock: Optional[ClockTime] = None
    day: Optional[date] = None
    duration: Optional[timedelta] = None
    shift: Optional[relativedelta] = None
    conflicts: List[str] = field(default_factory=list)


class TemporalInterpreter:
    """Resolves token groups into a TemporalContext."""

    def __init__(self, preferences: Optional[Preferences] = None):
        """Initialize interpreter.

        Args:
            preferences: Calendar and anchor preferences; defaults apply when omitted
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.preferences = preferences or Preferences()
        self.confidence_calculator = ConfidenceCalculator()

    def localize(self, reference_time: datetime) -> datetime:
        """Express the reference time in the preferences' timezone."""
        tzinfo = self.preferences.tzinfo
        if reference_time.tzinfo is None:
            return reference_time.replace(tzinfo=tzinfo)
        return reference_time.astimezone(tzinfo)

    def interpret(self, tokens: Sequence[TemporalToken], reference_time: datetime) -> TemporalContext:
        """Resolve tokens against a reference time.

        Args:
            tokens: Deduplicated tokens from the TokenSelector
            reference_time: The externally supplied "now"

        Returns:
            TemporalContext with the final instant, optional range and confidence
        """
        reference = self.localize(reference_time)
        if not tokens:
            return TemporalContext(final_date=reference, confidence=0.0)

        groups = self._group_by_kind(tokens)
        state = _Resolution(reference=reference)

        self._resolve_time_of_day(groups, state)
        self._resolve_date(groups, state)
        self._resolve_duration_offset(groups, state)

        final_date = self._final_instant(groups, state)
        date_range = self._build_range(groups, state)
        calculation = self.confidence_calculator.calculate_confidence(tokens, state.conflicts)

        context = TemporalContext(
            final_date=final_date,
            confidence=calculation.overall_confidence,
            duration=state.duration,
            date_range=date_range,
            conflicts=tuple(state.conflicts),
            is_range_query=date_range is not None,
            resolved_tokens=tuple(tokens),
            shift=state.shift,
        )
        self.logger.debug(
            f"Resolved {len(tokens)} tokens to {final_date.isoformat()} "
            f"(range={date_range is not None}, confidence={context.confidence})"
        )
        return context

    @staticmethod
    def _group_by_kind(tokens: Sequence[TemporalToken]) -> Dict[TokenKind, List[TemporalToken]]:
        """Group tokens by kind, each group in source order."""
        groups: Dict[TokenKind, List[TemporalToken]] = defaultdict(list)
        for token in sorted(tokens, key=lambda t: (t.span.start, t.span.length)):
            groups[token.kind].append(token)
        return groups

    def _resolve_time_of_day(self, groups, state: _Resolution):
        if groups.get(TokenKind.TIME_RANGE):
            start, end = groups[TokenKind.TIME_RANGE][0].value
            state.clock = start
            minutes = end.minutes - start.minutes
            if minutes <= 0:
                minutes += 24 * 60
            state.duration = timedelta(minutes=minutes)
        elif groups.get(TokenKind.ABSOLUTE_TIME):
            times = groups[TokenKind.ABSOLUTE_TIME]
            if len(times) > 1:
                state.conflicts.append(MULTIPLE_TIMES_CONFLICT)
            state.clock = times[-1].value
        elif groups.get(TokenKind.PART_OF_DAY):
            part = groups[TokenKind.PART_OF_DAY][0].value
            state.clock = ClockTime(self.preferences.anchor_hour(part), 0)

    def _resolve_date(self, groups, state: _Resolution):
        today = state.reference.date()

        if groups.get(TokenKind.ABSOLUTE_DATE):
            parts = groups[TokenKind.ABSOLUTE_DATE][0].value
            state.day = date(parts.year, parts.month, parts.day)
            if parts.has_time and state.clock is None:
                state.clock = ClockTime(parts.hour, parts.minute or 0)
        elif groups.get(TokenKind.RELATIVE_DAY):
            relative = groups[TokenKind.RELATIVE_DAY][0].value
            state.day = today + timedelta(days=relative.day_offset)
        elif groups.get(TokenKind.ORDINAL_DAY):
            state.day = self.resolve_ordinal_day(groups[TokenKind.ORDINAL_DAY][0].value, today)
        elif groups.get(TokenKind.WEEKEND):
            specifier = groups[TokenKind.WEEKEND][0].value or WeekSpecifier.this_week()
            state.day = self.date_for_weekday(SATURDAY, specifier.offset, today)
        elif groups.get(TokenKind.RELATIVE_WEEK) or groups.get(TokenKind.WEEKDAY):
            week_offset = 0
            if groups.get(TokenKind.RELATIVE_WEEK):
                week_offset = groups[TokenKind.RELATIVE_WEEK][0].value.offset
            if groups.get(TokenKind.WEEKDAY):
                weekday: WeekdayRef = groups[TokenKind.WEEKDAY][0].value
                week_offset = self.apply_modifier(weekday.modifier, week_offset)
                state.day = self.date_for_weekday(weekday.index, week_offset, today)
            else:
                state.day = today + timedelta(days=7 * week_offset)

    def _resolve_duration_offset(self, groups, state: _Resolution):
        if not groups.get(TokenKind.DURATION_OFFSET):
            return
        offset: DurationOffset = groups[TokenKind.DURATION_OFFSET][0].value
        delta = relativedelta(**{f"{offset.unit.value}s": offset.value})

        if offset.mode is OffsetMode.SHIFT:
            state.shift = delta
        elif state.day is None:
            moved = state.reference + delta
            state.day = moved.date()
            if offset.unit in (OffsetUnit.MINUTE, OffsetUnit.HOUR) and state.clock is None:
                state.clock = ClockTime(moved.hour, moved.minute)

    def _final_instant(self, groups, state: _Resolution) -> datetime:
        reference = state.reference
        day = state.day or reference.date()
        clock = state.clock
        if clock is None and groups.get(TokenKind.WEEKEND):
            clock = ClockTime(self.preferences.weekend_anchor_hour, 0)

        if clock is None:
            moment = datetime.combine(day, reference.timetz())
        else:
            moment = datetime.combine(day, time(clock.hour, clock.minute), tzinfo=reference.tzinfo)
        return tz.resolve_imaginary(moment)

    def _build_range(self, groups, state: _Resolution) -> Optional[DateRange]:
        if groups.get(TokenKind.ABSOLUTE_TIME) or groups.get(TokenKind.TIME_RANGE):
            return None

        day = state.day or state.reference.date()
        if groups.get(TokenKind.PART_OF_DAY):
            part = groups[TokenKind.PART_OF_DAY][0].value
            return self.part_of_day_range(part, day)
        if groups.get(TokenKind.WEEKEND):
            return self._day_span(day, day + timedelta(days=1))
        if (groups.get(TokenKind.RELATIVE_WEEK)
                and not groups.get(TokenKind.WEEKDAY)
                and not groups.get(TokenKind.RELATIVE_DAY)):
            specifier: WeekSpecifier = groups[TokenKind.RELATIVE_WEEK][0].value
            return self.week_range(specifier.offset, state.reference.date())
        if groups.get(TokenKind.RELATIVE_DAY):
            return self._day_span(day, day)
        return None

    def _at(self, day: date, hour: int, minute: int = 0) -> datetime:
        moment = datetime(day.year, day.month, day.day, tzinfo=self.preferences.tzinfo)
        return moment + timedelta(hours=hour, minutes=minute)

    def _day_span(self, first: date, last: date) -> DateRange:
        return DateRange(self._at(first, 0), self._at(last, 24) - _ONE_SECOND)

    def part_of_day_range(self, part: PartOfDay, day: date) -> DateRange:
        """The part's clock window on ``day``; midnight runs into the next day."""
        (start_hour, start_minute), (end_hour, end_minute) = PART_OF_DAY_WINDOWS[part]
        return DateRange(
            self._at(day, start_hour, start_minute),
            self._at(day, end_hour, end_minute) - _ONE_SECOND,
        )

    def week_range(self, offset: int, today: date) -> DateRange:
        """Seven-day range for a standalone week phrase.

        Calendar weeks start on the preferred first weekday. When
        ``next_week_calendar_week`` is off, a next/last week is the rolling
        seven days starting ``offset`` weeks from today.
        """
        if offset != 0 and not self.preferences.next_week_calendar_week:
            first = today + timedelta(days=7 * offset)
        else:
            back = (weekday_index(today) - self.preferences.start_of_week) % 7
            first = today - timedelta(days=back) + timedelta(days=7 * offset)
        return self._day_span(first, first + timedelta(days=6))

    @staticmethod
    def apply_modifier(modifier: Optional[WeekModifier], week_offset: int) -> int:
        """A weekday's own modifier overrides the week offset."""
        if modifier is WeekModifier.NEXT:
            return max(1, week_offset)
        if modifier is WeekModifier.LAST:
            return min(-1, week_offset)
        if modifier is WeekModifier.THIS:
            return 0
        return week_offset

    @staticmethod
    def date_for_weekday(target: int, week_offset: int, today: date) -> date:
        """Date of weekday ``target`` (1=Sunday) ``week_offset`` weeks away.

        With no offset a weekday earlier than today moves to next week, so a
        bare weekday never lands in the past.
        """
        days_to_add = target - weekday_index(today)
        if week_offset != 0:
            days_to_add += week_offset * 7
        elif days_to_add < 0:
            days_to_add += 7
        return today + timedelta(days=days_to_add)

    @staticmethod
    def resolve_ordinal_day(day_of_month: int, today: date) -> date:
        """Day of the current month, or of next month if it already passed.

        Days past the end of the target month clamp to its last day.
        """
        first_of_month = today.replace(day=1)
        if day_of_month < today.day:
            return first_of_month + relativedelta(months=1, day=day_of_month)
        return first_of_month + relativedelta(day=day_of_month)
