"""Token Detector

Runs every pattern category of a language pack over the input and
classifies each match into a candidate TemporalToken. Candidates may
overlap; the TokenSelector arbitrates between them.
"""

import re
from datetime import datetime
from typing import List, Optional, Tuple

from ..core.logging_manager import LoggingManager
from ..language.base import DateLanguagePack, PatternCategory, find_all, unit_for
from .recognizer import FallbackRecognizer
from .time_grammar import ParsedTime, parse_time, resolve_time_range
from .tokens import (
    DateParts,
    DurationOffset,
    OffsetMode,
    Span,
    TemporalToken,
    TokenKind,
    WeekdayRef,
    WeekModifier,
    WeekSpecifier,
)

_DIGITS = re.compile(r"\d+")

_RELATIVE_CUE_CATEGORIES = (
    PatternCategory.WEEKDAY_PHRASE,
    PatternCategory.WEEK_MAIN,
    PatternCategory.RELATIVE_DAY,
    PatternCategory.PART_OF_DAY,
)


class TokenDetector:
    """Produces the unordered candidate token list for one utterance."""

    def __init__(self, recognizer: Optional[FallbackRecognizer] = None):
        """Initialize detector.

        Args:
            recognizer: Optional generic date recognizer consulted after the
                language pack patterns
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.recognizer = recognizer

    def detect(
        self,
        text: str,
        reference_time: datetime,
        pack: DateLanguagePack
    ) -> List[TemporalToken]:
        """Detect candidate tokens in ``text``.

        Args:
            text: Input utterance
            reference_time: Instant relative dates are resolved against
            pack: Language pack providing the patterns

        Returns:
            Candidate tokens in detection order
        """
        if not text or not text.strip():
            return []

        offsets = self._detect_duration_offsets(text, pack)

        tokens: List[TemporalToken] = []
        tokens.extend(self._detect_weekday_phrases(text, pack))
        tokens.extend(self._detect_week_phrases(text, pack, [t.span for t in offsets]))
        tokens.extend(self._detect_weekends(text, pack))
        tokens.extend(self._detect_relative_days(text, pack))
        tokens.extend(self._detect_parts_of_day(text, pack))
        tokens.extend(self._detect_ordinal_days(text, pack))
        tokens.extend(self._detect_inline_times(text, pack))
        tokens.extend(self._detect_time_ranges(text, pack, PatternCategory.FROM_TO))
        tokens.extend(self._detect_time_ranges(text, pack, PatternCategory.BETWEEN))
        tokens.extend(self._detect_times(text, pack))
        tokens.extend(offsets)
        tokens.extend(self._detect_fallback_dates(text, reference_time, pack))

        self.logger.debug(f"Detected {len(tokens)} candidate tokens in {text!r}")
        return tokens

    @staticmethod
    def _token(text: str, start: int, end: int, kind: TokenKind, value=None) -> TemporalToken:
        return TemporalToken(Span.from_bounds(start, end), text[start:end], kind, value)

    def _detect_weekday_phrases(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        for match in find_all(pack.regex(PatternCategory.WEEKDAY_PHRASE), text):
            index = pack.lookup_weekday(match.group("day"))
            if index is None:
                continue

            modifier = None
            groups = match.groupdict()
            if groups.get("mod"):
                vocabulary = pack.vocabulary_of(groups["mod"])
                modifier = WeekModifier(vocabulary) if vocabulary else None
            post = groups.get("post")
            if post:
                if pack.phrase_indicates_last(post):
                    modifier = WeekModifier.LAST
                elif pack.phrase_indicates_next(post):
                    modifier = WeekModifier.NEXT

            tokens.append(self._token(
                text, match.start(), match.end(), TokenKind.WEEKDAY, WeekdayRef(index, modifier)
            ))
        return tokens

    def _detect_week_phrases(
        self,
        text: str,
        pack: DateLanguagePack,
        offset_spans: List[Span]
    ) -> List[TemporalToken]:
        """Week phrases, except the unit word of a duration offset ("in 1 week")."""
        tokens = []
        for match in find_all(pack.regex(PatternCategory.WEEK_MAIN), text):
            if self._inside_any(match, offset_spans):
                continue
            tokens.append(self._token(
                text, match.start(), match.end(), TokenKind.RELATIVE_WEEK,
                pack.week_specifier(match.group(0))
            ))
        for match in find_all(pack.regex(PatternCategory.WEEK_BARE), text):
            if self._inside_any(match, offset_spans):
                continue
            tokens.append(self._token(
                text, match.start(), match.end(), TokenKind.RELATIVE_WEEK, WeekSpecifier.this_week()
            ))
        return tokens

    @staticmethod
    def _inside_any(match, spans: List[Span]) -> bool:
        found = Span.from_bounds(match.start(), match.end())
        return any(span.contains(found) for span in spans)

    def _detect_weekends(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        return [
            self._token(text, m.start(), m.end(), TokenKind.WEEKEND, pack.weekend_specifier(m.group(0)))
            for m in find_all(pack.regex(PatternCategory.WEEKEND), text)
        ]

    def _detect_relative_days(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        for match in find_all(pack.regex(PatternCategory.RELATIVE_DAY), text):
            day = pack.classify_relative_day(match.group(0).lower())
            if day is not None:
                tokens.append(self._token(text, match.start(), match.end(), TokenKind.RELATIVE_DAY, day))
        return tokens

    def _detect_parts_of_day(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        for match in find_all(pack.regex(PatternCategory.PART_OF_DAY), text):
            part = pack.classify_part_of_day(match.group(0).lower())
            if part is not None:
                tokens.append(self._token(text, match.start(), match.end(), TokenKind.PART_OF_DAY, part))
        return tokens

    def _detect_ordinal_days(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        for match in find_all(pack.regex(PatternCategory.ORDINAL_DAY), text):
            day = None
            for group in match.groups():
                digits = _DIGITS.search(group) if group else None
                if digits:
                    day = int(digits.group(0))
                    break
            if day is None or not 1 <= day <= 31:
                continue
            tokens.append(self._token(text, match.start(), match.end(), TokenKind.ORDINAL_DAY, day))
        return tokens

    def _detect_inline_times(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        """Weekday + time(-range) phrases and standalone ranges such as "4-6pm"."""
        tokens = []
        for match in find_all(pack.regex(PatternCategory.INLINE_TIME), text):
            weekday: Optional[Tuple[int, int, int]] = None
            times: List[Tuple[int, int, ParsedTime]] = []

            for index in range(1, (match.re.groups or 0) + 1):
                group = match.group(index)
                if not group:
                    continue
                start, end = match.span(index)
                parsed = parse_time(group, pack)
                if parsed is not None:
                    times.append((start, end, parsed))
                    continue
                weekday_index = pack.lookup_weekday(group)
                if weekday_index is not None and weekday is None:
                    weekday = (start, end, weekday_index)

            if len(times) == 1:
                start, end, parsed = times[0]
                tokens.append(self._token(text, start, end, TokenKind.ABSOLUTE_TIME, parsed.to_clock()))
            elif len(times) >= 2:
                tokens.append(self._range_token(text, times[0], times[1]))

            if weekday is not None:
                start, end, weekday_index = weekday
                tokens.append(self._token(text, start, end, TokenKind.WEEKDAY, WeekdayRef(weekday_index)))
        return tokens

    def _detect_time_ranges(
        self,
        text: str,
        pack: DateLanguagePack,
        category: PatternCategory
    ) -> List[TemporalToken]:
        """"from X to Y" and "between X and Y" ranges."""
        tokens = []
        for match in find_all(pack.regex(category), text):
            first = parse_time(match.group("start"), pack)
            second = parse_time(match.group("end"), pack)
            if first is None or second is None:
                continue
            tokens.append(self._range_token(
                text,
                (match.start("start"), match.end("start"), first),
                (match.start("end"), match.end("end"), second),
            ))
            day = match.groupdict().get("day")
            if day:
                weekday_index = pack.lookup_weekday(day)
                if weekday_index is not None:
                    tokens.append(self._token(
                        text, match.start("day"), match.end("day"), TokenKind.WEEKDAY, WeekdayRef(weekday_index)
                    ))
        return tokens

    def _range_token(self, text: str, first, second) -> TemporalToken:
        start, _, first_time = first
        _, end, second_time = second
        first_time, second_time = resolve_time_range(first_time, second_time)
        return self._token(
            text, start, end, TokenKind.TIME_RANGE, (first_time.to_clock(), second_time.to_clock())
        )

    def _detect_times(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        for match in find_all(pack.regex(PatternCategory.TIME_ONLY), text):
            parsed = parse_time(match.group(0), pack)
            if parsed is not None:
                tokens.append(self._token(
                    text, match.start(), match.end(), TokenKind.ABSOLUTE_TIME, parsed.to_clock()
                ))
        return tokens

    def _detect_duration_offsets(self, text: str, pack: DateLanguagePack) -> List[TemporalToken]:
        tokens = []
        sources = (
            (PatternCategory.IN_FROM_NOW, OffsetMode.FROM_NOW),
            (PatternCategory.BY_OFFSET, OffsetMode.SHIFT),
            (PatternCategory.ARTICLE_FROM_NOW, OffsetMode.FROM_NOW),
        )
        for category, mode in sources:
            for match in find_all(pack.regex(category), text):
                groups = match.groupdict()
                unit = unit_for(groups.get("unit") or "")
                if unit is None:
                    continue
                value = int(groups["value"]) if groups.get("value") else 1
                tokens.append(self._token(
                    text, match.start(), match.end(), TokenKind.DURATION_OFFSET,
                    DurationOffset(value, unit, mode)
                ))
        return tokens

    def _detect_fallback_dates(
        self,
        text: str,
        reference_time: datetime,
        pack: DateLanguagePack
    ) -> List[TemporalToken]:
        """Spans found by the generic recognizer that the pack does not already cover."""
        if self.recognizer is None:
            return []

        tokens = []
        for recognized in self.recognizer.recognize(text, reference_time, pack.dateparser_languages):
            span_text = text[recognized.start:recognized.end]
            parsed = parse_time(span_text, pack)
            if parsed is not None:
                tokens.append(self._token(
                    text, recognized.start, recognized.end, TokenKind.ABSOLUTE_TIME, parsed.to_clock()
                ))
                continue
            if self._has_relative_cues(span_text, pack):
                self.logger.debug(f"Fallback span {span_text!r} left to the language pack")
                continue

            value = recognized.value
            parts = DateParts(
                value.year, value.month, value.day,
                value.hour if recognized.has_time else None,
                value.minute if recognized.has_time else None,
            )
            tokens.append(self._token(
                text, recognized.start, recognized.end, TokenKind.ABSOLUTE_DATE, parts
            ))
        return tokens

    @staticmethod
    def _has_relative_cues(span_text: str, pack: DateLanguagePack) -> bool:
        for category in _RELATIVE_CUE_CATEGORIES:
            pattern = pack.regex(category)
            if pattern is not None and pattern.search(span_text):
                return True
        return False
