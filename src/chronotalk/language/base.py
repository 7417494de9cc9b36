"""Language Pack contract

A language pack bundles the compiled patterns and lookup tables the token
detector needs for one locale. Packs are immutable after construction and
safe to share between threads.
"""

import re
import unicodedata
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from ..core.error_handler import LanguagePackError
from ..core.logging_manager import LoggingManager
from ..processors.tokens import OffsetUnit, PartOfDay, RelativeDay, WeekSpecifier


class PatternCategory(Enum):
    """Pattern sources a pack can provide."""
    WEEKDAY_PHRASE = "weekday_phrase"
    WEEK_MAIN = "week_main"
    WEEK_BARE = "week_bare"
    INLINE_TIME = "inline_time"
    FROM_TO = "from_to"
    COMMAND_PREFIX = "command_prefix"
    WEEKEND = "weekend"
    RELATIVE_DAY = "relative_day"
    PART_OF_DAY = "part_of_day"
    ORDINAL_DAY = "ordinal_day"
    BETWEEN = "between"
    TIME_ONLY = "time_only"
    IN_FROM_NOW = "in_from_now"
    BY_OFFSET = "by_offset"
    ARTICLE_FROM_NOW = "article_from_now"


REQUIRED_CATEGORIES = frozenset({
    PatternCategory.WEEKDAY_PHRASE,
    PatternCategory.WEEK_MAIN,
    PatternCategory.WEEK_BARE,
    PatternCategory.INLINE_TIME,
    PatternCategory.FROM_TO,
    PatternCategory.COMMAND_PREFIX,
})

# Shared regex building blocks
HOUR = r"(?:[01]?\d|2[0-3])"
MINUTES = r"[0-5]\d"
MERIDIEM = r"(?:[ap]m\b|[ap]\.\s?m\.?)"
TIME_END = r"(?![\w:])"
RANGE_START = r"(?<![\w:/.\-])"
RANGE_END = r"(?![\w:/\-])"
TIME_TOKEN = (
    rf"{HOUR}(?::{MINUTES}|\s*h\s*(?:{MINUTES})?)?"
    rf"(?:\s*{MERIDIEM})?(?:\s*(?:hrs?|hs)\b)?"
)
MARKED_TIME = rf"{HOUR}(?::{MINUTES}(?:\s*{MERIDIEM})?|\s*{MERIDIEM})"
H_MARKED_TIME = rf"{HOUR}\s*h(?:rs?|s)?\s*(?:{MINUTES})?"

ENGLISH_WEEKDAYS = {
    "sunday": 1, "monday": 2, "tuesday": 3, "wednesday": 4,
    "thursday": 5, "friday": 6, "saturday": 7,
    "sun": 1, "mon": 2, "tue": 3, "wed": 4, "thu": 5, "fri": 6, "sat": 7,
    "tues": 3, "thur": 5, "thurs": 5,
}

_UNIT_PREFIXES: Tuple[Tuple[str, OffsetUnit], ...] = (
    ("min", OffsetUnit.MINUTE),
    ("hour", OffsetUnit.HOUR),
    ("hora", OffsetUnit.HOUR),
    ("hr", OffsetUnit.HOUR),
    ("h", OffsetUnit.HOUR),
    ("day", OffsetUnit.DAY),
    ("dia", OffsetUnit.DAY),
    ("week", OffsetUnit.WEEK),
    ("semana", OffsetUnit.WEEK),
    ("month", OffsetUnit.MONTH),
    ("mes", OffsetUnit.MONTH),
)


def fold(text: str) -> str:
    """Lowercase and strip diacritics and dots: "Terça." -> "terca"."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.casefold().replace(".", "").split())


def alternation(tokens: Iterable[str]) -> str:
    """Regex alternation of literal tokens, longest first, any whitespace between words."""
    unique = sorted(set(tokens), key=lambda t: (-len(t), t))
    return "|".join(re.escape(t).replace("\\ ", r"\s+") for t in unique)


def build_weekday_map(names: Dict[str, int]) -> Dict[str, int]:
    """Folded weekday lookup table (1=Sunday ... 7=Saturday).

    English names are always present so mixed-language input resolves.
    """
    weekday_map: Dict[str, int] = {}
    for name, index in list(names.items()) + list(ENGLISH_WEEKDAYS.items()):
        key = fold(name)
        weekday_map[key] = index
        if "-" in key:
            weekday_map[key.replace("-", " ")] = index
    return weekday_map


def unit_for(text: str) -> Optional[OffsetUnit]:
    """Map a unit word in any bundled language to an OffsetUnit."""
    key = fold(text)
    for prefix, unit in _UNIT_PREFIXES:
        if key.startswith(prefix):
            return unit
    return None


class DateLanguagePack(ABC):
    """Per-locale pattern providers and lookup tables.

    Required pattern sources are abstract. Optional detectors return None
    and the detector skips them.
    """

    name: str = ""
    locale: str = ""
    dateparser_languages: Tuple[str, ...] = ()
    this_tokens: Tuple[str, ...] = ()
    next_tokens: Tuple[str, ...] = ()
    last_tokens: Tuple[str, ...] = ()
    coming_tokens: Tuple[str, ...] = ()
    connector_tokens: Tuple[str, ...] = ()

    def __init__(self):
        """Build the weekday table and compile every pattern source once.

        Raises:
            LanguagePackError: If a pattern source does not compile
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.weekday_map = build_weekday_map(self.weekday_names())
        self._weekday_alternation = alternation(
            list(self.weekday_names()) + list(self.weekday_map)
        )
        self._patterns: Dict[PatternCategory, Pattern] = {}

        for category in PatternCategory:
            source = getattr(self, f"{category.value}_pattern")()
            if source is None:
                if category in REQUIRED_CATEGORIES:
                    raise LanguagePackError("required pattern is missing", self.name, category.value)
                continue
            try:
                self._patterns[category] = re.compile(source, re.IGNORECASE | re.VERBOSE)
            except re.error as e:
                self.logger.error(f"Pattern {category.value} of {self.name} pack failed to compile: {e}")
                raise LanguagePackError(str(e), self.name, category.value) from e

        self.logger.debug(f"{self.name} pack compiled {len(self._patterns)} patterns")

    def regex(self, category: PatternCategory) -> Optional[Pattern]:
        """Compiled pattern for a category, or None when the pack has none."""
        return self._patterns.get(category)

    @property
    def weekday_alternation(self) -> str:
        return self._weekday_alternation

    # Required pattern sources

    @abstractmethod
    def weekday_names(self) -> Dict[str, int]:
        """Surface weekday names of the locale mapped to 1=Sunday ... 7=Saturday."""

    @abstractmethod
    def weekday_phrase_pattern(self) -> str:
        """Weekday with optional modifier; groups ``mod``, ``day`` and optionally ``post``."""

    @abstractmethod
    def week_main_pattern(self) -> str:
        """'this week', 'next next week', 'last week'."""

    @abstractmethod
    def week_bare_pattern(self) -> str:
        """'my week', 'the week'."""

    @abstractmethod
    def inline_time_pattern(self) -> str:
        """Weekday followed by a time or time range, or a standalone time range."""

    @abstractmethod
    def from_to_pattern(self) -> str:
        """'from X to Y'; groups ``day``, ``start``, ``end``."""

    @abstractmethod
    def command_prefix_pattern(self) -> str:
        """Leading command phrase such as 'add event'."""

    @abstractmethod
    def phrase_indicates_next(self, phrase: str) -> bool:
        pass

    # Optional pattern sources

    def weekend_pattern(self) -> Optional[str]:
        return None

    def relative_day_pattern(self) -> Optional[str]:
        return None

    def part_of_day_pattern(self) -> Optional[str]:
        return None

    def ordinal_day_pattern(self) -> Optional[str]:
        return None

    def between_pattern(self) -> Optional[str]:
        return None

    def time_only_pattern(self) -> Optional[str]:
        return None

    def in_from_now_pattern(self) -> Optional[str]:
        return None

    def by_offset_pattern(self) -> Optional[str]:
        return None

    def article_from_now_pattern(self) -> Optional[str]:
        return None

    # Classification helpers

    def classify_relative_day(self, phrase: str) -> Optional[RelativeDay]:
        return None

    def classify_part_of_day(self, phrase: str) -> Optional[PartOfDay]:
        return None

    def phrase_indicates_last(self, phrase: str) -> bool:
        folded = fold(phrase)
        return any(re.search(rf"\b{re.escape(fold(t))}\b", folded) for t in self.last_tokens)

    def next_repetition_count(self, phrase: str) -> int:
        """How many weeks ahead a week phrase points ("next next week" -> 2)."""
        return 1 if self.phrase_indicates_next(phrase) else 0

    def week_specifier(self, phrase: str) -> WeekSpecifier:
        """Classify a matched week phrase."""
        if self.phrase_indicates_last(phrase):
            return WeekSpecifier.last_week(1)
        count = self.next_repetition_count(phrase)
        if count > 0:
            return WeekSpecifier.next_week(count)
        return WeekSpecifier.this_week()

    def weekend_specifier(self, phrase: str) -> WeekSpecifier:
        """Classify a matched weekend phrase; "coming weekend" means the next one."""
        if self.phrase_indicates_last(phrase):
            return WeekSpecifier.last_week(1)
        folded = fold(phrase)
        if self.phrase_indicates_next(phrase) or any(
            re.search(rf"\b{re.escape(fold(t))}\b", folded) for t in self.coming_tokens
        ):
            return WeekSpecifier.next_week(1)
        return WeekSpecifier.this_week()

    def lookup_weekday(self, text: str) -> Optional[int]:
        """Canonical weekday index for a matched weekday word, if any."""
        key = fold(text).strip(" ,;:!?")
        if key in self.weekday_map:
            return self.weekday_map[key]
        return self.weekday_map.get(key.replace("-", " "))

    def vocabulary_of(self, modifier_text: str) -> Optional[str]:
        """Which vocabulary ("this", "next", "last") a modifier word belongs to."""
        key = fold(modifier_text)
        for label, tokens in (("next", self.next_tokens), ("last", self.last_tokens), ("this", self.this_tokens)):
            if key in {fold(t) for t in tokens}:
                return label
        return None

    def strip_command_prefix(self, text: str) -> str:
        """Remove a leading command phrase ("add event for", "agendar")."""
        match = self._patterns[PatternCategory.COMMAND_PREFIX].match(text)
        if match and match.end() > 0:
            return text[match.end():].lstrip()
        return text

    def unit_guard(self) -> str:
        """Negative lookahead keeping counts like "3 days" from reading as clock hours."""
        return r"(?!\s*(?:minutes?|mins?|hours?|days?|weeks?|months?|years?|minutos?|horas?|d[ií]as?|semanas?|mes(?:es)?|anos?|años?)\b)"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(locale={self.locale!r})"


def find_all(pattern: Optional[Pattern], text: str) -> List[re.Match]:
    """All matches of an optional pattern."""
    if pattern is None:
        return []
    return list(pattern.finditer(text))
