"""English language pack"""

import re
from typing import Dict, Optional

from ..processors.tokens import PartOfDay, RelativeDay
from .base import (
    HOUR,
    MARKED_TIME,
    RANGE_END,
    RANGE_START,
    TIME_END,
    TIME_TOKEN,
    DateLanguagePack,
    alternation,
    fold,
)


class EnglishPack(DateLanguagePack):
    """Patterns for English chat phrasing.

    "coming" reads as "this" before a weekday ("coming Friday" is the next
    Friday on the calendar) but as "next" before "weekend", where "this
    weekend" already names the nearest one.
    """

    name = "english"
    locale = "en"
    dateparser_languages = ("en",)
    this_tokens = ("this", "coming")
    next_tokens = ("next",)
    last_tokens = ("last", "past", "previous")
    coming_tokens = ("coming",)
    connector_tokens = ("at", "on", "from", "to", "until", "till", "by", "for")

    RANGE_SEP = r"(?:\s*[-–—~]\s*|\s+(?:to|until|till)\s+)"

    def weekday_names(self) -> Dict[str, int]:
        return {}

    def weekday_phrase_pattern(self) -> str:
        modifiers = alternation(self.this_tokens + self.next_tokens + self.last_tokens)
        return rf"""
            \b(?:(?P<mod>{modifiers})\s+)?
            (?P<day>{self.weekday_alternation})
            \b
        """

    def week_main_pattern(self) -> str:
        return rf"""
            \b(?:
                (?:{alternation(self.this_tokens)})\s+week
              | (?:next\s+)+week
              | (?:{alternation(self.last_tokens)})\s+week
            )\b
        """

    def week_bare_pattern(self) -> str:
        return r"\b(?:plan(?:\s+my)?\s+week|my\s+week|the\s+week|week)\b"

    def inline_time_pattern(self) -> str:
        return rf"""
            \b(?P<day>{self.weekday_alternation})(?:\s+at)?\s+
            (?P<t1>{TIME_TOKEN})
            (?:{self.RANGE_SEP}(?P<t2>{TIME_TOKEN}))?
            {TIME_END}{self.unit_guard()}
          | \b{RANGE_START}(?P<r1>{TIME_TOKEN}){self.RANGE_SEP}(?P<r2>{TIME_TOKEN})
            {RANGE_END}{self.unit_guard()}
        """

    def from_to_pattern(self) -> str:
        return rf"""
            \b(?:(?P<day>{self.weekday_alternation})\s+)?
            from\s+(?P<start>{TIME_TOKEN})\s+(?:to|until|till)\s+(?P<end>{TIME_TOKEN})
            {TIME_END}
        """

    def command_prefix_pattern(self) -> str:
        return r"""
            ^\s*(?:
                (?:add|create|schedule|book|set\s*up|new)\s+(?:a\s+)?(?:new\s+)?(?:event|task|reminder|meeting)
              | remind\s+me(?:\s+to)?
              | (?:schedule|book)
            )
            (?:\s+(?:for|to|on))?\s*
        """

    def weekend_pattern(self) -> Optional[str]:
        modifiers = alternation(self.this_tokens + self.next_tokens + self.last_tokens + ("the",))
        return rf"\b(?:(?:{modifiers})\s+)?weekend\b"

    def relative_day_pattern(self) -> Optional[str]:
        return r"\b(?:today|tomorrow|tonight|yesterday)\b"

    def part_of_day_pattern(self) -> Optional[str]:
        return r"\b(?:morning|afternoon|evening|tonight|night|noon|midday|midnight)\b"

    def ordinal_day_pattern(self) -> Optional[str]:
        return r"\b(?:the\s*)?([12]?\d|3[01])(?:st|nd|rd|th)\b"

    def between_pattern(self) -> Optional[str]:
        return rf"""
            \bbetween\s+(?P<start>{TIME_TOKEN})\s+(?:and|-|to)\s+(?P<end>{TIME_TOKEN})
            {TIME_END}
        """

    def time_only_pattern(self) -> Optional[str]:
        return rf"""
            \b(?:noon|midnight|midday)\b
          | \b{MARKED_TIME}{TIME_END}
          | (?<=\bat\s){HOUR}{TIME_END}{self.unit_guard()}
        """

    def in_from_now_pattern(self) -> Optional[str]:
        return r"\b(?:in|within)\s+(?P<value>\d+)\s+(?P<unit>minutes?|mins?|hours?|hrs?|days?|weeks?|months?)\b"

    def by_offset_pattern(self) -> Optional[str]:
        return r"\bby\s+(?P<value>\d+)\s+(?P<unit>minutes?|mins?|hours?|hrs?|days?|weeks?|months?)\b"

    def article_from_now_pattern(self) -> Optional[str]:
        return r"\b(?:a|an)\s+(?P<unit>minute|hour|day|week|month)\s+from\s+now\b"

    def phrase_indicates_next(self, phrase: str) -> bool:
        return re.search(r"\bnext\b", phrase, re.IGNORECASE) is not None

    def next_repetition_count(self, phrase: str) -> int:
        match = re.search(r"\b(next)(?:\s+next)*\s+week\b", phrase, re.IGNORECASE)
        if match:
            return len(re.findall(r"\bnext\b", match.group(0), re.IGNORECASE))
        return super().next_repetition_count(phrase)

    def classify_relative_day(self, phrase: str) -> Optional[RelativeDay]:
        folded = fold(phrase)
        if "tomorrow" in folded:
            return RelativeDay.TOMORROW
        if "yesterday" in folded:
            return RelativeDay.YESTERDAY
        if "tonight" in folded:
            return RelativeDay.TONIGHT
        if "today" in folded:
            return RelativeDay.TODAY
        return None

    def classify_part_of_day(self, phrase: str) -> Optional[PartOfDay]:
        folded = fold(phrase)
        if "morning" in folded:
            return PartOfDay.MORNING
        if "afternoon" in folded:
            return PartOfDay.AFTERNOON
        if "evening" in folded:
            return PartOfDay.EVENING
        if "midnight" in folded:
            return PartOfDay.MIDNIGHT
        if "tonight" in folded or "night" in folded:
            return PartOfDay.NIGHT
        if "noon" in folded or "midday" in folded:
            return PartOfDay.NOON
        return None
