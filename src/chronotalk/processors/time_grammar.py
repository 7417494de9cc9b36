"""Clock time grammar shared by every language pack

Parses "11", "11:30", "7pm", "7 p.m.", "14h", "14h30", "9hs" and the
pack's noon/midnight words into 24-hour components, and reconciles the
meridiem markers of two-endpoint ranges such as "4-6pm".
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import ClockTime, PartOfDay

TIME_RE = re.compile(r"""
    ^\s*
    (?P<h>[01]?\d|2[0-3])
    (?:
        :(?P<m>\d{2})
      | \s*h\s*(?P<mh>\d{2})?
    )?
    \s*(?P<ampm>am|pm)?
    \s*(?:hs?|hrs?)?
    \s*$
""", re.IGNORECASE | re.VERBOSE)

_DOTTED_MERIDIEM = re.compile(r"\b([ap])\.\s?m\.?", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedTime:
    """Hour in 24-hour form plus the meridiem marker written in the text."""
    hour: int
    minute: int = 0
    meridiem: Optional[str] = None

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute

    def to_clock(self) -> ClockTime:
        return ClockTime(self.hour, self.minute)


def parse_time(text: str, pack=None) -> Optional[ParsedTime]:
    """Parse a single time expression.
    
    Args:
        text: Candidate text, e.g. "7pm" or "meio-dia"
        pack: Language pack used to recognize noon/midnight words
        
    Returns:
        ParsedTime, or None when the text is not a clock time
    """
    lower = text.strip().lower()
    if not lower:
        return None
    
    if pack is not None:
        part = pack.classify_part_of_day(lower)
        if part is PartOfDay.NOON:
            return ParsedTime(12, 0)
        if part is PartOfDay.MIDNIGHT:
            return ParsedTime(0, 0)
    
    lower = _DOTTED_MERIDIEM.sub(lambda m: f"{m.group(1)}m", lower)
    match = TIME_RE.match(lower)
    if not match:
        return None
    
    hour = int(match.group('h'))
    minute_text = match.group('m') or match.group('mh')
    minute = int(minute_text) if minute_text else 0
    if minute > 59:
        return None
    
    meridiem = match.group('ampm')
    if meridiem:
        meridiem = meridiem.lower()
        if hour > 12:
            return None
        if meridiem == 'pm' and hour < 12:
            hour += 12
        elif meridiem == 'am' and hour == 12:
            hour = 0
    
    return ParsedTime(hour, minute, meridiem)


def _twelve_hour(hour: int) -> int:
    return hour - 12 if hour >= 12 else hour


def resolve_time_range(first: ParsedTime, second: ParsedTime) -> Tuple[ParsedTime, ParsedTime]:
    """Propagate meridiem markers between the two endpoints of a range.
    
    "4-6pm" becomes 16:00-18:00, "3pm to 5" becomes 15:00-17:00 and
    "14:00-4" becomes 14:00-16:00. A range that is still inverted afterwards,
    such as "22:00-01:00", is returned as written; endpoints are never
    swapped.
    """
    if first.meridiem is None and second.meridiem == 'pm':
        second_hour = second.hour if second.hour <= 12 else second.hour - 12
        if first.hour < 12 and first.hour < second_hour:
            first = ParsedTime(first.hour + 12, first.minute, 'pm')
    elif first.meridiem == 'pm' and second.meridiem is None:
        if second.hour < 12 and second.hour > _twelve_hour(first.hour):
            second = ParsedTime(second.hour + 12, second.minute, 'pm')
    
    if first.minutes >= second.minutes and second.hour < 12 and first.hour >= 12:
        promoted = ParsedTime(second.hour + 12, second.minute, 'pm')
        if second.meridiem is None and first.minutes < promoted.minutes:
            second = promoted
    
    return first, second
