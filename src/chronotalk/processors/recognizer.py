"""Fallback date recognition

Generic recognizers catch explicit dates the language packs do not model,
such as "March 3rd" or "2025-10-02 14:00". The token detector consults one
only when a caller supplies it.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from dateparser.search import search_dates

from ..core.logging_manager import LoggingManager

_CLOCK_HINT = re.compile(
    r"\d{1,2}:\d{2}|\d\s*(?:am|pm|a\.m\.|p\.m\.)|\b\d{1,2}\s*h(?:\d{2})?\b|\b(?:noon|midnight)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RecognizedDate:
    """A span of the input resolved to an absolute date."""
    start: int
    end: int
    value: datetime
    has_time: bool = False


class FallbackRecognizer(Protocol):
    """Anything that finds absolute dates in free text."""

    def recognize(
        self,
        text: str,
        reference_time: datetime,
        languages: Sequence[str] = ()
    ) -> List[RecognizedDate]:
        ...


class DateparserRecognizer:
    """Fallback recognizer backed by ``dateparser.search.search_dates``."""

    def __init__(self, prefer_dates_from: str = "future"):
        """Initialize recognizer.
        
        Args:
            prefer_dates_from: "future", "past" or "current_period" for
                ambiguous dates such as "March 3rd"
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.prefer_dates_from = prefer_dates_from

    def recognize(
        self,
        text: str,
        reference_time: datetime,
        languages: Sequence[str] = ()
    ) -> List[RecognizedDate]:
        """Find date spans relative to ``reference_time``.
        
        The reference time is passed as dateparser's relative base so results
        never depend on the system clock.
        """
        if not text.strip():
            return []
        
        settings = {
            "RELATIVE_BASE": reference_time.replace(tzinfo=None),
            "PREFER_DATES_FROM": self.prefer_dates_from,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }
        results = search_dates(text, languages=list(languages) or None, settings=settings)
        if not results:
            return []
        
        recognized: List[RecognizedDate] = []
        cursor = 0
        for matched_text, value in results:
            start = text.find(matched_text, cursor)
            if start < 0 or value is None:
                self.logger.debug(f"Skipping unlocatable match {matched_text!r}")
                continue
            end = start + len(matched_text)
            cursor = end
            recognized.append(RecognizedDate(
                start=start,
                end=end,
                value=value,
                has_time=_CLOCK_HINT.search(matched_text) is not None
            ))
        
        self.logger.debug(f"dateparser recognized {len(recognized)} spans")
        return recognized


def build_recognizer(enabled: bool, prefer_dates_from: str = "future") -> Optional[DateparserRecognizer]:
    """Recognizer described by the fallback configuration section."""
    if not enabled:
        return None
    return DateparserRecognizer(prefer_dates_from=prefer_dates_from)
