"""Token Selector

Orders candidate tokens and drops every candidate fully covered by an
already kept token of equal or higher priority.
"""

from typing import Iterable, List

from ..core.logging_manager import LoggingManager
from .tokens import TemporalToken


class TokenSelector:
    """Deduplicates overlapping candidate tokens."""

    def __init__(self):
        self.logger = LoggingManager.get_logger(__name__)

    @staticmethod
    def sort_key(token: TemporalToken):
        """Leftmost first, then highest priority, then longest span."""
        return (token.span.start, -token.priority, -token.span.length)

    def select(self, candidates: Iterable[TemporalToken]) -> List[TemporalToken]:
        """Return the surviving tokens in selection order.
        
        A candidate is dropped only when a kept token covers its whole span
        and has a priority at least as high.
        """
        kept: List[TemporalToken] = []
        for token in sorted(candidates, key=self.sort_key):
            covered = any(
                other.span.intersection_length(token.span) == token.span.length
                and other.priority >= token.priority
                for other in kept
            )
            if covered:
                self.logger.debug(f"Dropping {token!r}: covered by a stronger token")
                continue
            kept.append(token)
        return kept
