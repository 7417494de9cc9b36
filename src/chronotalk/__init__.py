"""ChronoTalk - Temporal expressions in chat messages

Finds dates and times in short English, Portuguese and Spanish utterances
and resolves them to an instant or a date range.
"""

__version__ = "0.1.0"
__description__ = "Temporal tokenizer and resolver for chat utterances"

from .parser import TemporalParser, parse
from .core.config_manager import Preferences
from .core.error_handler import ChronoTalkError, ConfigurationError, LanguagePackError
from .intelligence.temporal_interpreter import DateRange, TemporalContext
from .language import get_language_pack
from .processors.tokens import TemporalToken, TokenKind

__all__ = [
    "TemporalParser",
    "parse",
    "Preferences",
    "ChronoTalkError",
    "ConfigurationError",
    "LanguagePackError",
    "DateRange",
    "TemporalContext",
    "get_language_pack",
    "TemporalToken",
    "TokenKind",
]
