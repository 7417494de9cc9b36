"""Error types for ChronoTalk

Only configuration-time problems are raised as exceptions. Parsing itself
never raises: missing matches and ambiguity are reported through the
confidence score and the conflict list of the resolved context.
"""

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ChronoTalkError(Exception):
    """Base exception class for ChronoTalk."""
    
    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ConfigurationError(ChronoTalkError):
    """Error raised when configuration is invalid."""
    pass


class LanguagePackError(ChronoTalkError):
    """Error raised when a language pack cannot compile its patterns."""
    
    def __init__(self, message: str, pack_name: str, category: str):
        self.pack_name = pack_name
        self.category = category
        super().__init__(f"{pack_name}: {category}: {message}", ErrorSeverity.HIGH)
