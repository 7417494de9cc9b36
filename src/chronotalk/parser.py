"""Temporal parsing pipeline

Language pack -> TokenDetector -> TokenSelector -> TemporalInterpreter.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .core.config_manager import AppConfig, ConfigManager, Preferences
from .core.logging_manager import LoggingManager
from .intelligence.temporal_interpreter import TemporalContext, TemporalInterpreter
from .language import DateLanguagePack, get_language_pack
from .processors.recognizer import FallbackRecognizer, build_recognizer
from .processors.token_detector import TokenDetector
from .processors.token_selector import TokenSelector
from .processors.tokens import TemporalToken

LanguagePackLike = Union[DateLanguagePack, str]


class TemporalParser:
    """Reusable parser bound to preferences and an optional fallback recognizer.

    Instances hold no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        preferences: Optional[Preferences] = None,
        recognizer: Optional[FallbackRecognizer] = None,
        language: LanguagePackLike = "en"
    ):
        self.logger = LoggingManager.get_logger(__name__)
        self.preferences = preferences or Preferences()
        self.default_pack = _resolve_pack(language)
        self.detector = TokenDetector(recognizer)
        self.selector = TokenSelector()
        self.interpreter = TemporalInterpreter(self.preferences)

    @classmethod
    def from_config(cls, config: Union[AppConfig, ConfigManager, Path, str, None] = None) -> 'TemporalParser':
        """Build a parser from a configuration object or directory."""
        if isinstance(config, AppConfig):
            app_config = config
        else:
            manager = config if isinstance(config, ConfigManager) else ConfigManager(config)
            app_config = manager.load_config()
        recognizer = build_recognizer(app_config.fallback.enabled, app_config.fallback.prefer_dates_from)
        return cls(app_config.preferences, recognizer, app_config.language)

    def parse(
        self,
        text: str,
        reference_time: datetime,
        language_pack: Optional[LanguagePackLike] = None
    ) -> Tuple[List[TemporalToken], TemporalContext]:
        """Extract and resolve the temporal meaning of ``text``.
        
        Args:
            text: Chat utterance
            reference_time: The "now" used for relative expressions; naive
                values are read in the preferences' timezone
            language_pack: Pack or locale; defaults to the parser's language
            
        Returns:
            Selected tokens and the resolved context
        """
        pack = _resolve_pack(language_pack) if language_pack is not None else self.default_pack
        reference = self.interpreter.localize(reference_time)
        
        candidates = self.detector.detect(text, reference, pack)
        tokens = self.selector.select(candidates)
        context = self.interpreter.interpret(tokens, reference)
        
        self.logger.debug(f"[{pack.locale}] {text!r}: {len(candidates)} candidates, {len(tokens)} selected")
        return tokens, context


def _resolve_pack(language: LanguagePackLike) -> DateLanguagePack:
    if isinstance(language, DateLanguagePack):
        return language
    return get_language_pack(language)


def parse(
    text: str,
    reference_time: datetime,
    language_pack: LanguagePackLike,
    preferences: Optional[Preferences] = None,
    recognizer: Optional[FallbackRecognizer] = None
) -> Tuple[List[TemporalToken], TemporalContext]:
    """Parse one utterance; see TemporalParser.parse."""
    parser = TemporalParser(preferences, recognizer, language_pack)
    return parser.parse(text, reference_time)
