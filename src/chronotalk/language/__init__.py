"""Language Packs

Per-locale pattern bundles consumed by the token detector. Packs are built
once per locale and shared.
"""

from functools import lru_cache

from ..core.error_handler import ConfigurationError
from .base import DateLanguagePack, PatternCategory, fold
from .english import EnglishPack
from .portuguese import PortuguesePack
from .spanish import SpanishPack

PACKS = {
    "en": EnglishPack,
    "pt": PortuguesePack,
    "es": SpanishPack,
}


@lru_cache(maxsize=None)
def _pack_for(language: str) -> DateLanguagePack:
    return PACKS[language]()


def get_language_pack(locale: str) -> DateLanguagePack:
    """Return the shared pack for a locale such as "en", "pt-BR" or "es_ES".
    
    Raises:
        ConfigurationError: If no bundled pack covers the locale
    """
    language = (locale or "").strip().lower().replace("_", "-").split("-")[0]
    if language not in PACKS:
        raise ConfigurationError(f"Unsupported locale: {locale!r}")
    return _pack_for(language)


__all__ = [
    "DateLanguagePack",
    "PatternCategory",
    "EnglishPack",
    "PortuguesePack",
    "SpanishPack",
    "fold",
    "get_language_pack",
]
