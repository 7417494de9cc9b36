"""Spanish language pack"""

import re
from typing import Dict, Optional

from ..processors.tokens import PartOfDay, RelativeDay
from .base import (
    H_MARKED_TIME,
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


class SpanishPack(DateLanguagePack):
    """Patterns for Spanish chat phrasing."""

    name = "spanish"
    locale = "es"
    dateparser_languages = ("es",)
    this_tokens = ("este", "esta")
    next_tokens = ("próximo", "proximo", "próxima", "proxima", "siguiente", "que viene")
    last_tokens = ("pasado", "pasada", "último", "ultimo", "última", "ultima", "anterior")
    connector_tokens = ("a las", "a", "en", "el", "la", "desde", "hasta", "de", "por", "para")

    RANGE_SEP = r"(?:\s*[-–—~]\s*|\s+(?:a|hasta|to)\s+)"

    def weekday_names(self) -> Dict[str, int]:
        return {
            "domingo": 1, "lunes": 2, "martes": 3, "miércoles": 4,
            "jueves": 5, "viernes": 6, "sábado": 7,
            "dom": 1, "lun": 2, "mar": 3, "mié": 4, "jue": 5, "vie": 6, "sáb": 7,
        }

    def weekday_phrase_pattern(self) -> str:
        prefixes = alternation(self.this_tokens + self.next_tokens + ("último", "ultimo", "última", "ultima"))
        return rf"""
            \b(?:(?P<mod>{prefixes})\s+)?
            (?:el\s+|la\s+)?
            (?P<day>{self.weekday_alternation})
            (?:\s+(?P<post>que\s+viene|pasad[oa]|siguiente))?
            \b
        """

    def week_main_pattern(self) -> str:
        return rf"""
            \b(?:
                (?:{alternation(self.this_tokens)})\s+semana
              | (?:la\s+)?(?:(?:{alternation(self.next_tokens)})\s+)+semana
              | (?:la\s+)?(?:{alternation(("última", "ultima"))})\s+semana
              | (?<!\bde\s)semana\s+(?:que\s+viene|pasada|siguiente|anterior)
            )\b
        """

    def week_bare_pattern(self) -> str:
        return r"""
            \b(?:
                planificar\s+mi\s+semana
              | planear\s+mi\s+semana
              | mi\s+semana
              | agenda\s+de\s+la\s+semana
              | (?<!\bde\s)semana
            )\b
        """

    def inline_time_pattern(self) -> str:
        return rf"""
            \b(?P<day>{self.weekday_alternation})(?:\s+(?:a\s+las|a\s+la|a|en))?\s+
            (?P<t1>{TIME_TOKEN})
            (?:{self.RANGE_SEP}(?P<t2>{TIME_TOKEN}))?
            {TIME_END}{self.unit_guard()}
          | \b{RANGE_START}(?P<r1>{TIME_TOKEN}){self.RANGE_SEP}(?P<r2>{TIME_TOKEN})
            {RANGE_END}{self.unit_guard()}
        """

    def from_to_pattern(self) -> str:
        return rf"""
            \b(?:(?P<day>{self.weekday_alternation})\s+)?
            (?:de|desde|from)\s+(?:las\s+)?(?P<start>{TIME_TOKEN})\s+(?:a|hasta|to)\s+(?:las\s+)?(?P<end>{TIME_TOKEN})
            {TIME_END}{self.unit_guard()}
        """

    def command_prefix_pattern(self) -> str:
        return r"""
            ^\s*(?:
                (?:crear|añadir|anadir|agregar|programar|agendar|reservar|anotar)\s+
                (?:una?\s+)?(?:nueva?\s+)?(?:evento|tarea|recordatorio|reunión|reunion|cita)
              | recuérdame|recuerdame
              | programar
              | agendar
            )
            (?:\s+(?:para|de|el|la))?\s*
        """

    def weekend_pattern(self) -> Optional[str]:
        modifiers = alternation(self.this_tokens + self.next_tokens + ("el", "último", "ultimo"))
        return rf"""
            \b(?:(?:{modifiers})\s+)?fin\s+de\s+semana
            (?:\s+(?:que\s+viene|pasado))?\b
        """

    def relative_day_pattern(self) -> Optional[str]:
        return r"\b(?:hoy|(?<!\bla\s)mañana|(?<!\bla\s)manana|esta\s+noche|ayer)\b"

    def part_of_day_pattern(self) -> Optional[str]:
        return r"\b(?:(?:por|de|en)\s+la\s+(?:mañana|manana)|tarde|noche|mediod[ií]a|medianoche|madrugada)\b"

    def ordinal_day_pattern(self) -> Optional[str]:
        return r"\b(?:d[ií]a\s+([12]?\d|3[01])\b|([12]?\d|3[01])\s*[ºo°](?!\w))"

    def between_pattern(self) -> Optional[str]:
        return rf"""
            \bentre\s+(?:las\s+)?(?P<start>{TIME_TOKEN})\s+(?:y|a|-|hasta)\s+(?:las\s+)?(?P<end>{TIME_TOKEN})
            {TIME_END}
        """

    def time_only_pattern(self) -> Optional[str]:
        return rf"""
            \b(?:mediod[ií]a|medianoche)\b
          | \b{MARKED_TIME}{TIME_END}
          | \b{H_MARKED_TIME}{TIME_END}
          | (?<=\blas\s){HOUR}{TIME_END}{self.unit_guard()}
          | (?<=\bla\s)1{TIME_END}{self.unit_guard()}
        """

    def in_from_now_pattern(self) -> Optional[str]:
        return r"\b(?:en|dentro\s+de)\s+(?P<value>\d+)\s+(?P<unit>minutos?|mins?|horas?|hrs?|d[ií]as?|semanas?|mes(?:es)?)\b"

    def by_offset_pattern(self) -> Optional[str]:
        return r"\bpor\s+(?P<value>\d+)\s+(?P<unit>minutos?|mins?|horas?|hrs?|d[ií]as?|semanas?|mes(?:es)?)\b"

    def article_from_now_pattern(self) -> Optional[str]:
        return r"""
            \b(?:dentro\s+de\s+|de\s+aqu[ií]\s+a\s+|en\s+)
            (?:una?|un)\s+(?P<unit>minuto|hora|d[ií]a|semana|mes)\b
            (?:\s+desde\s+ahora)?
        """

    def phrase_indicates_next(self, phrase: str) -> bool:
        folded = fold(phrase)
        return any(word in folded for word in ("proximo", "proxima", "siguiente", "que viene", "next"))

    def next_repetition_count(self, phrase: str) -> int:
        folded = fold(phrase)
        match = re.search(r"\b(proxim[oa])(?:\s+proxim[oa])*\s+semana\b", folded)
        if match:
            return len(re.findall(r"\bproxim[oa]\b", match.group(0)))
        return super().next_repetition_count(phrase)

    def classify_relative_day(self, phrase: str) -> Optional[RelativeDay]:
        folded = fold(phrase)
        if "manana" in folded:
            return RelativeDay.TOMORROW
        if "ayer" in folded:
            return RelativeDay.YESTERDAY
        if "esta noche" in folded:
            return RelativeDay.TONIGHT
        if "hoy" in folded:
            return RelativeDay.TODAY
        return None

    def classify_part_of_day(self, phrase: str) -> Optional[PartOfDay]:
        folded = fold(phrase)
        if "medianoche" in folded:
            return PartOfDay.MIDNIGHT
        if "mediodia" in folded:
            return PartOfDay.NOON
        if "manana" in folded:
            return PartOfDay.MORNING
        if "tarde" in folded:
            return PartOfDay.AFTERNOON
        if "madrugada" in folded:
            return PartOfDay.NIGHT
        if "noche" in folded:
            return PartOfDay.EVENING
        return None
