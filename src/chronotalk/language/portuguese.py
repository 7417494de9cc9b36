"""Brazilian Portuguese language pack"""

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


class PortuguesePack(DateLanguagePack):
    """Patterns for Brazilian Portuguese chat phrasing."""

    name = "portuguese"
    locale = "pt-BR"
    dateparser_languages = ("pt",)
    this_tokens = ("este", "esta", "neste", "nesta", "deste", "desta", "agora", "nessa")
    next_tokens = (
        "próximo", "proximo", "próxima", "proxima", "no próximo", "no proximo",
        "na próxima", "na proxima", "seguinte", "que vem",
    )
    last_tokens = ("último", "ultimo", "última", "ultima", "passado", "passada")
    connector_tokens = ("às", "as", "das", "de", "até", "a", "no", "na", "em")

    ARTICLES = r"(?:o|a|no|na|neste|nesta|deste|desta)"
    RANGE_SEP = r"(?:\s*[-–—~]\s*|\s+(?:a|às|as|até|ate|to)\s+)"

    def weekday_names(self) -> Dict[str, int]:
        return {
            "domingo": 1, "segunda-feira": 2, "terça-feira": 3, "quarta-feira": 4,
            "quinta-feira": 5, "sexta-feira": 6, "sábado": 7,
            "segunda": 2, "terça": 3, "quarta": 4, "quinta": 5, "sexta": 6,
            "dom": 1, "seg": 2, "ter": 3, "qua": 4, "qui": 5, "sex": 6, "sáb": 7,
        }

    def weekday_phrase_pattern(self) -> str:
        prefixes = alternation(
            self.this_tokens + self.next_tokens + ("último", "ultimo", "última", "ultima")
        )
        return rf"""
            \b(?:(?P<mod>{prefixes})\s+(?:{self.ARTICLES}\s+)?)?
            (?P<day>{self.weekday_alternation})
            (?:\s+(?P<post>que\s+vem|passad[oa]|seguinte))?
            \b
        """

    def week_main_pattern(self) -> str:
        return rf"""
            \b(?:
                (?:{alternation(self.this_tokens)})\s+(?:{self.ARTICLES}\s+)?semana
              | (?:(?:{alternation(self.next_tokens)})\s+)+(?:{self.ARTICLES}\s+)?semana
              | (?:{alternation(("última", "ultima"))})\s+semana
              | (?<!\bde\s)semana\s+(?:que\s+vem|passada|seguinte)
            )\b
        """

    def week_bare_pattern(self) -> str:
        return r"""
            \b(?:
                agenda\s+(?:da|de|para)\s+semana
              | minha\s+semana
              | meu\s+planejamento\s+da\s+semana
              | (?<!\bde\s)semana
            )\b
        """

    def inline_time_pattern(self) -> str:
        return rf"""
            \b(?P<day>{self.weekday_alternation})(?:\s+(?:às|as|a))?\s+
            (?P<t1>{TIME_TOKEN})
            (?:{self.RANGE_SEP}(?P<t2>{TIME_TOKEN}))?
            {TIME_END}{self.unit_guard()}
          | \b{RANGE_START}(?P<r1>{TIME_TOKEN}){self.RANGE_SEP}(?P<r2>{TIME_TOKEN})
            {RANGE_END}{self.unit_guard()}
        """

    def from_to_pattern(self) -> str:
        return rf"""
            \b(?:(?P<day>{self.weekday_alternation})\s+)?
            (?:das|de|from)\s+(?P<start>{TIME_TOKEN})\s+(?:às|as|a|até|ate|to)\s+(?P<end>{TIME_TOKEN})
            {TIME_END}{self.unit_guard()}
        """

    def command_prefix_pattern(self) -> str:
        return r"""
            ^\s*(?:
                (?:criar|mover|atualizar|adicionar|agendar|marcar|novo|nova|add|reservar|tenho\s+um|colocar)
                \s+(?:um\s+|uma\s+)?(?:evento|lembrete|tarefa|reunião|reuniao)
              | definir\s+(?:um\s+)?lembrete
              | preciso\s+adicionar\s+(?:um\s+)?lembrete
              | agendar
              | marcar
            )
            (?:\s+(?:para|de|do|da))?\s*
        """

    def weekend_pattern(self) -> Optional[str]:
        modifiers = alternation(self.this_tokens + self.next_tokens + ("último", "ultimo", "o", "no"))
        return rf"""
            \b(?:(?:{modifiers})\s+)?fim\s+de\s+semana
            (?:\s+(?:que\s+vem|passado))?\b
        """

    def relative_day_pattern(self) -> Optional[str]:
        return r"\b(?:hoje|amanh[ãa]|esta\s+noite|ontem)\b"

    def part_of_day_pattern(self) -> Optional[str]:
        return r"\b(?:manh[ãa]|tarde|noite|meio[-\s]?dia|meia[-\s]?noite|madrugada)\b"

    def ordinal_day_pattern(self) -> Optional[str]:
        return r"\b(?:dia\s+([12]?\d|3[01])\b|([12]?\d|3[01])\s*[ºo°](?!\w))"

    def between_pattern(self) -> Optional[str]:
        return rf"""
            \bentre\s+(?P<start>{TIME_TOKEN})\s+(?:e|-|a)\s+(?P<end>{TIME_TOKEN})
            {TIME_END}
        """

    def time_only_pattern(self) -> Optional[str]:
        return rf"""
            \b(?:meio[-\s]?dia|meia[-\s]?noite)\b
          | \b{MARKED_TIME}{TIME_END}
          | \b{H_MARKED_TIME}{TIME_END}
          | (?:(?<=\bàs\s)|(?<=\bas\s)){HOUR}{TIME_END}{self.unit_guard()}
        """

    def in_from_now_pattern(self) -> Optional[str]:
        return r"\b(?:em|daqui\s+a|dentro\s+de)\s+(?P<value>\d+)\s+(?P<unit>minutos?|mins?|horas?|hrs?|dias?|semanas?|m[eê]s(?:es)?)\b"

    def by_offset_pattern(self) -> Optional[str]:
        return r"\b(?:por|mais)\s+(?P<value>\d+)\s+(?P<unit>minutos?|mins?|horas?|hrs?|dias?|semanas?|m[eê]s(?:es)?)\b"

    def article_from_now_pattern(self) -> Optional[str]:
        return r"\b(?:daqui\s+a|em|dentro\s+de)\s+(?:um|uma)\s+(?P<unit>minuto|hora|dia|semana|m[eê]s)\b"

    def phrase_indicates_next(self, phrase: str) -> bool:
        folded = fold(phrase)
        return any(word in folded for word in ("proximo", "proxima", "seguinte", "que vem", "next"))

    def next_repetition_count(self, phrase: str) -> int:
        folded = fold(phrase)
        match = re.search(r"\b(proxim[oa])(?:\s+proxim[oa])*\s+(?:a\s+)?semana\b", folded)
        if match:
            return len(re.findall(r"\bproxim[oa]\b", match.group(0)))
        return super().next_repetition_count(phrase)

    def classify_relative_day(self, phrase: str) -> Optional[RelativeDay]:
        folded = fold(phrase)
        if "amanha" in folded:
            return RelativeDay.TOMORROW
        if "ontem" in folded:
            return RelativeDay.YESTERDAY
        if "esta noite" in folded:
            return RelativeDay.TONIGHT
        if "hoje" in folded:
            return RelativeDay.TODAY
        return None

    def classify_part_of_day(self, phrase: str) -> Optional[PartOfDay]:
        folded = fold(phrase)
        if "meia noite" in folded or "meia-noite" in folded or "meianoite" in folded:
            return PartOfDay.MIDNIGHT
        if "meio dia" in folded or "meio-dia" in folded or "meiodia" in folded:
            return PartOfDay.NOON
        if "manha" in folded:
            return PartOfDay.MORNING
        if "tarde" in folded:
            return PartOfDay.AFTERNOON
        if "madrugada" in folded:
            return PartOfDay.NIGHT
        if "noite" in folded:
            return PartOfDay.EVENING
        return None
