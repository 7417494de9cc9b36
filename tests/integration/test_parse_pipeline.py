"""
Integration tests for the complete parsing pipeline.

Runs utterances through language pack, detector, selector and interpreter
and checks the resolved instants, ranges and the pipeline-wide laws.
"""

from datetime import datetime, timedelta

import pytest

from chronotalk import TemporalParser, parse
from chronotalk.core.config_manager import AppConfig, ConfigManager, FallbackConfig, Preferences
from chronotalk.core.error_handler import ConfigurationError
from chronotalk.processors.recognizer import DateparserRecognizer
from chronotalk.processors.tokens import DateParts, TokenKind
from tests.fixtures.sample_data import PROPERTY_UTTERANCES, SAMPLE_SCENARIOS, StubRecognizer


def _aware(parts, tzinfo):
    return datetime(*parts, tzinfo=tzinfo)


class TestScenarios:
    """End-to-end resolution of sample utterances"""

    @pytest.mark.integration
    @pytest.mark.parametrize("scenario", SAMPLE_SCENARIOS, ids=[s["id"] for s in SAMPLE_SCENARIOS])
    def test_scenario(self, parser, reference_time, sao_paulo, scenario):
        tokens, context = parser.parse(scenario["text"], reference_time, scenario["language"])

        assert [token.kind.value for token in tokens] == scenario["kinds"]
        assert context.final_date == _aware(scenario["final"], sao_paulo)
        if scenario["range"] is None:
            assert context.date_range is None
            assert not context.is_range_query
        else:
            start, end = scenario["range"]
            assert context.date_range.start == _aware(start, sao_paulo)
            assert context.date_range.end == _aware(end, sao_paulo)
            assert context.is_range_query

    @pytest.mark.integration
    def test_next_week_at_eleven(self, parser, reference_time):
        tokens, context = parser.parse("next week at 11:00", reference_time, "en")

        assert tokens[0].text == "next week"
        assert tokens[0].value.offset == 1
        assert tokens[1].text == "11:00"
        assert context.confidence == pytest.approx(1.0)

    @pytest.mark.integration
    def test_next_friday_confidence(self, parser, reference_time):
        _, context = parser.parse("move game to next Friday", reference_time, "en")

        assert context.confidence == pytest.approx(0.9)

    @pytest.mark.integration
    def test_conflicting_times(self, parser, reference_time):
        tokens, context = parser.parse("dinner with parents tonight 8pm at 7pm", reference_time, "en")

        assert [token.text for token in tokens] == ["tonight", "8pm", "7pm"]
        assert len(context.conflicts) == 1
        assert context.confidence == pytest.approx(0.8)

    @pytest.mark.integration
    def test_empty_input(self, parser, reference_time):
        tokens, context = parser.parse("", reference_time, "en")

        assert tokens == []
        assert context.confidence == 0.0
        assert context.final_date == reference_time

    @pytest.mark.integration
    def test_no_temporal_content(self, parser, reference_time):
        tokens, context = parser.parse("buy milk", reference_time, "en")

        assert tokens == []
        assert context.final_date == reference_time

    @pytest.mark.integration
    def test_weekend_confidence(self, parser, reference_time):
        _, context = parser.parse("push back do laundry to weekend", reference_time, "en")

        assert context.confidence == pytest.approx(0.9)

    @pytest.mark.integration
    def test_weekday_range_duration(self, parser, reference_time):
        _, context = parser.parse("block Friday 3-5pm for review", reference_time, "en")

        assert context.duration == timedelta(hours=2)


class TestRelativeExpressions:
    """Week, ordinal and offset phrases resolved end to end"""

    @pytest.mark.integration
    @pytest.mark.parametrize("text,language,first_day,last_day", [
        ("this week", "en", 8, 14),
        ("next next week", "en", 22, 28),
        ("last week", "en", 1, 7),
        ("próxima semana", "pt", 15, 21),
        ("la semana que viene", "es", 15, 21),
    ])
    def test_week_ranges(self, parser, reference_time, text, language, first_day, last_day):
        _, context = parser.parse(text, reference_time, language)

        assert context.date_range.start.day == first_day
        assert context.date_range.end.day == last_day
        assert context.date_range.start.hour == 0

    @pytest.mark.integration
    @pytest.mark.parametrize("text,language,expected", [
        ("the 24th", "en", (2025, 9, 24)),
        ("on the 5th", "en", (2025, 10, 5)),
        ("pagar aluguel dia 20", "pt", (2025, 9, 20)),
        ("pagar aluguel dia 2", "pt", (2025, 10, 2)),
    ])
    def test_ordinal_days(self, parser, reference_time, text, language, expected):
        _, context = parser.parse(text, reference_time, language)

        assert (context.final_date.year, context.final_date.month, context.final_date.day) == expected
        assert context.final_date.hour == 10

    @pytest.mark.integration
    @pytest.mark.parametrize("text,language,expected", [
        ("in 3 days", "en", (2025, 9, 14, 10, 0)),
        ("review in 2 hours", "en", (2025, 9, 11, 12, 0)),
        ("an hour from now", "en", (2025, 9, 11, 11, 0)),
        ("in 1 week", "en", (2025, 9, 18, 10, 0)),
        ("a week from now", "en", (2025, 9, 18, 10, 0)),
        ("daqui a 2 horas", "pt", (2025, 9, 11, 12, 0)),
        ("em 1 semana", "pt", (2025, 9, 18, 10, 0)),
        ("daqui a uma semana", "pt", (2025, 9, 18, 10, 0)),
        ("en 3 días", "es", (2025, 9, 14, 10, 0)),
        ("en una semana", "es", (2025, 9, 18, 10, 0)),
        ("dentro de 2 semanas", "es", (2025, 9, 25, 10, 0)),
    ])
    def test_from_now(self, parser, reference_time, sao_paulo, text, language, expected):
        _, context = parser.parse(text, reference_time, language)

        assert context.final_date == _aware(expected, sao_paulo)
        assert context.is_range_query is False
        assert context.date_range is None

    @pytest.mark.integration
    @pytest.mark.parametrize("text,language,days", [
        ("push it by 2 days", "en", 2),
        ("push it by 1 week", "en", 7),
        ("adiar por 1 semana", "pt", 7),
        ("mover por 2 semanas", "es", 14),
    ])
    def test_shift(self, parser, reference_time, text, language, days):
        _, context = parser.parse(text, reference_time, language)

        assert context.shift is not None
        assert context.shift.days == days
        assert context.final_date == reference_time
        assert context.is_range_query is False

    @pytest.mark.integration
    @pytest.mark.parametrize("text,language,day", [
        ("last Friday", "en", 5),
        ("this Friday", "en", 12),
        ("coming Friday", "en", 12),
        ("Monday", "en", 15),
        ("Thursday", "en", 11),
        ("sexta passada", "pt", 5),
        ("el viernes pasado", "es", 5),
    ])
    def test_weekdays(self, parser, reference_time, text, language, day):
        _, context = parser.parse(text, reference_time, language)

        assert context.final_date.day == day

    @pytest.mark.integration
    def test_between_and_from_to(self, parser, reference_time):
        _, between = parser.parse("between 2pm and 4pm", reference_time, "en")
        _, from_to = parser.parse("from 9 to 11", reference_time, "en")

        assert (between.final_date.hour, between.duration) == (14, timedelta(hours=2))
        assert (from_to.final_date.hour, from_to.duration) == (9, timedelta(hours=2))


class TestPipelineLaws:
    """Properties that hold for every utterance"""

    @pytest.mark.integration
    @pytest.mark.parametrize("language,text", PROPERTY_UTTERANCES)
    def test_deterministic(self, parser, reference_time, language, text):
        """Test equal inputs give equal outputs"""
        first = parser.parse(text, reference_time, language)
        second = parser.parse(text, reference_time, language)

        assert first == second

    @pytest.mark.integration
    @pytest.mark.parametrize("language,text", PROPERTY_UTTERANCES)
    def test_tokens_ordered_and_undominated(self, parser, reference_time, language, text):
        tokens, _ = parser.parse(text, reference_time, language)

        starts = [token.span.start for token in tokens]
        assert starts == sorted(starts)
        for token in tokens:
            assert text[token.span.start:token.span.end] == token.text
            for other in tokens:
                if other is not token:
                    assert not (other.span.contains(token.span) and other.priority >= token.priority)

    @pytest.mark.integration
    @pytest.mark.parametrize("language,text", PROPERTY_UTTERANCES)
    def test_confidence_bounds(self, parser, reference_time, language, text):
        tokens, context = parser.parse(text, reference_time, language)

        assert 0.0 <= context.confidence <= 1.0
        if not tokens:
            assert context.confidence == 0.0

    @pytest.mark.integration
    @pytest.mark.parametrize("language,text", PROPERTY_UTTERANCES)
    def test_explicit_time_never_yields_range(self, parser, reference_time, language, text):
        tokens, context = parser.parse(text, reference_time, language)

        kinds = {token.kind for token in tokens}
        if kinds & {TokenKind.ABSOLUTE_TIME, TokenKind.TIME_RANGE}:
            assert context.date_range is None

    @pytest.mark.integration
    def test_reference_time_is_respected(self, parser, sao_paulo):
        """Test results move with the reference time, never the system clock"""
        _, first = parser.parse("tomorrow", datetime(2030, 1, 1, 8, 0, tzinfo=sao_paulo), "en")
        _, second = parser.parse("tomorrow", datetime(2031, 6, 1, 8, 0, tzinfo=sao_paulo), "en")

        assert first.final_date.date().isoformat() == "2030-01-02"
        assert second.final_date.date().isoformat() == "2031-06-02"


class TestParserConstruction:
    """Parser entry points and configuration wiring"""

    @pytest.mark.integration
    def test_module_level_parse(self, preferences, reference_time, sao_paulo):
        tokens, context = parse("tomorrow at 3pm", reference_time, "en", preferences)

        assert [token.kind for token in tokens] == [TokenKind.RELATIVE_DAY, TokenKind.ABSOLUTE_TIME]
        assert context.final_date == datetime(2025, 9, 12, 15, 0, tzinfo=sao_paulo)

    @pytest.mark.integration
    def test_pack_instance_accepted(self, parser, portuguese_pack, reference_time):
        tokens, _ = parser.parse("amanhã", reference_time, portuguese_pack)

        assert [token.kind for token in tokens] == [TokenKind.RELATIVE_DAY]

    @pytest.mark.integration
    def test_default_language(self, preferences, reference_time):
        parser = TemporalParser(preferences, language="es")

        tokens, _ = parser.parse("mañana", reference_time)

        assert [token.kind for token in tokens] == [TokenKind.RELATIVE_DAY]

    @pytest.mark.integration
    def test_unknown_language(self, parser, reference_time):
        with pytest.raises(ConfigurationError):
            parser.parse("tomorrow", reference_time, "fr")

    @pytest.mark.integration
    def test_from_app_config(self):
        config = AppConfig(
            language="pt",
            preferences=Preferences(timezone="America/Sao_Paulo"),
            fallback=FallbackConfig(enabled=True, prefer_dates_from="past"),
        )

        parser = TemporalParser.from_config(config)

        assert parser.default_pack.locale == "pt-BR"
        assert isinstance(parser.detector.recognizer, DateparserRecognizer)
        assert parser.detector.recognizer.prefer_dates_from == "past"

    @pytest.mark.integration
    def test_from_config_directory(self, temp_config_dir, monkeypatch):
        import os

        for key in list(os.environ):
            if key.startswith("CHRONOTALK_"):
                monkeypatch.delenv(key)

        parser = TemporalParser.from_config(ConfigManager(temp_config_dir))

        assert parser.detector.recognizer is None
        assert parser.preferences.timezone == "America/Sao_Paulo"

    @pytest.mark.integration
    def test_fallback_dates(self, preferences, reference_time, sao_paulo):
        recognizer = StubRecognizer([("March 3", datetime(2026, 3, 3), False)])
        parser = TemporalParser(preferences, recognizer)

        tokens, context = parser.parse("dentist on March 3 at 10:30", reference_time, "en")

        assert DateParts(2026, 3, 3) in [token.value for token in tokens]
        assert context.final_date == datetime(2026, 3, 3, 10, 30, tzinfo=sao_paulo)
