"""
Unit tests for the dateparser-backed fallback recognizer.

dateparser's search is replaced with canned results so offsets and
settings can be checked deterministically.
"""

from datetime import datetime

import pytest

from chronotalk.processors import recognizer as recognizer_module
from chronotalk.processors.recognizer import DateparserRecognizer, RecognizedDate, build_recognizer


class TestDateparserRecognizer:
    """Test suite for DateparserRecognizer"""

    @pytest.fixture
    def captured(self, monkeypatch):
        """Replace search_dates and record its arguments"""
        calls = []
        results = []

        def fake_search_dates(text, languages=None, settings=None):
            calls.append({"text": text, "languages": languages, "settings": settings})
            return list(results)

        monkeypatch.setattr(recognizer_module, "search_dates", fake_search_dates)
        return calls, results

    @pytest.mark.unit
    def test_blank_text_skips_search(self, captured, reference_time):
        calls, _ = captured

        assert DateparserRecognizer().recognize("   ", reference_time) == []
        assert calls == []

    @pytest.mark.unit
    def test_reference_time_is_relative_base(self, captured, reference_time):
        """Test dateparser resolves against the supplied reference time"""
        calls, _ = captured

        DateparserRecognizer(prefer_dates_from="past").recognize("dentist", reference_time, ("pt",))
        settings = calls[0]["settings"]

        assert settings["RELATIVE_BASE"] == datetime(2025, 9, 11, 10, 0)
        assert settings["PREFER_DATES_FROM"] == "past"
        assert calls[0]["languages"] == ["pt"]

    @pytest.mark.unit
    def test_no_languages_lets_dateparser_detect(self, captured, reference_time):
        calls, _ = captured

        DateparserRecognizer().recognize("dentist", reference_time)

        assert calls[0]["languages"] is None

    @pytest.mark.unit
    def test_offsets_and_time_hints(self, captured, reference_time):
        """Test matches are located left to right and clock hints detected"""
        _, results = captured
        results.extend([
            ("March 3", datetime(2026, 3, 3)),
            ("March 3 at 10:30", datetime(2026, 3, 3, 10, 30)),
        ])
        text = "March 3 or March 3 at 10:30"

        recognized = DateparserRecognizer().recognize(text, reference_time)

        assert recognized == [
            RecognizedDate(0, 7, datetime(2026, 3, 3), False),
            RecognizedDate(11, 27, datetime(2026, 3, 3, 10, 30), True),
        ]

    @pytest.mark.unit
    def test_unlocatable_match_skipped(self, captured, reference_time):
        _, results = captured
        results.append(("next tuesday", datetime(2025, 9, 16)))

        assert DateparserRecognizer().recognize("meeting", reference_time) == []

    @pytest.mark.unit
    def test_build_recognizer(self):
        assert build_recognizer(False) is None
        recognizer = build_recognizer(True, "current_period")
        assert isinstance(recognizer, DateparserRecognizer)
        assert recognizer.prefer_dates_from == "current_period"
