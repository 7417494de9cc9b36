"""
Pytest configuration and shared fixtures for ChronoTalk testing.

Every test resolves against the same fixed reference time so results never
depend on the system clock.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
import yaml
from dateutil import tz

from chronotalk.core.config_manager import Preferences
from chronotalk.intelligence.temporal_interpreter import TemporalInterpreter
from chronotalk.language import get_language_pack
from chronotalk.parser import TemporalParser

from tests.fixtures.sample_data import REFERENCE_TIMEZONE, SAMPLE_CONFIGURATION, StubRecognizer


@pytest.fixture(scope="session")
def sao_paulo():
    """Timezone used by the sample scenarios"""
    return tz.gettz(REFERENCE_TIMEZONE)


@pytest.fixture
def reference_time(sao_paulo):
    """Thursday 2025-09-11 10:00"""
    return datetime(2025, 9, 11, 10, 0, tzinfo=sao_paulo)


@pytest.fixture
def preferences():
    """Monday-start calendar in America/Sao_Paulo"""
    return Preferences(timezone=REFERENCE_TIMEZONE, start_of_week=2)


@pytest.fixture(scope="session")
def english_pack():
    return get_language_pack("en")


@pytest.fixture(scope="session")
def portuguese_pack():
    return get_language_pack("pt-BR")


@pytest.fixture(scope="session")
def spanish_pack():
    return get_language_pack("es")


@pytest.fixture
def interpreter(preferences):
    return TemporalInterpreter(preferences)


@pytest.fixture
def parser(preferences):
    """Parser without a fallback recognizer"""
    return TemporalParser(preferences)


@pytest.fixture
def stub_recognizer():
    return StubRecognizer()


@pytest.fixture
def temp_config_dir():
    """Temporary directory holding a default_config.yaml"""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_dir = Path(temp_dir) / "config"
        config_dir.mkdir()
        with open(config_dir / "default_config.yaml", "w", encoding="utf-8") as f:
            yaml.safe_dump(SAMPLE_CONFIGURATION, f)
        yield config_dir


# Custom pytest markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
