"""Tests for environment driven settings."""

import pytest
from pydantic import ValidationError

from geotagger.config import GeotaggerSettings


@pytest.fixture(autouse=True)
def no_dotenv(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = GeotaggerSettings()
    assert settings.exact_match_range == 60
    assert settings.interpolation_match_range == 240
    assert settings.altitude_reference == 0
    assert settings.max_concurrency is None
    assert settings.batch_delay == 3.0
    assert settings.verbose is False
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEOTAGGER_EXACT_MATCH_RANGE", "30")
    monkeypatch.setenv("GEOTAGGER_MAX_CONCURRENCY", "4")
    monkeypatch.setenv("GEOTAGGER_VERBOSE", "true")
    settings = GeotaggerSettings()
    assert settings.exact_match_range == 30
    assert settings.max_concurrency == 4
    assert settings.verbose is True


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("GEOTAGGER_INTERPOLATION_MATCH_RANGE=600\n")
    assert GeotaggerSettings().interpolation_match_range == 600


def test_negative_range_rejected(monkeypatch):
    monkeypatch.setenv("GEOTAGGER_EXACT_MATCH_RANGE", "-1")
    with pytest.raises(ValidationError):
        GeotaggerSettings()
