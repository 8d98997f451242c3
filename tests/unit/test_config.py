import pytest
from pydantic import ValidationError

from tinymonth.config import AppConfig


def test_defaults():
    config = AppConfig()

    assert config.store_backend == "json"
    assert config.data_file == "data/tinymonth-data.json"
    assert config.holiday_start_year == 2022
    assert config.holiday_end_year == 2030
    assert config.default_color == "#3b82f6"


def test_from_env_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TINYMONTH_DATA_FILE", "/tmp/other.json")
    monkeypatch.setenv("TINYMONTH_HOLIDAY_END_YEAR", "2032")
    monkeypatch.setenv("TINYMONTH_LOG_LEVEL", "debug")

    config = AppConfig.from_env()

    assert config.data_file == "/tmp/other.json"
    assert config.holiday_end_year == 2032
    assert config.log_level == "DEBUG"


def test_from_env_explicit_overrides_win(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TINYMONTH_STORE_BACKEND", "json")

    assert AppConfig.from_env(store_backend="memory").store_backend == "memory"


def test_invalid_holiday_range():
    with pytest.raises(ValidationError):
        AppConfig(holiday_start_year=2030, holiday_end_year=2022)


def test_invalid_values():
    with pytest.raises(ValidationError):
        AppConfig(log_level="loud")

    with pytest.raises(ValidationError):
        AppConfig(default_color="blue")
