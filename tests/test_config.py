from __future__ import annotations

from pathlib import Path

import pytest

from log_rotator.config import load_settings
from log_rotator.models import DEFAULT_PATTERN
from log_rotator.rotator import LogRotator

_ENV_NAMES = [
    "DIR",
    "EXTENSIONS",
    "RETENTION_MONTHS",
    "DRY_RUN",
    "PATTERN",
    "NAME_INDEX",
    "YEAR_INDEX",
    "MONTH_INDEX",
    "APP_LOG_DIR",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(f"LOG_ROTATOR_{name}", raising=False)


def test_defaults_without_environment(tmp_path: Path):
    settings = load_settings(tmp_path)

    assert settings.log_dir == tmp_path
    assert settings.extensions == ["log"]
    assert settings.retention_months == 6
    assert settings.dry_run is False
    assert settings.pattern == DEFAULT_PATTERN
    assert settings.app_log_dir is None


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("LOG_ROTATOR_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_ROTATOR_EXTENSIONS", "log, txt,,csv")
    monkeypatch.setenv("LOG_ROTATOR_RETENTION_MONTHS", "12")
    monkeypatch.setenv("LOG_ROTATOR_DRY_RUN", "TRUE")

    settings = load_settings()

    assert settings.log_dir == tmp_path
    assert settings.extensions == ["log", "txt", "csv"]
    assert settings.retention_months == 12
    assert settings.dry_run is True


def test_malformed_integers_fall_back_to_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("LOG_ROTATOR_RETENTION_MONTHS", "six")
    monkeypatch.setenv("LOG_ROTATOR_YEAR_INDEX", "two")

    settings = load_settings(tmp_path)

    assert settings.retention_months == 6
    assert settings.year_index == 2


def test_settings_feed_rotator(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("LOG_ROTATOR_PATTERN", r"^((?:19|20)\d{2})_(\d{2})_([a-z]+)")
    monkeypatch.setenv("LOG_ROTATOR_NAME_INDEX", "3")
    monkeypatch.setenv("LOG_ROTATOR_YEAR_INDEX", "1")
    monkeypatch.setenv("LOG_ROTATOR_MONTH_INDEX", "2")
    monkeypatch.setenv("LOG_ROTATOR_RETENTION_MONTHS", "0")

    settings = load_settings(tmp_path)
    rotator = LogRotator(settings.log_dir, **settings.to_rotator_kwargs())

    assert rotator.ready is True
    assert rotator.get_retention() == 1
    assert rotator.get_indices() == {"name": 3, "year": 1, "month": 2}
