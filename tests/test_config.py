from pathlib import Path

import pytest

from kschema.core.config import load_settings

_VARS = (
    "KSCHEMA_WORK_DIR",
    "KSCHEMA_DELTA_KUSTO_BIN",
    "KSCHEMA_WEBHOOK_TIMEOUT",
    "KSCHEMA_REGISTRY_RETRIES",
    "KSCHEMA_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults():
    settings = load_settings()

    assert settings.work_dir.name == "kschema"
    assert settings.delta_kusto_bin == "delta-kusto"
    assert settings.webhook_timeout == 30.0
    assert settings.registry_retries == 3
    assert settings.log_level == "WARNING"


def test_load_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("KSCHEMA_WORK_DIR", str(tmp_path))
    monkeypatch.setenv("KSCHEMA_DELTA_KUSTO_BIN", "/opt/delta-kusto")
    monkeypatch.setenv("KSCHEMA_WEBHOOK_TIMEOUT", "2.5")
    monkeypatch.setenv("KSCHEMA_REGISTRY_RETRIES", "7")
    monkeypatch.setenv("KSCHEMA_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.work_dir == Path(tmp_path)
    assert settings.delta_kusto_bin == "/opt/delta-kusto"
    assert settings.webhook_timeout == 2.5
    assert settings.registry_retries == 7
    assert settings.log_level == "DEBUG"


def test_load_settings_falls_back_on_invalid_numbers(monkeypatch):
    monkeypatch.setenv("KSCHEMA_WEBHOOK_TIMEOUT", "soon")
    monkeypatch.setenv("KSCHEMA_REGISTRY_RETRIES", "-4")

    settings = load_settings()

    assert settings.webhook_timeout == 30.0
    assert settings.registry_retries == 0
