"""Environment-driven settings for kschema."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

_WORK_DIR_ENV = "KSCHEMA_WORK_DIR"
_DELTA_KUSTO_BIN_ENV = "KSCHEMA_DELTA_KUSTO_BIN"
_WEBHOOK_TIMEOUT_ENV = "KSCHEMA_WEBHOOK_TIMEOUT"
_REGISTRY_RETRIES_ENV = "KSCHEMA_REGISTRY_RETRIES"
_LOG_LEVEL_ENV = "KSCHEMA_LOG_LEVEL"

_DEFAULT_DELTA_KUSTO_BIN = "delta-kusto"
_DEFAULT_WEBHOOK_TIMEOUT_SECONDS = 30.0
_DEFAULT_REGISTRY_RETRIES = 3
_DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings resolved from the environment.

    Attributes:
        work_dir: Directory receiving schema files and generated job files.
        delta_kusto_bin: Executable used to apply job files.
        webhook_timeout: Timeout in seconds for target lookup requests.
        registry_retries: Retry budget for schema registry requests.
        log_level: Default logging level name.
    """

    work_dir: Path
    delta_kusto_bin: str = _DEFAULT_DELTA_KUSTO_BIN
    webhook_timeout: float = _DEFAULT_WEBHOOK_TIMEOUT_SECONDS
    registry_retries: int = _DEFAULT_REGISTRY_RETRIES
    log_level: str = _DEFAULT_LOG_LEVEL


def _default_work_dir() -> Path:
    return Path(tempfile.gettempdir()) / "kschema"


def _env_float(name: str, default: float) -> float:
    """Return a non-negative float from the environment, or the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    """Return a non-negative int from the environment, or the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(int(raw), 0)
    except ValueError:
        return default


def load_settings() -> Settings:
    """Read kschema settings from environment variables."""
    work_dir = os.getenv(_WORK_DIR_ENV)
    return Settings(
        work_dir=Path(work_dir) if work_dir else _default_work_dir(),
        delta_kusto_bin=os.getenv(_DELTA_KUSTO_BIN_ENV) or _DEFAULT_DELTA_KUSTO_BIN,
        webhook_timeout=_env_float(
            _WEBHOOK_TIMEOUT_ENV, _DEFAULT_WEBHOOK_TIMEOUT_SECONDS
        ),
        registry_retries=_env_int(_REGISTRY_RETRIES_ENV, _DEFAULT_REGISTRY_RETRIES),
        log_level=(os.getenv(_LOG_LEVEL_ENV) or _DEFAULT_LOG_LEVEL).upper(),
    )


def azure_app_credentials() -> tuple[str, str, str] | None:
    """Return (tenant_id, client_id, client_secret) when all AZURE_* variables are set."""
    tenant_id = os.getenv("AZURE_TENANT_ID")
    client_id = os.getenv("AZURE_CLIENT_ID")
    secret = os.getenv("AZURE_CLIENT_SECRET")
    if tenant_id and client_id and secret:
        return tenant_id, client_id, secret
    return None
