from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from log_rotator.models import DEFAULT_EXTENSIONS, DEFAULT_PATTERN, DEFAULT_RETENTION_MONTHS

ENV_PREFIX = "LOG_ROTATOR_"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_dir: Path
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    retention_months: int = DEFAULT_RETENTION_MONTHS
    dry_run: bool = False
    pattern: str = DEFAULT_PATTERN
    name_index: int = 1
    year_index: int = 2
    month_index: int = 3
    app_log_dir: Path | None = None

    def to_rotator_kwargs(self) -> dict[str, Any]:
        return {
            "extensions": self.extensions,
            "retention": self.retention_months,
            "dry_run": self.dry_run,
            "pattern": self.pattern,
            "name_index": self.name_index,
            "year_index": self.year_index,
            "month_index": self.month_index,
        }


def _env(name: str) -> str | None:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings(log_dir: str | Path | None = None) -> Settings:
    if log_dir is None:
        log_dir = _env("DIR") or Path.cwd() / "logs"
    root = Path(log_dir).expanduser()

    raw_extensions = _env("EXTENSIONS")
    if raw_extensions:
        extensions = [ext.strip() for ext in raw_extensions.split(",") if ext.strip()]
    else:
        extensions = list(DEFAULT_EXTENSIONS)

    app_log_dir = _env("APP_LOG_DIR")

    return Settings(
        log_dir=root,
        extensions=extensions or list(DEFAULT_EXTENSIONS),
        retention_months=_env_int("RETENTION_MONTHS", DEFAULT_RETENTION_MONTHS),
        dry_run=(_env("DRY_RUN") or "").lower() in _TRUTHY,
        pattern=_env("PATTERN") or DEFAULT_PATTERN,
        name_index=_env_int("NAME_INDEX", 1),
        year_index=_env_int("YEAR_INDEX", 2),
        month_index=_env_int("MONTH_INDEX", 3),
        app_log_dir=Path(app_log_dir).expanduser() if app_log_dir else None,
    )
