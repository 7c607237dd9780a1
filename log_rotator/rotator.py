from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from log_rotator.core import discovery, retention
from log_rotator.core.fs import FileSystem, LocalFileSystem, build_glob_pattern
from log_rotator.models import DiscoveryResult, RotationConfig, RotationResult


class LogRotator:
    """Deletes ``name-YYYY-MM.ext`` logs older than a whole-month retention window.

    Construction never raises for an unusable directory: the problem is logged
    and ``ready`` stays False. ``rotate()`` checks the directory again before
    each pass, so a directory that appears later is picked up.
    """

    def __init__(
        self,
        directory: str | Path,
        *,
        fs: FileSystem | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] | None = None,
        **settings: Any,
    ) -> None:
        self.logger = logger or logging.getLogger("log_rotator.rotator")
        self.fs = fs or LocalFileSystem()
        self.clock = clock or datetime.now
        self._config = RotationConfig(directory=Path(directory), **settings)
        self.ready = self._check_directory()

    @property
    def config(self) -> RotationConfig:
        return self._config

    @property
    def directory(self) -> Path:
        return self._config.directory

    def _check_directory(self) -> bool:
        directory = self._config.directory
        if not self.fs.is_dir(directory):
            self.logger.error("The log directory (%s) does not exist. Unable to rotate logs.", directory)
            return False
        if not self.fs.is_writable(directory):
            self.logger.error("The log directory (%s) is not writable. Unable to rotate logs.", directory)
            return False
        return True

    def _update(self, **changes: Any) -> None:
        data = self._config.model_dump()
        data.update(changes)
        self._config = RotationConfig.model_validate(data)

    def set_extensions(self, extensions: str | Iterable[str]) -> None:
        self._update(extensions=extensions)

    def set_extension(self, extension: str) -> None:
        self.set_extensions(extension)

    def get_extensions(self) -> list[str]:
        return list(self._config.extensions)

    def set_retention(self, months: int) -> None:
        self._update(retention=months)

    def get_retention(self) -> int:
        return self._config.retention

    def set_dry_run(self, value: bool) -> None:
        self._update(dry_run=bool(value))

    def dry_run(self) -> None:
        self.set_dry_run(True)

    def get_dry_run(self) -> bool:
        return self._config.dry_run

    def set_pattern(
        self,
        pattern: str,
        name_index: int | None = None,
        year_index: int | None = None,
        month_index: int | None = None,
    ) -> None:
        changes: dict[str, Any] = {"pattern": pattern}
        if name_index is not None:
            changes["name_index"] = name_index
        if year_index is not None:
            changes["year_index"] = year_index
        if month_index is not None:
            changes["month_index"] = month_index
        self._update(**changes)

    def get_pattern(self) -> str:
        return self._config.pattern

    def get_indices(self) -> dict[str, int]:
        return {
            "name": self._config.name_index,
            "year": self._config.year_index,
            "month": self._config.month_index,
        }

    def get_effective_pattern(self) -> str:
        return discovery.compile_effective_pattern(self._config.pattern, tuple(self._config.extensions)).pattern

    def get_glob_pattern(self) -> str:
        return build_glob_pattern(self._config.directory, self._config.extensions)

    def discover(self) -> DiscoveryResult:
        return discovery.discover(self._config, self.fs, logger=self.logger)

    def rotate(self, now: datetime | None = None) -> RotationResult:
        config = self._config
        moment = now or self.clock()

        inert = RotationResult(
            cutoff=retention.retention_cutoff(config.retention, moment),
            retention=config.retention,
            dry_run=config.dry_run,
            ready=False,
        )

        self.ready = self._check_directory()
        if not self.ready:
            return inert

        try:
            found = discovery.discover(config, self.fs, logger=self.logger)
        except OSError:
            self.logger.exception("Unable to list logs in %s", config.directory)
            return inert

        result = retention.rotate(config, found, self.fs, now=moment, logger=self.logger)

        counts = result.counts()
        self.logger.info(
            "Rotation finished for %s: cutoff=%s deleted=%s would_delete=%s failed=%s retained=%s skipped=%s",
            config.directory,
            result.cutoff.date(),
            counts["DELETED"],
            counts["WOULD_DELETE"],
            counts["DELETE_FAILED"],
            counts["RETAINED"],
            counts["SKIPPED"],
        )
        return result
