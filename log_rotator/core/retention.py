from __future__ import annotations

import logging
from datetime import datetime

from log_rotator.core.fs import FileSystem
from log_rotator.models import (
    DiscoveredEntry,
    DiscoveryResult,
    EntryOutcome,
    EntryResult,
    RotationConfig,
    RotationResult,
)

_logger = logging.getLogger("log_rotator.retention")


def subtract_months(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) - months
    if total < 12:
        # Earlier than year 1: nothing can be older.
        return datetime.min
    return moment.replace(year=total // 12, month=total % 12 + 1)


def retention_cutoff(retention: int, now: datetime | None = None) -> datetime:
    """First day of the current month at midnight, minus ``retention`` whole months."""
    current = now or datetime.now()
    month_start = current.replace(day=1, hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    return subtract_months(month_start, retention)


def is_expired(entry: DiscoveredEntry, cutoff: datetime) -> bool:
    return entry.effective_date < cutoff


def _message_prefix(config: RotationConfig) -> str:
    prefix = "DRY RUN: " if config.dry_run else ""
    return f"{prefix}Retention set to {config.retention} month(s). "


def _delete(config: RotationConfig, entry: DiscoveredEntry, fs: FileSystem, log: logging.Logger) -> EntryResult:
    prefix = _message_prefix(config)

    if config.dry_run:
        log.info("%sWould delete %s (%s)", prefix, entry.file_name, entry.path)
        return EntryResult(entry=entry, outcome=EntryOutcome.WOULD_DELETE)

    try:
        fs.delete(entry.path)
    except OSError as exc:
        log.error("%sFailed to delete %s (%s): %s", prefix, entry.file_name, entry.path, exc)
        return EntryResult(entry=entry, outcome=EntryOutcome.DELETE_FAILED, error=str(exc))

    log.info("%sDeleted %s (%s)", prefix, entry.file_name, entry.path)
    return EntryResult(entry=entry, outcome=EntryOutcome.DELETED)


def rotate(
    config: RotationConfig,
    discovery: DiscoveryResult,
    fs: FileSystem,
    now: datetime | None = None,
    logger: logging.Logger | None = None,
) -> RotationResult:
    log = logger or _logger
    cutoff = retention_cutoff(config.retention, now)
    result = RotationResult(
        cutoff=cutoff,
        retention=config.retention,
        dry_run=config.dry_run,
        discovery=discovery,
    )

    for entry in discovery.entries():
        if not is_expired(entry, cutoff):
            log.debug("Retaining %s (%04d-%02d is not before %s)", entry.file_name, entry.year, entry.month, cutoff.date())
            result.results.append(EntryResult(entry=entry, outcome=EntryOutcome.RETAINED))
            continue
        result.results.append(_delete(config, entry, fs, log))

    return result
