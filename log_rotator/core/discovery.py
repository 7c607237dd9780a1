from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from log_rotator.core.fs import FileSystem, build_glob_pattern
from log_rotator.models import DiscoveredEntry, DiscoveryResult, RotationConfig, SkippedFile

_logger = logging.getLogger("log_rotator.discovery")


def build_effective_pattern(pattern: str, extensions: list[str]) -> str:
    alternation = "|".join(re.escape(ext) for ext in extensions)
    return f"(?:{pattern})\\.(?:{alternation})"


@lru_cache(maxsize=32)
def compile_effective_pattern(pattern: str, extensions: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(build_effective_pattern(pattern, list(extensions)))


def _parse_entry(config: RotationConfig, compiled: re.Pattern[str], file_path: Path) -> DiscoveredEntry | str:
    """Return a DiscoveredEntry, or the reason the file name was rejected."""
    match = compiled.fullmatch(file_path.name)
    if match is None:
        return "file name does not match pattern"

    # Whole match plus exactly three captures.
    if len(match.groups()) != 3:
        return f"expected 3 capture groups, got {len(match.groups())}"

    keys = config.group_keys()
    values = {role: match.group(key) for role, key in keys.items()}
    missing = [role for role, value in values.items() if not value]
    if missing:
        return f"missing {', '.join(missing)} capture"

    try:
        year = int(values["year"])
        month = int(values["month"])
    except ValueError:
        return f"non-numeric date segment year={values['year']!r} month={values['month']!r}"

    if not 1 <= year <= 9999:
        return f"year out of range: {year}"
    if not 1 <= month <= 12:
        return f"month out of range: {month}"

    return DiscoveredEntry(
        name=values["name"],
        year=year,
        month=month,
        path=file_path,
        file_name=file_path.name,
    )


def discover(config: RotationConfig, fs: FileSystem, logger: logging.Logger | None = None) -> DiscoveryResult:
    log = logger or _logger
    compiled = compile_effective_pattern(config.pattern, tuple(config.extensions))
    result = DiscoveryResult(
        glob_pattern=build_glob_pattern(config.directory, config.extensions),
        effective_pattern=compiled.pattern,
    )

    candidates = fs.glob(config.directory, config.extensions)
    result.candidates = len(candidates)
    if not candidates:
        log.warning(
            "No logs were found matching the pattern or extension. Pattern: %r Extensions: %s",
            compiled.pattern,
            ", ".join(f".{ext}" for ext in config.extensions),
        )
        return result

    for file_path in candidates:
        parsed = _parse_entry(config, compiled, file_path)
        if isinstance(parsed, str):
            log.warning("Skipping log without a matching file name (%s): %s", file_path.name, parsed)
            result.skipped.append(SkippedFile(path=file_path, file_name=file_path.name, reason=parsed))
            continue
        result.groups.setdefault(parsed.name, []).append(parsed)

    log.debug(
        "Discovered %s logs in %s groups, skipped %s",
        sum(len(items) for items in result.groups.values()),
        len(result.groups),
        len(result.skipped),
    )
    return result
