from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PATTERN = r"^(?P<name>[a-zA-Z0-9\-_.]+)-(?P<year>(?:19|20)\d{2})-(?P<month>0[1-9]|1[0-2])"
DEFAULT_EXTENSIONS = ["log"]
DEFAULT_RETENTION_MONTHS = 6

GROUP_ROLES = ("name", "year", "month")


class EntryOutcome(str, Enum):
    RETAINED = "RETAINED"
    DELETED = "DELETED"
    WOULD_DELETE = "WOULD_DELETE"
    DELETE_FAILED = "DELETE_FAILED"


def normalize_extensions(value: Any) -> list[str]:
    """Accept one extension or an ordered collection, return a de-duplicated list."""
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        value = [value]

    out: list[str] = []
    for raw in value:
        ext = str(raw).strip()
        if ext.startswith("."):
            ext = ext[1:]
        if not ext:
            raise ValueError("extensions must not contain empty values")
        if ext not in out:
            out.append(ext)
    return out


def clamp_retention(value: Any) -> int:
    try:
        months = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"retention must be an integer number of months, got {value!r}") from exc
    return max(months, 1)


class RotationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    directory: Path
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    pattern: str = DEFAULT_PATTERN
    name_index: int = 1
    year_index: int = 2
    month_index: int = 3
    retention: int = DEFAULT_RETENTION_MONTHS
    dry_run: bool = False

    @field_validator("extensions", mode="before")
    @classmethod
    def _coerce_extensions(cls, value: Any) -> list[str]:
        extensions = normalize_extensions(value)
        if not extensions:
            raise ValueError("at least one extension is required")
        return extensions

    @field_validator("retention", mode="before")
    @classmethod
    def _clamp_retention(cls, value: Any) -> int:
        return clamp_retention(value)

    @model_validator(mode="after")
    def _check_pattern(self) -> RotationConfig:
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise ValueError(f"pattern does not compile: {exc}") from exc

        if compiled.groups != 3:
            raise ValueError(f"pattern must contain exactly 3 capture groups, found {compiled.groups}")

        if not self.uses_named_groups:
            indices = sorted((self.name_index, self.year_index, self.month_index))
            if indices != [1, 2, 3]:
                raise ValueError(
                    "name/year/month indices must reference capture groups 1, 2 and 3 exactly once, "
                    f"got name={self.name_index} year={self.year_index} month={self.month_index}"
                )
        return self

    @property
    def uses_named_groups(self) -> bool:
        named = re.compile(self.pattern).groupindex
        return all(role in named for role in GROUP_ROLES)

    def group_keys(self) -> dict[str, str | int]:
        """Map each role to the capture group that holds it."""
        if self.uses_named_groups:
            return {role: role for role in GROUP_ROLES}
        return {"name": self.name_index, "year": self.year_index, "month": self.month_index}


class DiscoveredEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    path: Path
    file_name: str

    @property
    def effective_date(self) -> datetime:
        return datetime(self.year, self.month, 1)


LogGroup = dict[str, list[DiscoveredEntry]]


class SkippedFile(BaseModel):
    path: Path
    file_name: str
    reason: str


class DiscoveryResult(BaseModel):
    glob_pattern: str
    effective_pattern: str
    groups: LogGroup = Field(default_factory=dict)
    skipped: list[SkippedFile] = Field(default_factory=list)
    candidates: int = 0

    def entries(self) -> Iterator[DiscoveredEntry]:
        for name in self.groups:
            yield from self.groups[name]


class EntryResult(BaseModel):
    entry: DiscoveredEntry
    outcome: EntryOutcome
    error: str = ""


class RotationResult(BaseModel):
    cutoff: datetime
    retention: int
    dry_run: bool
    ready: bool = True
    discovery: DiscoveryResult | None = None
    results: list[EntryResult] = Field(default_factory=list)

    def by_outcome(self, outcome: EntryOutcome) -> list[DiscoveredEntry]:
        return [item.entry for item in self.results if item.outcome == outcome]

    def counts(self) -> dict[str, int]:
        counts = {outcome.value: 0 for outcome in EntryOutcome}
        for item in self.results:
            counts[item.outcome.value] += 1
        counts["SKIPPED"] = len(self.discovery.skipped) if self.discovery else 0
        return counts
