from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest


class FakeFileSystem:
    def __init__(
        self,
        directory: Path,
        names: Iterable[str] = (),
        *,
        exists: bool = True,
        writable: bool = True,
        failing: Iterable[str] = (),
    ) -> None:
        self.directory = directory
        self.files = [directory / name for name in names]
        self.exists = exists
        self.writable = writable
        self.failing = {directory / name for name in failing}
        self.delete_calls: list[Path] = []

    def is_dir(self, path: Path) -> bool:
        return self.exists and Path(path) == self.directory

    def is_writable(self, path: Path) -> bool:
        return self.writable

    def glob(self, directory: Path, extensions: Iterable[str]) -> list[Path]:
        out: list[Path] = []
        for ext in extensions:
            for file_path in sorted(self.files):
                if file_path.name.startswith("."):
                    continue
                if file_path.parent == Path(directory) and file_path.name.endswith(f".{ext}") and file_path not in out:
                    out.append(file_path)
        return out

    def delete(self, path: Path) -> None:
        path = Path(path)
        self.delete_calls.append(path)
        if path in self.failing:
            raise PermissionError(13, "Permission denied", str(path))
        if path not in self.files:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        self.files.remove(path)

    def names(self) -> list[str]:
        return sorted(path.name for path in self.files)


@pytest.fixture
def log_dir() -> Path:
    return Path("/var/log/app")


@pytest.fixture
def make_fs(log_dir: Path):
    def _make(*names: str, **kwargs) -> FakeFileSystem:
        return FakeFileSystem(log_dir, names, **kwargs)

    return _make
