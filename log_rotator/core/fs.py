from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Protocol


class FileSystem(Protocol):
    def is_dir(self, path: Path) -> bool: ...

    def is_writable(self, path: Path) -> bool: ...

    def glob(self, directory: Path, extensions: Iterable[str]) -> list[Path]: ...

    def delete(self, path: Path) -> None: ...


def build_glob_pattern(directory: Path | str, extensions: list[str]) -> str:
    if len(extensions) > 1:
        suffix = "{" + ",".join(extensions) + "}"
    else:
        suffix = extensions[0]
    return f"{Path(directory)}/*.{suffix}"


class LocalFileSystem:
    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def is_writable(self, path: Path) -> bool:
        return os.access(path, os.W_OK)

    def glob(self, directory: Path, extensions: Iterable[str]) -> list[Path]:
        # pathlib has no brace expansion: one glob per extension, in configured order.
        # Shell globs never match dotfiles with a leading "*"; Path.glob does.
        seen: set[Path] = set()
        out: list[Path] = []
        for ext in extensions:
            for file_path in sorted(Path(directory).glob(f"*.{ext}")):
                if file_path.name.startswith("."):
                    continue
                if file_path in seen or not file_path.is_file():
                    continue
                seen.add(file_path)
                out.append(file_path)
        return out

    def delete(self, path: Path) -> None:
        Path(path).unlink()
