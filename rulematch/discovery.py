import os
from pathlib import Path
from typing import Iterable, Optional

from rulematch.constants import IGNORED_DIRS


class TargetDiscovery:
    def __init__(self, ignored_dirs: Optional[Iterable[str]] = None) -> None:
        self.ignored_dirs = tuple(IGNORED_DIRS if ignored_dirs is None else ignored_dirs)

    def discover_files(self, paths: Iterable[Path]) -> list[Path]:
        files: list[Path] = []
        seen: set[Path] = set()
        for path in paths:
            candidates = self.walk(path) if path.is_dir() else [path]
            for candidate in candidates:
                key = candidate.resolve()
                if key in seen:
                    continue
                seen.add(key)
                files.append(candidate)
        return files

    def walk(self, root: Path) -> list[Path]:
        files: list[Path] = []
        for current, dir_names, file_names in os.walk(str(root), topdown=True):
            dir_names[:] = sorted(
                name
                for name in dir_names
                if not name.startswith(".") and name not in self.ignored_dirs
            )
            files.extend(Path(current) / name for name in sorted(file_names))
        return files
