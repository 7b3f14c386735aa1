"""Repository for rule files on disk."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from rulematch.constants import (
    IGNORED_DIRS,
    RULE_FILE_SUFFIXES,
    RULES_DIR_SUFFIX,
    RULES_FILENAME,
)
from rulematch.rules.models import Rule
from rulematch.rules.parser import serialize_rule


class RulesRepository:
    def __init__(
        self, rules_dir: Path, ignored_dirs: Optional[Iterable[str]] = None
    ) -> None:
        self._rules_dir = rules_dir
        self._ignored_dirs = tuple(IGNORED_DIRS if ignored_dirs is None else ignored_dirs)

    def list_rule_files(self) -> list[Path]:
        if not self._rules_dir.is_dir():
            return []

        files: list[Path] = []
        for root, dir_names, file_names in os.walk(str(self._rules_dir), topdown=True):
            dir_names[:] = sorted(
                name
                for name in dir_names
                if not name.startswith(".") and name not in self._ignored_dirs
            )
            current = Path(root)
            for name in sorted(file_names):
                if self.is_rule_file(Path(name)):
                    files.append(current / name)
        return files

    @staticmethod
    def is_rule_file(path: Path) -> bool:
        if path.name == RULES_FILENAME:
            return True
        if path.name.startswith("."):
            return False
        return path.suffix.lower() in RULE_FILE_SUFFIXES

    def rule_path_for(self, name: str) -> Path:
        return self._rules_dir / f"{name}{RULES_DIR_SUFFIX}" / RULES_FILENAME

    def save_rule(self, rule: Rule, overwrite: bool = False) -> Path:
        path = self.rule_path_for(rule.name)
        if path.exists() and not overwrite:
            raise FileExistsError(f"Rule file already exists: {path}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize_rule(rule), encoding="utf-8")
        return path
