from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

from rulematch.errors import ContextReadError, EvaluationTimeout, RuleLoadError
from rulematch.rules.models import ActionKind, Priority


@dataclass(frozen=True)
class ResolvedAction:
    kind: ActionKind
    message: str
    rule_name: str
    priority: Priority = Priority.MEDIUM

    def as_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "rule": self.rule_name,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class MatchResult:
    rule_name: str
    matched: bool
    actions: tuple[ResolvedAction, ...] = ()
    warnings: tuple[EvaluationTimeout, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule_name,
            "matched": self.matched,
            "actions": [action.as_dict() for action in self.actions],
            "warnings": [warning.as_dict() for warning in self.warnings],
        }


@dataclass(frozen=True)
class FileReport:
    path: str
    results: tuple[MatchResult, ...] = ()
    truncated: bool = False
    binary: bool = False
    error: Optional[ContextReadError] = None

    @property
    def matched(self) -> list[MatchResult]:
        return [result for result in self.results if result.matched]

    @property
    def actions(self) -> list[ResolvedAction]:
        return [action for result in self.matched for action in result.actions]

    @property
    def warnings(self) -> list[EvaluationTimeout]:
        return [warning for result in self.results for warning in result.warnings]

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "truncated": self.truncated,
            "binary": self.binary,
            "error": str(self.error) if self.error is not None else None,
            "matched": [result.as_dict() for result in self.matched],
            "warnings": [warning.as_dict() for warning in self.warnings],
        }


@dataclass
class CheckReport:
    files: list[FileReport]
    rule_count: int = 0
    load_errors: list[RuleLoadError] = field(default_factory=list)

    def actions(self) -> list[tuple[str, ResolvedAction]]:
        return [(item.path, action) for item in self.files for action in item.actions]

    def warnings(self) -> list[EvaluationTimeout]:
        return [warning for item in self.files for warning in item.warnings]

    def read_errors(self) -> list[ContextReadError]:
        return [item.error for item in self.files if item.error is not None]

    @property
    def has_enforce(self) -> bool:
        return any(action.kind == ActionKind.ENFORCE for _, action in self.actions())

    def summary(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in ActionKind}
        counts.update(Counter(action.kind.value for _, action in self.actions()))
        counts["files"] = len(self.files)
        counts["rules"] = self.rule_count
        counts["matches"] = sum(len(item.matched) for item in self.files)
        counts["warnings"] = len(self.warnings())
        counts["errors"] = len(self.load_errors) + len(self.read_errors())
        return counts

    def as_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "files": [item.as_dict() for item in self.files],
            "load_errors": [error.as_dict() for error in self.load_errors],
        }
