from pathlib import Path
from typing import Optional


class RuleMatchError(Exception):
    """Base user-facing application error."""


class RuleLoadError(RuleMatchError):
    kind = "load"

    def __init__(
        self,
        source: str,
        message: str,
        rule_name: Optional[str] = None,
        rule_index: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        self.source = source
        self.message = message
        self.rule_name = rule_name
        self.rule_index = rule_index
        self.line = line
        super().__init__(self._render())

    @property
    def location(self) -> str:
        if self.line is None:
            return self.source
        return f"{self.source}:{self.line}"

    @property
    def subject(self) -> str:
        if self.rule_name:
            return f"rule '{self.rule_name}'"
        if self.rule_index is not None:
            return f"rule #{self.rule_index}"
        return "source"

    def _render(self) -> str:
        return f"{self.location}: {self.subject}: {self.message}"

    def as_dict(self) -> dict:
        return {
            "kind": self.kind,
            "source": self.source,
            "line": self.line,
            "rule": self.rule_name,
            "rule_index": self.rule_index,
            "message": self.message,
        }


class ParseError(RuleLoadError):
    kind = "parse"


class SchemaError(RuleLoadError):
    kind = "schema"

    def __init__(
        self,
        source: str,
        field: str,
        detail: str,
        rule_name: Optional[str] = None,
        rule_index: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        self.field = field
        self.detail = detail
        super().__init__(
            source=source,
            message=f"invalid field '{field}' ({detail})",
            rule_name=rule_name,
            rule_index=rule_index,
            line=line,
        )

    def as_dict(self) -> dict:
        payload = super().as_dict()
        payload["field"] = self.field
        return payload


class PatternError(RuleLoadError):
    kind = "pattern"

    def __init__(
        self,
        source: str,
        filter_index: int,
        pattern: str,
        detail: str,
        rule_name: Optional[str] = None,
        rule_index: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        self.filter_index = filter_index
        self.pattern = pattern
        self.detail = detail
        super().__init__(
            source=source,
            message=f"filter {filter_index} has invalid pattern {pattern!r} ({detail})",
            rule_name=rule_name,
            rule_index=rule_index,
            line=line,
        )

    def as_dict(self) -> dict:
        payload = super().as_dict()
        payload["filter_index"] = self.filter_index
        payload["pattern"] = self.pattern
        return payload


class EvaluationTimeout(RuleMatchError):
    def __init__(
        self,
        rule_name: str,
        filter_index: int,
        pattern: str,
        path: str,
        timeout: float,
    ) -> None:
        self.rule_name = rule_name
        self.filter_index = filter_index
        self.pattern = pattern
        self.path = path
        self.timeout = timeout
        super().__init__(
            f"rule '{rule_name}' filter {filter_index} timed out after "
            f"{timeout:g}s on {path}; treated as no match"
        )

    def as_dict(self) -> dict:
        return {
            "kind": "timeout",
            "rule": self.rule_name,
            "filter_index": self.filter_index,
            "pattern": self.pattern,
            "path": self.path,
            "timeout": self.timeout,
        }


class ContextReadError(RuleMatchError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot read file ({detail}): {path}")


class ConfigFileError(RuleMatchError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidJsonFormatError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")
