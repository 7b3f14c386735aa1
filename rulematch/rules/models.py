"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FilterKind(str, Enum):
    FILE_EXTENSION = "file_extension"
    CONTENT = "content"


class ActionKind(str, Enum):
    SUGGEST = "suggest"
    ENFORCE = "enforce"
    MESSAGE = "message"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RuleFilter:
    kind: FilterKind
    pattern: str
    compiled: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RuleAction:
    kind: ActionKind
    message: str


@dataclass(frozen=True)
class RuleExample:
    """Documentation-only input/output pair; never evaluated."""

    input: str
    output: str


@dataclass(frozen=True)
class RuleMetadata:
    priority: Priority = Priority.MEDIUM
    version: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Rule:
    name: str
    description: str
    filters: tuple[RuleFilter, ...]
    actions: tuple[RuleAction, ...]
    examples: tuple[RuleExample, ...] = ()
    metadata: RuleMetadata = field(default_factory=RuleMetadata)
    source: str = field(default="", compare=False)
    index: int = field(default=0, compare=False)

    @property
    def matches_everything(self) -> bool:
        return not self.filters
