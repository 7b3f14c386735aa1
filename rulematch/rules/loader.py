"""Load and validate rule definitions with per-rule error collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

import regex

from rulematch.errors import PatternError, RuleLoadError, SchemaError
from rulematch.rules.models import (
    ActionKind,
    FilterKind,
    Priority,
    Rule,
    RuleAction,
    RuleExample,
    RuleFilter,
    RuleMetadata,
)
from rulematch.rules.parser import RawRule, YAML_FORMAT, detect_format, parse_source
from rulematch.rules.repository import RulesRepository
from rulematch.rules.schema import error_path, first_schema_error, format_field

logger = logging.getLogger(__name__)

_ALIASED_SECTIONS = ("filters", "actions")


@dataclass
class LoadResult:
    rules: list[Rule] = field(default_factory=list)
    errors: list[RuleLoadError] = field(default_factory=list)

    def is_valid(self) -> bool:
        return not self.errors

    def get(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None


class RuleLoader:
    """Turns rule sources into immutable ``Rule`` values.

    A broken rule is rejected as a whole and reported; it never prevents the
    other rules of the same batch from loading. Rule names must be unique
    across everything loaded by a single ``load_*`` call.
    """

    def __init__(self, ignored_dirs: Optional[Iterable[str]] = None) -> None:
        self.ignored_dirs = tuple(ignored_dirs) if ignored_dirs is not None else None

    def load_text(
        self, text: str, source: str = "<text>", fmt: str = YAML_FORMAT
    ) -> LoadResult:
        result = LoadResult()
        self._load_into(result, {}, text, source, fmt)
        return result

    def load_file(self, path: Path) -> LoadResult:
        return self.load_paths([path])

    def load_paths(self, paths: Iterable[Path]) -> LoadResult:
        result = LoadResult()
        seen: dict[str, str] = {}
        for path in self._expand_paths(paths, result):
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                error = RuleLoadError(str(path), f"cannot read rule file ({exc})")
                logger.warning("%s", error)
                result.errors.append(error)
                continue
            self._load_into(result, seen, text, str(path), detect_format(path))
        return result

    def _expand_paths(self, paths: Iterable[Path], result: LoadResult) -> list[Path]:
        files: list[Path] = []
        for path in paths:
            if path.is_dir():
                repository = RulesRepository(path, ignored_dirs=self.ignored_dirs)
                files.extend(repository.list_rule_files())
            elif path.is_file():
                files.append(path)
            else:
                error = RuleLoadError(str(path), "rule source does not exist")
                logger.warning("%s", error)
                result.errors.append(error)
        return files

    def _load_into(
        self,
        result: LoadResult,
        seen: dict[str, str],
        text: str,
        source: str,
        fmt: str,
    ) -> None:
        parsed = parse_source(text, source, fmt)
        for error in parsed.errors:
            logger.warning("%s", error)
        result.errors.extend(parsed.errors)

        for raw in parsed.rules:
            try:
                rule = build_rule(raw, source)
                if rule.name in seen:
                    raise SchemaError(
                        source,
                        field="name",
                        detail=f"duplicate rule name, first defined in {seen[rule.name]}",
                        rule_name=rule.name,
                        rule_index=raw.index,
                        line=raw.line_for(("name",)),
                    )
            except RuleLoadError as exc:
                logger.warning("Rejected %s", exc)
                result.errors.append(exc)
                continue
            seen[rule.name] = source
            result.rules.append(rule)
            logger.debug("Loaded rule %s from %s", rule.name, source)


def build_rule(raw: RawRule, source: str) -> Rule:
    """Validate one raw rule document; raise a ``RuleLoadError`` if unusable."""
    data = raw.data
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name.strip():
        name = None

    normalized = _normalize_aliases(data, raw, source, name)
    error = first_schema_error(normalized)
    if error is not None:
        path = error_path(error)
        raise SchemaError(
            source,
            field=format_field(path),
            detail=error.message,
            rule_name=name,
            rule_index=raw.index,
            line=raw.line_for(path),
        )

    filters: list[RuleFilter] = []
    for index, item in enumerate(normalized["filters"]):
        pattern = item["pattern"]
        try:
            compiled = regex.compile(pattern)
        except regex.error as exc:
            raise PatternError(
                source,
                filter_index=index,
                pattern=pattern,
                detail=str(exc),
                rule_name=name,
                rule_index=raw.index,
                line=raw.line_for(("filters", index, "pattern")),
            ) from exc
        filters.append(
            RuleFilter(kind=FilterKind(item["kind"]), pattern=pattern, compiled=compiled)
        )

    actions = tuple(
        RuleAction(kind=ActionKind(item["kind"]), message=item["message"])
        for item in normalized["actions"]
    )
    examples = tuple(
        RuleExample(
            input=str(item.get("input", "")),
            output=str(item.get("output", "")),
        )
        for item in normalized.get("examples", [])
    )

    raw_metadata = normalized.get("metadata", {})
    version = raw_metadata.get("version")
    metadata = RuleMetadata(
        priority=Priority(raw_metadata.get("priority", Priority.MEDIUM.value)),
        version="" if version is None else str(version),
        tags=frozenset(raw_metadata.get("tags", [])),
    )

    return Rule(
        name=normalized["name"],
        description=normalized.get("description", ""),
        filters=tuple(filters),
        actions=actions,
        examples=examples,
        metadata=metadata,
        source=source,
        index=raw.index,
    )


def _normalize_aliases(
    data: Any, raw: RawRule, source: str, name: Optional[str]
) -> Any:
    """Accept ``type`` as the authoring-guide spelling of ``kind``."""
    if not isinstance(data, dict):
        return data
    normalized = dict(data)
    for section in _ALIASED_SECTIONS:
        items = normalized.get(section)
        if not isinstance(items, list):
            continue
        converted: list[Any] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict) or "type" not in item:
                converted.append(item)
                continue
            entry = dict(item)
            alias = entry.pop("type")
            if "kind" in entry and entry["kind"] != alias:
                path = (section, index, "type")
                raise SchemaError(
                    source,
                    field=format_field(path),
                    detail=f"{alias!r} conflicts with kind {entry['kind']!r}",
                    rule_name=name,
                    rule_index=raw.index,
                    line=raw.line_for(path),
                )
            entry["kind"] = alias
            converted.append(entry)
        normalized[section] = converted
    return normalized
