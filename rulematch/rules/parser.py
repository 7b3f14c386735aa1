"""Parse rule sources (YAML or JSON) and serialize rules back to YAML."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from rulematch.errors import ParseError, RuleLoadError, SchemaError
from rulematch.rules.models import Rule

YAML_FORMAT = "yaml"
JSON_FORMAT = "json"


@dataclass(frozen=True)
class RawRule:
    """One undecoded rule document plus the source lines of its fields."""

    data: Any
    index: int
    lines: dict[tuple[Any, ...], int] = field(default_factory=dict)

    def line_for(self, path: tuple[Any, ...] = ()) -> Optional[int]:
        for end in range(len(path), -1, -1):
            line = self.lines.get(tuple(path[:end]))
            if line is not None:
                return line
        return None


@dataclass
class ParsedSource:
    """Rule documents recovered from one source plus the errors met on the way."""

    rules: list[RawRule] = field(default_factory=list)
    errors: list[RuleLoadError] = field(default_factory=list)


def detect_format(path: Path) -> str:
    return JSON_FORMAT if path.suffix.lower() == ".json" else YAML_FORMAT


def parse_source(text: str, source: str, fmt: str = YAML_FORMAT) -> ParsedSource:
    """Split a source into raw rule documents.

    YAML streams are read document by document: documents before a syntax
    error are kept and the error is recorded at the index of the first rule
    that could not be read. A broken JSON source yields no rules.
    """
    parsed = ParsedSource()
    if fmt == JSON_FORMAT:
        documents, nodes, error = _parse_json(text, source)
    else:
        documents, nodes, error = _parse_yaml(text, source)

    for document, node in zip(documents, nodes):
        try:
            expanded = _expand_document(document, node, source)
        except RuleLoadError as exc:
            parsed.errors.append(exc)
            continue
        for data, rule_node in expanded:
            parsed.rules.append(
                RawRule(data=data, index=len(parsed.rules), lines=_line_map(rule_node))
            )

    if error is not None:
        if documents:
            error = ParseError(
                error.source,
                error.message,
                rule_index=len(parsed.rules),
                line=error.line,
            )
        parsed.errors.append(error)
    return parsed


def _parse_yaml(
    text: str, source: str
) -> tuple[list[Any], list[Any], Optional[ParseError]]:
    documents: list[Any] = []
    nodes: list[Any] = []
    loader = yaml.SafeLoader(text)
    try:
        while loader.check_node():
            node = loader.get_node()
            documents.append(loader.construct_document(node))
            nodes.append(node)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        problem = getattr(exc, "problem", None) or str(exc)
        error = ParseError(
            source,
            f"invalid YAML ({problem})",
            line=mark.line + 1 if mark is not None else None,
        )
        return documents, nodes, error
    finally:
        loader.dispose()
    return documents, nodes, None


def _parse_json(
    text: str, source: str
) -> tuple[list[Any], list[Any], Optional[ParseError]]:
    if not text.strip():
        return [], [], None
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        error = ParseError(source, f"invalid JSON ({exc.msg})", line=exc.lineno)
        return [], [], error
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        # line numbers are best effort for JSON that YAML 1.1 cannot read
        node = None
    return [document], [node], None


def _expand_document(
    document: Any, node: Any, source: str
) -> list[tuple[Any, Any]]:
    if document is None:
        return []
    if isinstance(document, dict) and "rules" in document and "name" not in document:
        rules = document["rules"]
        if not isinstance(rules, list):
            raise SchemaError(
                source,
                field="rules",
                detail="must be a list of rule objects",
                line=_line_map(node).get(("rules",)),
            )
        return list(zip(rules, _sequence_items(_mapping_value(node, "rules"), len(rules))))
    if isinstance(document, list):
        return list(zip(document, _sequence_items(node, len(document))))
    return [(document, node)]


def _mapping_value(node: Any, key: str) -> Any:
    if not isinstance(node, yaml.MappingNode):
        return None
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            return value_node
    return None


def _sequence_items(node: Any, count: int) -> list[Any]:
    if isinstance(node, yaml.SequenceNode) and len(node.value) == count:
        return list(node.value)
    return [None] * count


def _line_map(node: Any) -> dict[tuple[Any, ...], int]:
    lines: dict[tuple[Any, ...], int] = {}

    def walk(current: Any, path: tuple[Any, ...]) -> None:
        if current is None:
            return
        lines.setdefault(path, current.start_mark.line + 1)
        if isinstance(current, yaml.MappingNode):
            for key_node, value_node in current.value:
                if not isinstance(key_node, yaml.ScalarNode):
                    continue
                child = path + (key_node.value,)
                lines[child] = key_node.start_mark.line + 1
                walk(value_node, child)
        elif isinstance(current, yaml.SequenceNode):
            for index, item in enumerate(current.value):
                walk(item, path + (index,))

    walk(node, ())
    return lines


def rule_to_dict(rule: Rule) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": rule.name}
    if rule.description:
        payload["description"] = rule.description
    payload["filters"] = [
        {"kind": item.kind.value, "pattern": item.pattern} for item in rule.filters
    ]
    payload["actions"] = [
        {"kind": item.kind.value, "message": item.message} for item in rule.actions
    ]
    if rule.examples:
        payload["examples"] = [
            {"input": item.input, "output": item.output} for item in rule.examples
        ]

    metadata: dict[str, Any] = {"priority": rule.metadata.priority.value}
    if rule.metadata.version:
        metadata["version"] = rule.metadata.version
    if rule.metadata.tags:
        metadata["tags"] = sorted(rule.metadata.tags)
    payload["metadata"] = metadata
    return payload


def serialize_rule(rule: Rule) -> str:
    return yaml.dump(
        rule_to_dict(rule),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
