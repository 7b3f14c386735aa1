"""JSON Schema for a single rule document."""

from __future__ import annotations

from typing import Any, Optional

from jsonschema import Draft202012Validator

from rulematch.rules.models import ActionKind, FilterKind, Priority

RULE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "filters", "actions"],
    "properties": {
        "name": {"type": "string", "minLength": 1, "pattern": r"\S"},
        "description": {"type": "string"},
        "filters": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["kind", "pattern"],
                "properties": {
                    "kind": {"enum": [kind.value for kind in FilterKind]},
                    "pattern": {"type": "string"},
                },
            },
        },
        "actions": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["kind", "message"],
                "properties": {
                    "kind": {"enum": [kind.value for kind in ActionKind]},
                    "message": {"type": "string"},
                },
            },
        },
        "examples": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "input": {"type": "string"},
                    "output": {"type": "string"},
                },
            },
        },
        "metadata": {
            "type": "object",
            "properties": {
                "priority": {"enum": [priority.value for priority in Priority]},
                "version": {"type": ["string", "number"]},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
        },
    },
}

_VALIDATOR = Draft202012Validator(RULE_SCHEMA)


def error_path(error: Any) -> tuple[Any, ...]:
    """Return the instance path of a schema error, descending into the
    missing key for ``required`` failures so the field itself is named."""
    path = tuple(error.absolute_path)
    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [key for key in error.validator_value if key not in error.instance]
        if missing:
            return path + (missing[0],)
    return path


def format_field(path: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in path) if path else "<root>"


def first_schema_error(raw: Any) -> Optional[Any]:
    errors = sorted(
        _VALIDATOR.iter_errors(raw),
        key=lambda item: [str(part) for part in item.absolute_path],
    )
    return errors[0] if errors else None
