import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from rulematch.constants import (
    APP_NAME,
    CONFIG_FILENAME,
    DEFAULT_FILTER_TIMEOUT,
    DEFAULT_MAX_CONTENT_BYTES,
    DEFAULT_WORKERS,
    IGNORED_DIRS,
    RULES_DIRNAME,
)
from rulematch.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from rulematch.rules.schema import format_field
from rulematch.utils import dump_json_file, load_json_file

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "filter_timeout": {"type": "number", "minimum": 0},
        "max_content_bytes": {"type": "integer", "minimum": 1},
        "workers": {"type": "integer", "minimum": 1},
        "ignored_dirs": {"type": "array", "items": {"type": "string"}},
        "rules_paths": {"type": "array", "items": {"type": "string"}},
    },
}


@dataclass(frozen=True)
class Settings:
    filter_timeout: float = DEFAULT_FILTER_TIMEOUT
    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES
    workers: int = DEFAULT_WORKERS
    ignored_dirs: tuple[str, ...] = IGNORED_DIRS
    rules_paths: tuple[str, ...] = field(default_factory=lambda: (RULES_DIRNAME,))

    def with_overrides(self, **overrides: Any) -> "Settings":
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


class ConfigRepository:
    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._config_path = config_path

    @property
    def config_path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return root / APP_NAME / CONFIG_FILENAME

    def load_settings(self) -> Settings:
        payload, error = load_json_file(self.config_path)
        if error is not None:
            raise InvalidJsonFormatError(self.config_path, error)
        if payload is None:
            return Settings()

        validator = Draft202012Validator(CONFIG_SCHEMA)
        schema_error = next(iter(validator.iter_errors(payload)), None)
        if schema_error is not None:
            raise InvalidConfigSchemaError(
                self.config_path,
                f"{format_field(tuple(schema_error.path))}: {schema_error.message}",
            )

        overrides: dict[str, Any] = dict(payload)
        for key in ("ignored_dirs", "rules_paths"):
            if key in overrides:
                overrides[key] = tuple(overrides[key])
        # JSON Schema "integer" also accepts whole floats such as 1024.0
        for key in ("max_content_bytes", "workers"):
            if key in overrides:
                overrides[key] = int(overrides[key])
        if "filter_timeout" in overrides:
            overrides["filter_timeout"] = float(overrides["filter_timeout"])
        return Settings().with_overrides(**overrides)

    def save_settings(self, settings: Settings) -> None:
        payload = {
            "filter_timeout": settings.filter_timeout,
            "max_content_bytes": settings.max_content_bytes,
            "workers": settings.workers,
            "ignored_dirs": list(settings.ignored_dirs),
            "rules_paths": list(settings.rules_paths),
        }
        dump_json_file(self.config_path, payload)
