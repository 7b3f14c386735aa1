from typing import Final


APP_NAME: Final[str] = "rulematch"
CONFIG_FILENAME: Final[str] = "config.json"

RULES_DIRNAME: Final[str] = "rules"
RULES_FILENAME: Final[str] = ".rules"
RULES_DIR_SUFFIX: Final[str] = "-rules-prompt-file"
RULE_FILE_SUFFIXES: Final[tuple[str, ...]] = (".yaml", ".yml", ".json", ".rules")

DEFAULT_FILTER_TIMEOUT: Final[float] = 1.0
DEFAULT_MAX_CONTENT_BYTES: Final[int] = 1024 * 1024
DEFAULT_WORKERS: Final[int] = 4

IGNORED_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    ".venv",
    "__pycache__",
    "dist",
    "build",
)
