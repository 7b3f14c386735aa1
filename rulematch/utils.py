import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional


def load_json_file(path: Path) -> tuple[Optional[Any], Optional[str]]:
    """Return ``(payload, problem)``; a missing or blank file gives ``(None, None)``."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None, None
    except (OSError, UnicodeDecodeError) as exc:
        return None, str(exc)
    if not text.strip():
        return None, None
    try:
        return json.loads(text), None
    except json.JSONDecodeError as exc:
        return None, f"{exc.msg} at line {exc.lineno}, column {exc.colno}"


def dump_json_file(path: Path, payload: Any) -> None:
    """Write ``payload`` to a sibling temp file, then move it over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.write("\n")
        os.replace(temp_name, path)
    finally:
        Path(temp_name).unlink(missing_ok=True)


def shorten_home(text: str | Path) -> str:
    """Replace the home directory prefix of every path inside ``text`` with ``~``."""
    value = str(text)
    home = str(Path.home())
    if value == home:
        return "~"
    return value.replace(f"{home}/", "~/")
