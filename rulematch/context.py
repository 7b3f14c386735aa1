"""The subject a rule set is evaluated against: a path and its content."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from rulematch.constants import DEFAULT_MAX_CONTENT_BYTES


class MatchContext:
    """File path plus lazily loaded, size-bounded content.

    Content is only read when a content filter asks for it, and never more
    than ``max_bytes`` bytes are pulled from disk. Files whose bounded prefix
    contains a NUL byte are treated as binary and expose empty content.
    """

    def __init__(
        self,
        path: str,
        content: Optional[str] = None,
        reader: Optional[Callable[[], bytes]] = None,
        max_bytes: int = DEFAULT_MAX_CONTENT_BYTES,
    ) -> None:
        self.path = path
        self.max_bytes = max_bytes
        self._reader = reader
        self._content = content
        self.truncated = False
        self.binary = False

    @classmethod
    def from_text(cls, path: str, content: str) -> "MatchContext":
        return cls(path=path, content=content)

    @classmethod
    def from_file(
        cls, path: Path, max_bytes: int = DEFAULT_MAX_CONTENT_BYTES
    ) -> "MatchContext":
        def read() -> bytes:
            with path.open("rb") as handle:
                return handle.read(max_bytes + 1)

        return cls(path=path.as_posix(), reader=read, max_bytes=max_bytes)

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def loaded(self) -> bool:
        return self._content is not None

    @property
    def content(self) -> str:
        if self._content is None:
            self._content = self._load()
        return self._content

    def _load(self) -> str:
        if self._reader is None:
            return ""
        data = self._reader()
        if len(data) > self.max_bytes:
            self.truncated = True
            data = data[: self.max_bytes]
        if b"\x00" in data:
            self.binary = True
            return ""
        return data.decode("utf-8", errors="replace")
