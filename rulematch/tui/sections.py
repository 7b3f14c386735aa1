from typing import Any, Optional

from rich.markup import escape
from rich.panel import Panel

from rulematch.tui.enums import UIStyle


class UISection:
    @staticmethod
    def wrap(
        title: str,
        body: Any,
        style: str = UIStyle.BLUE.value,
        subtitle: Optional[str] = None,
    ) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, lines: list[str], style: str) -> Panel:
        body = "\n".join(f"- {escape(line)}" for line in lines)
        return Panel(body, title=title, border_style=style, padding=(0, 1))
