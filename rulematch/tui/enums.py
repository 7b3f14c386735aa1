from enum import Enum

from rulematch.rules.models import ActionKind, Priority


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


ACTION_KIND_STYLE = {
    ActionKind.ENFORCE: UIStyle.RED.value,
    ActionKind.SUGGEST: UIStyle.CYAN.value,
    ActionKind.MESSAGE: UIStyle.DIM.value,
}

PRIORITY_STYLE = {
    Priority.HIGH: UIStyle.RED.value,
    Priority.MEDIUM: UIStyle.YELLOW.value,
    Priority.LOW: UIStyle.DIM.value,
}
