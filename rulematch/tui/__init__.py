from rulematch.tui.renderers import RulesConsoleUI

__all__ = ["RulesConsoleUI"]
