from rich.console import Console

from rulematch.config import Settings
from rulematch.errors import RuleLoadError
from rulematch.models import CheckReport
from rulematch.rules.models import Rule
from rulematch.tui.enums import UIStyle
from rulematch.tui.sections import UISection
from rulematch.tui.tables import ReportTable, RulesTable, SettingsTable
from rulematch.utils import shorten_home


class RulesConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_report(self, report: CheckReport) -> None:
        style = UIStyle.RED.value if report.has_enforce else UIStyle.BLUE.value
        self.console.print(
            UISection.wrap("check overview", ReportTable.summary_block(report), style=style)
        )

        if report.actions():
            self.console.print(
                UISection.wrap(
                    "triggered actions",
                    ReportTable.actions_table(report),
                    style=UIStyle.CYAN.value,
                )
            )
        else:
            self.console.print(
                UISection.note("actions", ["No rules matched."], style=UIStyle.DIM.value)
            )

        self.render_load_errors(report.load_errors)

        problems = [str(item) for item in report.read_errors()]
        problems.extend(str(item) for item in report.warnings())
        if problems:
            self.console.print(
                UISection.note("warnings", problems, style=UIStyle.YELLOW.value)
            )

        partial = [
            f"{shorten_home(item.path)} ({'binary' if item.binary else 'truncated'})"
            for item in report.files
            if item.truncated or item.binary
        ]
        if partial:
            self.console.print(
                UISection.note("partially checked", partial, style=UIStyle.DIM.value)
            )

    def render_load_errors(self, errors: list[RuleLoadError]) -> None:
        if not errors:
            return
        self.console.print(
            UISection.note(
                "rule errors",
                [shorten_home(str(item)) for item in errors],
                style=UIStyle.RED.value,
            )
        )

    def render_rules(self, rules: list[Rule], errors: list[RuleLoadError]) -> None:
        if rules:
            self.console.print(
                UISection.wrap(
                    "rules", RulesTable.rules_table(rules), style=UIStyle.BLUE.value
                )
            )
        else:
            self.console.print(
                UISection.note("rules", ["No rules loaded."], style=UIStyle.YELLOW.value)
            )
        self.render_load_errors(errors)

    def render_rule(self, rule: Rule) -> None:
        self.console.print(
            UISection.wrap(rule.name, RulesTable.rule_detail(rule), style=UIStyle.BLUE.value)
        )

    def render_rule_saved(self, name: str, path: str) -> None:
        self.console.print(
            UISection.note(
                "rule",
                [f"Rule created: {name}", shorten_home(path)],
                style=UIStyle.GREEN.value,
            )
        )

    def render_settings(self, settings: Settings, source: str) -> None:
        self.console.print(
            UISection.wrap(
                "config",
                SettingsTable.settings_table(settings, source),
                style=UIStyle.BLUE.value,
            )
        )
