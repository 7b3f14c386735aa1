from collections import Counter

from rich.console import Group
from rich.table import Column, Table
from rich.text import Text

from rulematch.config import Settings
from rulematch.models import CheckReport
from rulematch.rules.models import ActionKind, Rule
from rulematch.tui.enums import ACTION_KIND_STYLE, PRIORITY_STYLE, UIStyle
from rulematch.utils import shorten_home


class ReportTable:
    @staticmethod
    def summary_block(report: CheckReport) -> Table:
        summary = report.summary()
        counts = Counter(action.kind for _, action in report.actions())
        chips = [
            f"[{ACTION_KIND_STYLE[kind]}]{kind.value}={counts[kind]}[/{ACTION_KIND_STYLE[kind]}]"
            for kind in ActionKind
            if counts[kind] > 0
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Files", str(summary["files"]))
        table.add_row("Rules", str(summary["rules"]))
        table.add_row("Matches", str(summary["matches"]))
        table.add_row("Actions", "  ".join(chips) if chips else "none")
        return table

    @staticmethod
    def actions_table(report: CheckReport) -> Table:
        table = Table(
            Column(header="Kind", width=9),
            Column(header="Rule", overflow="ellipsis", max_width=32),
            Column(header="File", overflow="ellipsis", max_width=48),
            Column(header="Message", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for path, action in report.actions():
            style = ACTION_KIND_STYLE.get(action.kind, UIStyle.WHITE.value)
            table.add_row(
                Text(action.kind.value, style=style),
                Text(action.rule_name),
                Text(shorten_home(path)),
                Text(action.message.strip()),
            )
        return table


class RulesTable:
    @staticmethod
    def rules_table(rules: list[Rule]) -> Table:
        table = Table(
            Column(header="Rule", overflow="ellipsis", max_width=32),
            Column(header="Priority", width=8),
            Column(header="Version", width=9),
            Column(header="Filters", width=7, justify="right"),
            Column(header="Actions", width=7, justify="right"),
            Column(header="Tags", overflow="ellipsis"),
            Column(header="Source", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for rule in rules:
            priority = rule.metadata.priority
            table.add_row(
                Text(rule.name),
                Text(priority.value, style=PRIORITY_STYLE.get(priority, UIStyle.WHITE.value)),
                Text(rule.metadata.version or "-"),
                str(len(rule.filters)),
                str(len(rule.actions)),
                Text(", ".join(sorted(rule.metadata.tags))),
                Text(shorten_home(rule.source)),
            )
        return table

    @staticmethod
    def rule_detail(rule: Rule) -> Group:
        overview = Table.grid(padding=(0, 2))
        overview.add_column(style="bold")
        overview.add_column()
        overview.add_row("Name", Text(rule.name))
        overview.add_row("Description", Text(rule.description or "-"))
        overview.add_row("Priority", Text(rule.metadata.priority.value))
        overview.add_row("Version", Text(rule.metadata.version or "-"))
        overview.add_row("Tags", Text(", ".join(sorted(rule.metadata.tags)) or "-"))
        overview.add_row("Source", Text(shorten_home(rule.source)))

        filters = Table(
            Column(header="#", width=3, justify="right"),
            Column(header="Kind", width=14),
            Column(header="Pattern", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        if rule.matches_everything:
            filters.add_row("-", "-", Text("no filters: matches every file", style=UIStyle.YELLOW.value))
        for index, item in enumerate(rule.filters):
            filters.add_row(str(index), item.kind.value, Text(item.pattern))

        actions = Table(
            Column(header="#", width=3, justify="right"),
            Column(header="Kind", width=9),
            Column(header="Message", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for index, action in enumerate(rule.actions):
            style = ACTION_KIND_STYLE.get(action.kind, UIStyle.WHITE.value)
            actions.add_row(str(index), Text(action.kind.value, style=style), Text(action.message.strip()))

        parts = [overview, filters, actions]
        if rule.examples:
            examples = Table(
                Column(header="Input", overflow="fold"),
                Column(header="Output", overflow="fold"),
                expand=True,
                header_style="bold",
            )
            for example in rule.examples:
                examples.add_row(Text(example.input.strip()), Text(example.output.strip()))
            parts.append(examples)
        return Group(*parts)


class SettingsTable:
    @staticmethod
    def settings_table(settings: Settings, source: str) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("config", Text(shorten_home(source)))
        table.add_row("filter_timeout", f"{settings.filter_timeout:g}s")
        table.add_row("max_content_bytes", str(settings.max_content_bytes))
        table.add_row("workers", str(settings.workers))
        table.add_row("ignored_dirs", Text(", ".join(settings.ignored_dirs) or "-"))
        table.add_row("rules_paths", Text(", ".join(settings.rules_paths) or "-"))
        return table
