"""Tests for rules and config CLI commands."""

import json
from pathlib import Path

from rulematch.__main__ import cli, main
from rulematch.rules.loader import RuleLoader
from rulematch.rules.models import ActionKind, FilterKind, Priority


def test_rules_list_empty(tmp_path: Path, cli_runner) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    result = cli_runner.invoke(cli, ["rules", "list", str(empty)])
    assert result.exit_code == 0
    assert "No rules loaded" in result.output


def test_rules_list_populated(rules_dir: Path, console_log_rule: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["rules", "list", str(rules_dir)])
    assert result.exit_code == 0
    assert "no-console-log" in result.output
    assert "high" in result.output
    assert "javascript, logging" in result.output


def test_rules_show_json(rules_dir: Path, console_log_rule: Path, cli_runner) -> None:
    result = cli_runner.invoke(
        cli, ["rules", "show", "no-console-log", "-r", str(rules_dir), "--format", "json"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["name"] == "no-console-log"
    assert [item["kind"] for item in payload["filters"]] == ["file_extension", "content"]
    assert payload["metadata"]["tags"] == ["javascript", "logging"]


def test_rules_show_table(rules_dir: Path, console_log_rule: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["rules", "show", "no-console-log", "-r", str(rules_dir)])
    assert result.exit_code == 0
    assert "Forbid console.log in shipped code" in result.output
    assert "console\\.log" in result.output


def test_rules_show_missing(rules_dir: Path, console_log_rule: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["rules", "show", "nope", "-r", str(rules_dir)])
    assert result.exit_code != 0
    assert "Rule not found" in result.output


def test_rules_new_writes_convention_file(rules_dir: Path, cli_runner) -> None:
    result = cli_runner.invoke(
        cli,
        [
            "rules",
            "new",
            "typescript-classes",
            "--dir",
            str(rules_dir),
            "--description",
            "Prefer interfaces",
            "--extension",
            ".ts",
            "--content",
            "(?s)class.*\\{",
            "--kind",
            "enforce",
            "--message",
            "use an interface in $filename",
            "--priority",
            "high",
            "--tag",
            "typescript",
        ],
    )
    assert result.exit_code == 0
    assert "Rule created" in result.output

    path = rules_dir / "typescript-classes-rules-prompt-file" / ".rules"
    loaded = RuleLoader().load_file(path)
    assert loaded.errors == []
    rule = loaded.rules[0]
    assert rule.description == "Prefer interfaces"
    assert [(item.kind, item.pattern) for item in rule.filters] == [
        (FilterKind.FILE_EXTENSION, "\\.ts$"),
        (FilterKind.CONTENT, "(?s)class.*\\{"),
    ]
    assert rule.actions[0].kind == ActionKind.ENFORCE
    assert rule.metadata.priority == Priority.HIGH
    assert rule.metadata.tags == frozenset({"typescript"})


def test_rules_new_refuses_overwrite(rules_dir: Path, cli_runner) -> None:
    args = ["rules", "new", "dup", "--dir", str(rules_dir)]
    assert cli_runner.invoke(cli, args).exit_code == 0
    second = cli_runner.invoke(cli, args)
    assert second.exit_code != 0
    assert "--force" in second.output
    assert cli_runner.invoke(cli, [*args, "--force"]).exit_code == 0


def test_rules_new_rejects_bad_pattern(rules_dir: Path, cli_runner) -> None:
    result = cli_runner.invoke(
        cli, ["rules", "new", "bad", "--dir", str(rules_dir), "--content", "(oops"]
    )
    assert result.exit_code != 0
    assert "invalid pattern" in result.output
    assert not (rules_dir / "bad-rules-prompt-file").exists()


def test_config_init_and_show(tmp_path: Path, cli_runner) -> None:
    init = cli_runner.invoke(cli, ["config", "init"])
    assert init.exit_code == 0
    assert (tmp_path / ".config" / "rulematch" / "config.json").exists()

    again = cli_runner.invoke(cli, ["config", "init"])
    assert again.exit_code != 0

    show = cli_runner.invoke(cli, ["config", "show"])
    assert show.exit_code == 0
    assert "filter_timeout" in show.output
    assert "node_modules" in show.output


def test_main_maps_exit_codes(tmp_path: Path, rules_dir: Path, console_log_rule: Path, monkeypatch) -> None:
    target = tmp_path / "app.js"
    target.write_text("console.log(1)\n", encoding="utf-8")

    monkeypatch.setattr("sys.argv", ["rulematch", "check", str(target), "-r", str(rules_dir)])
    assert main() == 1

    monkeypatch.setattr("sys.argv", ["rulematch", "rules", "show", "nope", "-r", str(rules_dir)])
    assert main() == 2


def test_rules_show_flags_rule_without_filters(rules_dir: Path, write_text, cli_runner) -> None:
    write_text(
        rules_dir / "everything.yaml",
        """
        name: everything
        filters: []
        actions:
          - kind: message
            message: seen $path
        """,
    )
    result = cli_runner.invoke(cli, ["rules", "show", "everything", "-r", str(rules_dir)])
    assert result.exit_code == 0
    assert "no filters: matches every file" in result.output
