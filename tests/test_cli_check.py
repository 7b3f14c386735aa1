"""Tests for the check and validate CLI commands."""

import json
from pathlib import Path

from rulematch.__main__ import cli


def _project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.js").write_text("function f(){ console.log('x'); }\n", encoding="utf-8")
    (root / "src" / "util.py").write_text("def f():\n    pass\n", encoding="utf-8")
    return root


def test_check_enforce_fails(
    tmp_path: Path, rules_dir: Path, console_log_rule: Path, cli_runner
) -> None:
    project = _project(tmp_path)
    result = cli_runner.invoke(cli, ["check", str(project), "-r", str(rules_dir)])
    assert result.exit_code == 1
    assert "no-console-log" in result.output
    assert "remove console.log from app.js" in result.output


def test_check_clean_passes(
    tmp_path: Path, rules_dir: Path, console_log_rule: Path, cli_runner
) -> None:
    project = _project(tmp_path)
    (project / "src" / "app.js").write_text("function f(){ }\n", encoding="utf-8")
    result = cli_runner.invoke(cli, ["check", str(project), "-r", str(rules_dir)])
    assert result.exit_code == 0
    assert "No rules matched" in result.output


def test_check_suggest_only_passes(tmp_path: Path, rules_dir: Path, write_text, cli_runner) -> None:
    write_text(
        rules_dir / "todo.yaml",
        """
        name: todo
        filters:
          - kind: content
            pattern: pass
        actions:
          - kind: suggest
            message: implement me
        """,
    )
    project = _project(tmp_path)
    result = cli_runner.invoke(cli, ["check", str(project), "-r", str(rules_dir)])
    assert result.exit_code == 0
    assert "implement me" in result.output


def test_check_json_output(
    tmp_path: Path, rules_dir: Path, console_log_rule: Path, cli_runner
) -> None:
    project = _project(tmp_path)
    result = cli_runner.invoke(
        cli, ["check", str(project), "-r", str(rules_dir), "--format", "json", "--workers", "2"]
    )
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["summary"]["enforce"] == 1
    assert payload["summary"]["files"] == 2
    matched = [item for item in payload["files"] if item["matched"]]
    assert len(matched) == 1
    assert matched[0]["path"].endswith("src/app.js")
    assert matched[0]["matched"][0]["actions"][0]["kind"] == "enforce"


def test_check_uses_configured_rules_paths(
    tmp_path: Path, rules_dir: Path, console_log_rule: Path, cli_runner
) -> None:
    config_path = tmp_path / ".config" / "rulematch" / "config.json"
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"rules_paths": [str(rules_dir)]}), encoding="utf-8")

    project = _project(tmp_path)
    result = cli_runner.invoke(cli, ["check", str(project)])
    assert result.exit_code == 1
    assert "no-console-log" in result.output


def test_check_reports_load_errors_and_strict(
    tmp_path: Path, rules_dir: Path, write_text, cli_runner
) -> None:
    write_text(
        rules_dir / "broken.yaml",
        """
        name: broken
        filters:
          - kind: content
            pattern: "(unclosed"
        actions: []
        """,
    )
    project = _project(tmp_path)

    lenient = cli_runner.invoke(cli, ["check", str(project), "-r", str(rules_dir)])
    assert lenient.exit_code == 0
    assert "invalid pattern" in lenient.output

    strict = cli_runner.invoke(cli, ["check", str(project), "-r", str(rules_dir), "--strict"])
    assert strict.exit_code == 1


def test_check_invalid_config_is_click_error(tmp_path: Path, cli_runner) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{bad", encoding="utf-8")
    project = _project(tmp_path)
    result = cli_runner.invoke(cli, ["--config", str(config_path), "check", str(project)])
    assert result.exit_code != 0
    assert "Invalid JSON format" in result.output


def test_validate_ok(rules_dir: Path, console_log_rule: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["validate", str(rules_dir)])
    assert result.exit_code == 0
    assert "no-console-log" in result.output


def test_validate_reports_errors(rules_dir: Path, write_text, cli_runner) -> None:
    write_text(
        rules_dir / "bad.yaml",
        """
        name: bad
        filters: []
        actions:
          - kind: shout
            message: hi
        """,
    )
    result = cli_runner.invoke(cli, ["validate", str(rules_dir), "--format", "json"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["rules"] == []
    assert payload["errors"][0]["kind"] == "schema"
    assert payload["errors"][0]["field"] == "actions.0.kind"
    assert payload["errors"][0]["line"] == 4
