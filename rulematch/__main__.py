import json
from pathlib import Path
from typing import Any, Dict, Optional

import click
import regex
from rich.console import Console

from rulematch.config import ConfigRepository, Settings
from rulematch.discovery import TargetDiscovery
from rulematch.engine import RuleEngine
from rulematch.errors import RuleLoadError, RuleMatchError
from rulematch.executor import ActionDispatcher, CheckExecutor
from rulematch.log import configure_logging
from rulematch.rules.loader import LoadResult, RuleLoader, build_rule
from rulematch.rules.models import ActionKind, Priority
from rulematch.rules.parser import RawRule, rule_to_dict
from rulematch.rules.repository import RulesRepository
from rulematch.tui import RulesConsoleUI


OUTPUT_FORMATS = ["table", "json"]


def _settings_from_obj(obj: Dict[str, Any]) -> Settings:
    repository = ConfigRepository(obj.get("config_path"))
    try:
        return repository.load_settings()
    except RuleMatchError as exc:
        raise click.ClickException(str(exc))


def _rule_sources(paths: tuple[Path, ...], settings: Settings) -> list[Path]:
    if paths:
        return list(paths)
    return [Path(item) for item in settings.rules_paths]


def _load_rules(paths: tuple[Path, ...], settings: Settings) -> LoadResult:
    loader = RuleLoader(ignored_dirs=settings.ignored_dirs)
    return loader.load_paths(_rule_sources(paths, settings))


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2))


def _rules_option() -> Any:
    return click.option(
        "-r",
        "--rules",
        "rules_paths",
        multiple=True,
        type=click.Path(exists=True, path_type=Path),
        help="Rule file or directory (repeatable). Defaults to configured rules_paths.",
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of the user config.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """Match .rules definitions against files and dispatch their actions."""
    configure_logging(verbose)
    ctx.obj = {"config_path": config_path}


@cli.command(help="Evaluate rules against files and report triggered actions.")
@click.argument(
    "targets", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)
@_rules_option()
@click.option("--timeout", type=click.FloatRange(min=0), default=None, help="Per-filter regex timeout in seconds (0 disables).")
@click.option("--max-bytes", type=click.IntRange(min=1), default=None, help="Maximum bytes of content read per file.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Parallel file workers.")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table")
@click.option("--strict", is_flag=True, help="Fail when any rule could not be loaded.")
@click.pass_obj
def check(
    obj: Dict[str, Any],
    targets: tuple[Path, ...],
    rules_paths: tuple[Path, ...],
    timeout: Optional[float],
    max_bytes: Optional[int],
    workers: Optional[int],
    output_format: str,
    strict: bool,
) -> None:
    settings = _settings_from_obj(obj).with_overrides(
        filter_timeout=timeout, max_content_bytes=max_bytes, workers=workers
    )
    loaded = _load_rules(rules_paths, settings)
    files = TargetDiscovery(settings.ignored_dirs).discover_files(targets)

    executor = CheckExecutor(
        engine=RuleEngine(timeout=settings.filter_timeout),
        workers=settings.workers,
        max_content_bytes=settings.max_content_bytes,
    )
    report = executor.run(loaded.rules, files, load_errors=loaded.errors)
    dispatch = ActionDispatcher().dispatch(report)

    if output_format == "json":
        _echo_json(report.as_dict())
    else:
        RulesConsoleUI(Console()).render_report(report)

    if dispatch.should_fail or (strict and report.load_errors):
        raise click.exceptions.Exit(1)


@cli.command(help="Load rule files and report schema or pattern errors.")
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table")
@click.pass_obj
def validate(obj: Dict[str, Any], paths: tuple[Path, ...], output_format: str) -> None:
    loaded = _load_rules(paths, _settings_from_obj(obj))

    if output_format == "json":
        _echo_json(
            {
                "rules": [rule.name for rule in loaded.rules],
                "errors": [error.as_dict() for error in loaded.errors],
            }
        )
    else:
        RulesConsoleUI(Console()).render_rules(loaded.rules, loaded.errors)

    if not loaded.is_valid():
        raise click.exceptions.Exit(1)


@cli.group(help="Inspect and author rule files.")
def rules() -> None:
    pass


@rules.command("list", help="List loaded rules.")
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def rules_list(obj: Dict[str, Any], paths: tuple[Path, ...]) -> None:
    loaded = _load_rules(paths, _settings_from_obj(obj))
    RulesConsoleUI(Console()).render_rules(loaded.rules, loaded.errors)


@rules.command("show", help="Show one rule with its filters, actions and examples.")
@click.argument("name")
@_rules_option()
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table")
@click.pass_obj
def rules_show(
    obj: Dict[str, Any], name: str, rules_paths: tuple[Path, ...], output_format: str
) -> None:
    loaded = _load_rules(rules_paths, _settings_from_obj(obj))
    rule = loaded.get(name)
    if rule is None:
        raise click.ClickException(f"Rule not found: {name}")

    if output_format == "json":
        _echo_json(rule_to_dict(rule))
    else:
        RulesConsoleUI(Console()).render_rule(rule)


@rules.command("new", help="Create a rule file under <dir>/<name>-rules-prompt-file/.rules.")
@click.argument("name")
@click.option("--dir", "rules_dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.option("--description", default="", help="Human-readable summary.")
@click.option("--extension", "extensions", multiple=True, help="File extension filter, e.g. ts (repeatable).")
@click.option("--content", "content_patterns", multiple=True, help="Content regex filter (repeatable).")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in ActionKind]),
    default=ActionKind.SUGGEST.value,
)
@click.option("--message", default="Review $path against the $rule guidelines.")
@click.option(
    "--priority",
    type=click.Choice([priority.value for priority in Priority]),
    default=Priority.MEDIUM.value,
)
@click.option("--tag", "tags", multiple=True)
@click.option("--force", is_flag=True, help="Overwrite an existing rule file.")
@click.pass_obj
def rules_new(
    obj: Dict[str, Any],
    name: str,
    rules_dir: Optional[Path],
    description: str,
    extensions: tuple[str, ...],
    content_patterns: tuple[str, ...],
    kind: str,
    message: str,
    priority: str,
    tags: tuple[str, ...],
    force: bool,
) -> None:
    settings = _settings_from_obj(obj)
    target_dir = rules_dir or Path(settings.rules_paths[0] if settings.rules_paths else ".")

    filters = [
        {"kind": "file_extension", "pattern": rf"\.{regex.escape(item.lstrip('.'))}$"}
        for item in extensions
    ]
    filters.extend({"kind": "content", "pattern": item} for item in content_patterns)
    data = {
        "name": name,
        "description": description,
        "filters": filters,
        "actions": [{"kind": kind, "message": message}],
        "metadata": {"priority": priority, "version": "1.0.0", "tags": list(tags)},
    }

    try:
        rule = build_rule(RawRule(data=data, index=0), source="<new>")
        path = RulesRepository(target_dir).save_rule(rule, overwrite=force)
    except RuleLoadError as exc:
        raise click.ClickException(str(exc))
    except FileExistsError as exc:
        raise click.ClickException(f"{exc} (use --force to overwrite)")

    RulesConsoleUI(Console()).render_rule_saved(rule.name, str(path))


@cli.group(help="Inspect or create the user configuration.")
def config() -> None:
    pass


@config.command("show", help="Show effective settings.")
@click.pass_obj
def config_show(obj: Dict[str, Any]) -> None:
    settings = _settings_from_obj(obj)
    source = ConfigRepository(obj.get("config_path")).config_path
    RulesConsoleUI(Console()).render_settings(settings, str(source))


@config.command("init", help="Write a config file with default settings.")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_obj
def config_init(obj: Dict[str, Any], force: bool) -> None:
    repository = ConfigRepository(obj.get("config_path"))
    if repository.config_path.exists() and not force:
        raise click.ClickException(
            f"Config already exists: {repository.config_path} (use --force to overwrite)"
        )
    settings = Settings()
    repository.save_settings(settings)
    RulesConsoleUI(Console()).render_settings(settings, str(repository.config_path))


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
