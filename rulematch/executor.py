import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Sequence

from rulematch.constants import DEFAULT_MAX_CONTENT_BYTES, DEFAULT_WORKERS
from rulematch.context import MatchContext
from rulematch.engine import RuleEngine
from rulematch.errors import ContextReadError, RuleLoadError
from rulematch.models import CheckReport, FileReport, ResolvedAction
from rulematch.rules.models import ActionKind, Rule

logger = logging.getLogger(__name__)


@dataclass
class DispatchSummary:
    counts: dict[ActionKind, int] = field(
        default_factory=lambda: {kind: 0 for kind in ActionKind}
    )
    enforced: list[tuple[str, ResolvedAction]] = field(default_factory=list)
    suggestions: list[tuple[str, ResolvedAction]] = field(default_factory=list)
    messages: list[tuple[str, ResolvedAction]] = field(default_factory=list)

    @property
    def should_fail(self) -> bool:
        return bool(self.enforced)


class ActionHandler(Protocol):
    def handle(self, path: str, action: ResolvedAction, summary: DispatchSummary) -> None: ...


class SuggestHandler:
    def handle(self, path: str, action: ResolvedAction, summary: DispatchSummary) -> None:
        summary.suggestions.append((path, action))


class EnforceHandler:
    def handle(self, path: str, action: ResolvedAction, summary: DispatchSummary) -> None:
        logger.info("Enforced by %s on %s", action.rule_name, path)
        summary.enforced.append((path, action))


class MessageHandler:
    def handle(self, path: str, action: ResolvedAction, summary: DispatchSummary) -> None:
        summary.messages.append((path, action))


class ActionDispatcher:
    """Routes triggered actions to a handler per action kind.

    Escalation lives here, outside the engine: callers read
    ``DispatchSummary.should_fail`` to decide whether enforcement failed.
    """

    def __init__(self, handlers: Optional[dict[ActionKind, ActionHandler]] = None) -> None:
        self.handlers: dict[ActionKind, ActionHandler] = handlers or {
            ActionKind.SUGGEST: SuggestHandler(),
            ActionKind.ENFORCE: EnforceHandler(),
            ActionKind.MESSAGE: MessageHandler(),
        }

    def dispatch(self, report: CheckReport) -> DispatchSummary:
        summary = DispatchSummary()
        for path, action in report.actions():
            handler = self.handlers.get(action.kind)
            if handler is None:
                raise KeyError(f"No handler registered for action kind: {action.kind.value}")
            summary.counts[action.kind] += 1
            handler.handle(path, action, summary)
        return summary


class CheckExecutor:
    def __init__(
        self,
        engine: Optional[RuleEngine] = None,
        workers: int = DEFAULT_WORKERS,
        max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES,
    ) -> None:
        self.engine = engine or RuleEngine()
        self.workers = max(1, workers)
        self.max_content_bytes = max_content_bytes

    def run(
        self,
        rules: Sequence[Rule],
        paths: Sequence[Path],
        load_errors: Optional[list[RuleLoadError]] = None,
    ) -> CheckReport:
        frozen_rules = tuple(rules)
        if self.workers == 1 or len(paths) <= 1:
            files = [self.check_file(frozen_rules, path) for path in paths]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                files = list(pool.map(lambda path: self.check_file(frozen_rules, path), paths))
        return CheckReport(
            files=files,
            rule_count=len(frozen_rules),
            load_errors=list(load_errors or []),
        )

    def check_file(self, rules: Sequence[Rule], path: Path) -> FileReport:
        context = MatchContext.from_file(path, max_bytes=self.max_content_bytes)
        try:
            results = self.engine.evaluate(rules, context)
        except OSError as exc:
            error = ContextReadError(path, exc.strerror or str(exc))
            logger.warning("%s", error)
            return FileReport(path=context.path, error=error)

        if not context.loaded:
            logger.debug("Checked %s without reading its content", context.path)
        elif context.truncated:
            logger.debug("Content of %s truncated to %d bytes", context.path, self.max_content_bytes)
        return FileReport(
            path=context.path,
            results=tuple(results),
            truncated=context.truncated,
            binary=context.binary,
        )
