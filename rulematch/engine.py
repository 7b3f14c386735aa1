"""Match loaded rules against a file and collect the actions they trigger."""

from __future__ import annotations

import logging
from string import Template
from typing import Any, Optional, Sequence

import regex

from rulematch.constants import DEFAULT_FILTER_TIMEOUT
from rulematch.context import MatchContext
from rulematch.errors import EvaluationTimeout
from rulematch.models import MatchResult, ResolvedAction
from rulematch.rules.models import FilterKind, Rule, RuleFilter

logger = logging.getLogger(__name__)


def resolve_message(template: str, rule: Rule, context: MatchContext) -> str:
    """Fill ``$name``/``${name}`` placeholders; unknown ones stay verbatim."""
    return Template(template).safe_substitute(
        rule=rule.name,
        description=rule.description,
        path=context.path,
        filename=context.filename,
        priority=rule.metadata.priority.value,
        version=rule.metadata.version,
    )


class RuleEngine:
    """Evaluates rules in load order.

    Priority is metadata only and never reorders evaluation; the engine does
    not arbitrate between rules whose actions disagree. Every filter search
    is bounded by ``timeout`` seconds (``None`` disables the bound).
    """

    def __init__(self, timeout: Optional[float] = DEFAULT_FILTER_TIMEOUT) -> None:
        self.timeout = timeout if timeout else None

    def evaluate(
        self, rules: Sequence[Rule], context: MatchContext
    ) -> list[MatchResult]:
        return [self.evaluate_rule(rule, context) for rule in rules]

    def evaluate_rule(self, rule: Rule, context: MatchContext) -> MatchResult:
        warnings: list[EvaluationTimeout] = []
        for index, rule_filter in enumerate(rule.filters):
            if not self._filter_matches(rule, index, rule_filter, context, warnings):
                return MatchResult(
                    rule_name=rule.name, matched=False, warnings=tuple(warnings)
                )

        actions = tuple(
            ResolvedAction(
                kind=action.kind,
                message=resolve_message(action.message, rule, context),
                rule_name=rule.name,
                priority=rule.metadata.priority,
            )
            for action in rule.actions
        )
        return MatchResult(
            rule_name=rule.name,
            matched=True,
            actions=actions,
            warnings=tuple(warnings),
        )

    def _filter_matches(
        self,
        rule: Rule,
        index: int,
        rule_filter: RuleFilter,
        context: MatchContext,
        warnings: list[EvaluationTimeout],
    ) -> bool:
        if rule_filter.kind == FilterKind.FILE_EXTENSION:
            subject = context.path
        else:
            subject = context.content

        try:
            return self._search(rule_filter, subject) is not None
        except TimeoutError:
            warning = EvaluationTimeout(
                rule_name=rule.name,
                filter_index=index,
                pattern=rule_filter.pattern,
                path=context.path,
                timeout=self.timeout or 0.0,
            )
            logger.warning("%s", warning)
            warnings.append(warning)
            return False

    def _search(self, rule_filter: RuleFilter, subject: str) -> Any:
        compiled = rule_filter.compiled or regex.compile(rule_filter.pattern)
        return compiled.search(subject, concurrent=True, timeout=self.timeout)
