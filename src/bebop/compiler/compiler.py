"""PromptCompiler: load packs, filter, enforce, truncate and format."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from bebop.compiler.enforcement import run_enforcement
from bebop.compiler.models import (
    CompiledConstraint,
    CompiledPrompt,
    CompileStats,
    ContextSummary,
    EnforcementResult,
)
from bebop.config import AutoConfig
from bebop.detection.models import DetectedContext
from bebop.errors import EnforcementError
from bebop.fs_utils import matches_glob
from bebop.packs.models import OwnedRule, Pack
from bebop.packs.registry import PackRegistry, PackSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONSTRAINTS = 15
TOKENS_PER_WORD = 1.3
NO_CONSTRAINTS_LINE = "- (no constraints selected)"


def flatten_rules(packs: Iterable[Pack]) -> list[OwnedRule]:
    return [OwnedRule(pack_id=pack.id, rule=rule) for pack in packs for rule in pack.rules]


def rule_applies(owned: OwnedRule, context: DetectedContext) -> bool:
    """Every specified predicate field must match; empty or absent fields match."""
    applies = owned.rule.applies_when
    if applies is None:
        return True

    checks: list[bool] = []
    if applies.languages:
        languages = {lang.lower() for lang in context.project.language}
        checks.append(any(lang.lower() in languages for lang in applies.languages))

    if applies.paths:
        relative = context.workspace.relative_cwd if context.workspace else "."
        candidates = [relative, relative.rstrip("/") + "/"]
        checks.append(
            any(matches_glob(pattern, c) for pattern in applies.paths for c in candidates)
        )

    return all(checks)


def filter_applicable(rules: Iterable[OwnedRule], context: DetectedContext) -> list[OwnedRule]:
    return [rule for rule in rules if rule_applies(rule, context)]


def format_compiled_prompt(
    user_input: str,
    constraints: list[CompiledConstraint],
    context: DetectedContext,
) -> str:
    lines = [f"Task: {user_input}", "", "Active constraints:"]
    if constraints:
        lines.extend(f"- [{c.id}] {c.text} ({c.source})" for c in constraints)
    else:
        lines.append(NO_CONSTRAINTS_LINE)
    lines.append("")

    summary = f"Context: {context.project.type}"
    if context.project.framework:
        summary += f" ({context.project.framework})"
    if context.service.name:
        summary += f", service {context.service.name}"
    lines.append(summary)
    return "\n".join(lines)


def estimate_tokens(text: str) -> int:
    return max(1, math.ceil(len(text.split()) * TOKENS_PER_WORD))


def _to_constraints(rules: Iterable[OwnedRule]) -> list[CompiledConstraint]:
    return [CompiledConstraint(id=r.rule.id, text=r.rule.text, source=r.pack_id) for r in rules]


class PromptCompiler:
    def __init__(
        self,
        registry: PackSource | None = None,
        config: AutoConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else PackRegistry()
        self._config = config

    @property
    def max_constraints(self) -> int:
        if self._config is None:
            return DEFAULT_MAX_CONSTRAINTS
        return self._config.max_constraints(DEFAULT_MAX_CONSTRAINTS)

    def compile(
        self,
        user_input: str,
        context: DetectedContext,
        pack_ids: list[str],
        *,
        enforce: bool = True,
    ) -> CompiledPrompt:
        """Build the final prompt.

        Raises EnforcementError when a block-level pattern matches and
        ``enforce`` is on; nothing is formatted in that case.
        """
        loaded = self._registry.load_packs(pack_ids)
        if loaded.missing:
            logger.info(f"Missing packs: {', '.join(loaded.missing)}")

        all_rules = flatten_rules(loaded.packs)
        include_all = self._config is not None and self._config.compilation.include_all_rules
        applicable = all_rules if include_all else filter_applicable(all_rules, context)

        enforcement = run_enforcement(user_input, applicable) if enforce else EnforcementResult()
        if enforcement.violations:
            raise EnforcementError(enforcement.violations)

        constraints = _to_constraints(applicable[: max(0, self.max_constraints)])

        formatted = format_compiled_prompt(user_input, constraints, context)
        reference = format_compiled_prompt(user_input, _to_constraints(all_rules), context)

        compiled_tokens = estimate_tokens(formatted)
        original_tokens = estimate_tokens(reference)
        savings = (
            (original_tokens - compiled_tokens) / original_tokens * 100 if original_tokens > 0 else 0.0
        )

        return CompiledPrompt(
            task=user_input,
            constraints=constraints,
            context=ContextSummary(
                project=str(context.project.type),
                service=context.service.name,
                framework=context.project.framework,
            ),
            stats=CompileStats(
                original_tokens=original_tokens,
                compiled_tokens=compiled_tokens,
                savings=round(savings, 1),
                rule_count=len(constraints),
                missing_packs=loaded.missing,
            ),
            enforcement_warnings=enforcement.warnings,
            formatted=formatted,
        )
