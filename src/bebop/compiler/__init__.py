"""Prompt compilation: applicability filtering, enforcement, formatting."""

from bebop.compiler.compiler import (
    PromptCompiler,
    estimate_tokens,
    filter_applicable,
    flatten_rules,
    format_compiled_prompt,
    rule_applies,
)
from bebop.compiler.enforcement import compile_pattern, run_enforcement
from bebop.compiler.models import (
    CompiledConstraint,
    CompiledPrompt,
    CompileStats,
    ContextSummary,
    EnforcementResult,
    EnforcementViolation,
)

__all__ = [
    "CompileStats",
    "CompiledConstraint",
    "CompiledPrompt",
    "ContextSummary",
    "EnforcementResult",
    "EnforcementViolation",
    "PromptCompiler",
    "compile_pattern",
    "estimate_tokens",
    "filter_applicable",
    "flatten_rules",
    "format_compiled_prompt",
    "rule_applies",
    "run_enforcement",
]
