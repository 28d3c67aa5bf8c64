"""Pattern-based enforcement of pack rules against raw task input."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any, Protocol

from bebop.compiler.models import EnforcementResult, EnforcementViolation
from bebop.packs.models import EnforcementLevel, EnforceSpec, OwnedRule

logger = logging.getLogger(__name__)

# ``/body/flags`` literal flags; g/u/y have no Python equivalent and are accepted as no-ops
_FLAG_MAP: dict[str, int] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
    "y": 0,
}


class PatternMatcher(Protocol):
    def search(self, text: str) -> Any: ...


def compile_pattern(pattern: str) -> PatternMatcher | None:
    """Compile a pattern string; None when it is empty or invalid.

    ``/body/flags`` uses the given flags (case-insensitive when none are given);
    anything else compiles case-insensitively.
    """
    trimmed = pattern.strip()
    if not trimmed:
        return None

    last_slash = trimmed.rfind("/")
    if trimmed.startswith("/") and last_slash > 0:
        body = trimmed[1:last_slash]
        flag_chars = trimmed[last_slash + 1 :] or "i"
        flags = 0
        for ch in flag_chars:
            if ch not in _FLAG_MAP:
                logger.debug(f"Skipping pattern with unsupported flag {ch!r}: {pattern}")
                return None
            flags |= _FLAG_MAP[ch]
        return _compile(body, flags)

    return _compile(trimmed, re.IGNORECASE)


def _compile(body: str, flags: int) -> re.Pattern[str] | None:
    try:
        return re.compile(body, flags)
    except re.error as e:
        logger.debug(f"Skipping invalid pattern {body!r}: {e}")
        return None


def extract_patterns(spec: EnforceSpec) -> list[str]:
    if spec.type == "diff-scan":
        raw = spec.deny_patterns or spec.patterns
    else:
        raw = spec.patterns or spec.deny_patterns
    return normalize_patterns(raw)


def normalize_patterns(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        return [s for s in (str(p) for p in raw if p is not None) if s]
    return [str(raw)]


def run_enforcement(text: str, rules: Iterable[OwnedRule]) -> EnforcementResult:
    """Scan ``text`` with every rule's enforce patterns, in rule-then-pattern order."""
    result = EnforcementResult()
    for owned in rules:
        spec = owned.rule.enforce
        if spec is None or not spec.type:
            continue

        level = EnforcementLevel.WARN if spec.level == "warn" else EnforcementLevel.BLOCK
        for pattern in extract_patterns(spec):
            matcher = compile_pattern(pattern)
            if matcher is None or not matcher.search(text):
                continue
            entry = EnforcementViolation(
                rule_id=owned.rule.id,
                pack_id=owned.pack_id,
                type=spec.type,
                pattern=pattern,
                level=level,
            )
            if level == EnforcementLevel.WARN:
                result.warnings.append(entry)
            else:
                result.violations.append(entry)
    return result
