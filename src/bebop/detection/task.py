"""Keyword-based classification of free-text task descriptions."""

from __future__ import annotations

from bebop.detection.models import TaskComplexity, TaskContext, TaskType

KEYWORD_SETS: dict[str, tuple[str, ...]] = {
    "test": ("test", "tests", "testing", "spec", "specs", "unit", "e2e", "integration", "coverage"),
    "security": (
        "security",
        "secure",
        "auth",
        "authentication",
        "jwt",
        "oauth",
        "password",
        "encryption",
    ),
    "performance": (
        "performance",
        "optimize",
        "optimization",
        "latency",
        "throughput",
        "speed",
        "fast",
    ),
    "refactor": ("refactor", "cleanup", "restructure", "rewrite", "simplify"),
    "documentation": ("doc", "docs", "documentation", "readme", "changelog"),
    "bugfix": ("bug", "fix", "error", "issue", "crash", "broken", "failure"),
    "feature": ("feature", "add", "create", "implement", "build", "support"),
}

ARCHITECTURE_SIGNALS = frozenset({"system", "architecture", "migration", "refactor"})

# First category present decides the task type
TYPE_PRECEDENCE: list[tuple[str, TaskType]] = [
    ("bugfix", TaskType.BUGFIX),
    ("test", TaskType.TEST),
    ("refactor", TaskType.REFACTOR),
    ("documentation", TaskType.DOCUMENTATION),
    ("feature", TaskType.FEATURE),
]

LOW_COMPLEXITY_MAX_WORDS = 4
HIGH_COMPLEXITY_MIN_WORDS = 15


def analyze_task(text: str | None) -> TaskContext:
    if not text:
        return TaskContext()

    tokens = text.lower().split()
    token_set = set(tokens)
    keywords = [kw for kw, variants in KEYWORD_SETS.items() if token_set.intersection(variants)]

    complexity = TaskComplexity.MEDIUM
    if len(tokens) <= LOW_COMPLEXITY_MAX_WORDS:
        complexity = TaskComplexity.LOW
    elif len(tokens) >= HIGH_COMPLEXITY_MIN_WORDS:
        complexity = TaskComplexity.HIGH
    if token_set & ARCHITECTURE_SIGNALS:
        complexity = TaskComplexity.HIGH

    task_type = next((t for kw, t in TYPE_PRECEDENCE if kw in keywords), TaskType.UNKNOWN)
    return TaskContext(keywords=keywords, complexity=complexity, type=task_type)
