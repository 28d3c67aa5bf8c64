"""PackSelector: map a detected context and task text to pack identifiers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bebop.config import OVERRIDE_KEYWORDS, AutoConfig
from bebop.detection.models import DetectedContext
from bebop.directives import parse_directives
from bebop.packs.models import PackSelection

logger = logging.getLogger(__name__)


@dataclass
class SelectionRules:
    always_include: list[str] = field(default_factory=list)
    by_project_type: dict[str, list[str]] = field(default_factory=dict)
    by_language: dict[str, list[str]] = field(default_factory=dict)
    by_framework: dict[str, list[str]] = field(default_factory=dict)
    by_service: dict[str, list[str]] = field(default_factory=dict)
    keywords: dict[str, list[str]] = field(default_factory=dict)


DEFAULT_RULES = SelectionRules(
    always_include=["core/security", "core/code-quality"],
    by_project_type={
        "frontend": ["framework/react"],
        "backend": ["framework/nestjs"],
        "mobile": ["framework/react-native"],
        "library": [],
    },
    by_language={
        "typescript": ["core/typescript"],
        "javascript": ["core/javascript"],
        "python": ["core/python"],
        "go": ["core/go"],
        "rust": ["core/rust"],
    },
    by_framework={
        "nestjs": ["framework/nestjs"],
        "express": ["framework/express"],
        "react": ["framework/react"],
        "nextjs": ["framework/nextjs"],
        "vue": ["framework/vue"],
        "nuxt": ["framework/nuxt"],
        "angular": ["framework/angular"],
        "svelte": ["framework/svelte"],
        "django": ["framework/django"],
        "flask": ["framework/flask"],
        "fastapi": ["framework/fastapi"],
        "rails": ["framework/rails"],
        "spring": ["framework/spring"],
        "react-native": ["framework/react-native"],
    },
    keywords={
        "test": ["tasks/testing"],
        "security": ["tasks/security"],
        "performance": ["tasks/performance"],
    },
)


class _Selection:
    """Insertion-ordered pack set with per-pack reason tags."""

    def __init__(self) -> None:
        self.packs: dict[str, None] = {}
        self.reasons: dict[str, list[str]] = {}

    def add(self, packs: list[str], reason: str) -> None:
        for pack in packs:
            if not pack:
                continue
            self.packs[pack] = None
            self.reasons.setdefault(pack, []).append(reason)

    def remove(self, packs: list[str], reason: str) -> None:
        for pack in packs:
            self.packs.pop(pack, None)
            self.reasons.setdefault(pack, []).append(reason)


class PackSelector:
    def __init__(self, config: AutoConfig | None = None, rules: SelectionRules = DEFAULT_RULES) -> None:
        self._config = config
        self._rules = rules

    def select(
        self,
        context: DetectedContext,
        user_input: str | None = None,
        *,
        allow_directives: bool = True,
    ) -> PackSelection:
        """Pick packs for ``context``.

        Inline ``&use``/``&pack`` directives in ``user_input`` short-circuit
        automatic selection: only the named packs are returned.
        """
        cleaned = user_input or ""
        if user_input and allow_directives:
            parsed = parse_directives(user_input)
            cleaned = parsed.cleaned_input or user_input
            if parsed.packs:
                selection = _Selection()
                selection.add(parsed.packs, "directive")
                return PackSelection(
                    packs=list(selection.packs),
                    reasons=selection.reasons,
                    cleaned_input=cleaned,
                )

        selection = self._auto_select(context)
        logger.debug(f"Selected packs: {list(selection.packs)}")
        return PackSelection(
            packs=[p for p in selection.packs if p],
            reasons=selection.reasons,
            cleaned_input=cleaned,
        )

    def _auto_select(self, context: DetectedContext) -> _Selection:
        config = self._config
        rules = self._rules
        auto = config.packs.auto_select if config else None
        selection = _Selection()

        always = config.packs.always_include if config else None
        selection.add(always if always is not None else rules.always_include, "always")

        project_type = str(context.project.type)
        if auto is None or auto.type_specific:
            selection.add(rules.by_project_type.get(project_type, []), f"project:{project_type}")

        if auto is None or auto.language_specific:
            for lang in context.project.language:
                selection.add(rules.by_language.get(lang, []), f"language:{lang}")

        framework = context.project.framework
        if framework and (auto is None or auto.framework_specific):
            selection.add(rules.by_framework.get(framework, []), f"framework:{framework}")

        service = context.service.name
        if service and (auto is None or auto.service_specific):
            selection.add([f"services/{service}"], f"service:{service}")
            selection.add(rules.by_service.get(service, []), f"service:{service}")

        keywords = context.task.keywords
        if auto is None or auto.keyword_specific:
            for keyword in keywords:
                selection.add(rules.keywords.get(keyword, []), f"keyword:{keyword}")
            for keyword, packs in (config.keywords if config else {}).items():
                if keyword in keywords:
                    selection.add(packs, f"keyword:{keyword}")

        if config and config.packs.additional:
            selection.add(config.packs.additional, "config:additional")

        if config:
            self._apply_keyword_overrides(selection, keywords, config)
        return selection

    def _apply_keyword_overrides(
        self, selection: _Selection, keywords: list[str], config: AutoConfig
    ) -> None:
        overrides = config.compilation.keyword_overrides
        for keyword in OVERRIDE_KEYWORDS:
            override = overrides.get(keyword)
            if override is None or keyword not in keywords:
                continue
            # Removal runs after addition and can undo any earlier stage
            selection.add(override.add_packs, f"override:{keyword}")
            selection.remove(override.remove_packs, f"removed:{keyword}")
