"""Pipeline: detect -> select -> compile, wired from one settings snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from bebop.compiler.compiler import PromptCompiler
from bebop.compiler.models import CompiledPrompt
from bebop.config import AutoConfig, load_auto_config
from bebop.detection.context import ContextDetector
from bebop.detection.models import DetectedContext
from bebop.directives import parse_directives
from bebop.packs.manager import build_registry
from bebop.packs.models import PackSelection
from bebop.packs.registry import PackRegistry
from bebop.packs.selector import PackSelector
from bebop.settings import BebopSettings

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    context: DetectedContext
    selection: PackSelection
    prompt: CompiledPrompt


class Pipeline:
    """Entry point used by the CLI; the auto-config is loaded once per instance."""

    def __init__(
        self,
        cwd: Path | None = None,
        settings: BebopSettings | None = None,
        *,
        config: AutoConfig | None = None,
        registry: PackRegistry | None = None,
    ) -> None:
        self.cwd = (cwd or Path.cwd()).resolve()
        self.settings = settings or BebopSettings.from_env()
        self.config = config if config is not None else load_auto_config(self.cwd)
        self.detector = ContextDetector(self.settings, self.config)
        self.selector = PackSelector(self.config)
        self._registry = registry
        if self.config and self.config.path:
            logger.debug(f"Using auto-config {self.config.path}")

    def registry_for(self, context: DetectedContext) -> PackRegistry:
        if self._registry is None:
            root = Path(context.workspace.root) if context.workspace else self.cwd
            self._registry = build_registry(self.settings, root)
        return self._registry

    def detect(self, user_input: str | None = None) -> DetectedContext:
        return self.detector.detect(self.cwd, user_input)

    def select(
        self,
        context: DetectedContext,
        user_input: str | None = None,
        *,
        allow_directives: bool = True,
    ) -> PackSelection:
        return self.selector.select(context, user_input, allow_directives=allow_directives)

    def compile(
        self,
        user_input: str,
        context: DetectedContext,
        pack_ids: list[str],
        *,
        enforce: bool = True,
    ) -> CompiledPrompt:
        compiler = PromptCompiler(self.registry_for(context), self.config)
        return compiler.compile(user_input, context, pack_ids, enforce=enforce)

    def run(
        self,
        user_input: str,
        *,
        pack_ids: list[str] | None = None,
        enforce: bool = True,
        auto: bool = False,
    ) -> PipelineResult:
        """Detect, select (unless ``pack_ids`` is given) and compile in sequence.

        Detection and compilation see the input with directives removed.
        ``auto`` ignores directives and keeps the text as typed. Packs that
        cannot be found end up in ``stats.missing_packs``.
        """
        cleaned = user_input
        if not auto:
            cleaned = parse_directives(user_input).cleaned_input or user_input
        context = self.detect(cleaned)
        selection = self.select(context, user_input, allow_directives=not auto)
        directive_driven = any("directive" in tags for tags in selection.reasons.values())
        if pack_ids and not directive_driven:
            selection = PackSelection(
                packs=list(pack_ids),
                reasons={p: ["explicit"] for p in pack_ids},
                cleaned_input=selection.cleaned_input,
            )

        task = selection.cleaned_input or cleaned
        prompt = self.compile(task, context, selection.packs, enforce=enforce)
        if self.config and self.config.debug.show_compiled_prompt:
            logger.debug(f"Compiled prompt:\n{prompt.formatted}")
        return PipelineResult(context=context, selection=selection, prompt=prompt)
