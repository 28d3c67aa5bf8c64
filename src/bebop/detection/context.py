"""ContextDetector: turn a working directory and task text into a DetectedContext."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bebop.config import AutoConfig, load_auto_config
from bebop.detection.git import detect_git_context
from bebop.detection.models import (
    DetectedContext,
    MonorepoType,
    ProjectInfo,
    ProjectType,
    ServiceContext,
    WorkspaceContext,
)
from bebop.detection.task import analyze_task
from bebop.detection.workspace import WorkspaceDetector
from bebop.fs_utils import file_exists, find_up, normalize_path, read_text_if_exists
from bebop.probe import Probe
from bebop.settings import BebopSettings

logger = logging.getLogger(__name__)

# Enumeration order decides ties: the first framework with a matching dependency wins
FRAMEWORK_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    "nestjs": ("@nestjs/core", "@nestjs/common", "@nestjs/platform-express"),
    "express": ("express",),
    "fastify": ("fastify",),
    "koa": ("koa",),
    "react": ("react",),
    "nextjs": ("next",),
    "vue": ("vue",),
    "nuxt": ("nuxt",),
    "angular": ("@angular/core",),
    "svelte": ("svelte",),
    "react-native": ("react-native",),
}

FRONTEND_FRAMEWORKS = frozenset({"react", "nextjs", "vue", "nuxt", "angular", "svelte"})
BACKEND_FRAMEWORKS = frozenset(
    {"nestjs", "express", "fastify", "koa", "django", "flask", "rails", "spring"}
)
MOBILE_FRAMEWORKS = frozenset({"react-native", "flutter"})

PYTHON_FRAMEWORKS = ("django", "flask", "fastapi")

DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

SERVICE_ROOT_MANIFESTS = ("package.json", "pyproject.toml", "go.mod", "Cargo.toml", "Gemfile")

MONOREPO_MARKERS: list[tuple[str, MonorepoType]] = [
    ("nx.json", MonorepoType.NX),
    ("turbo.json", MonorepoType.TURBOREPO),
    ("lerna.json", MonorepoType.LERNA),
    ("pnpm-workspace.yaml", MonorepoType.PNPM),
]


@dataclass
class ManifestContext:
    """Manifest files visible from the service root and the workspace root."""

    root: Path
    scan_root: Path
    package_json: dict[str, Any] | None = None
    package_json_path: Path | None = None
    has_tsconfig: bool = False
    has_pyproject: bool = False
    has_requirements: bool = False
    has_go_mod: bool = False
    has_cargo_toml: bool = False
    has_gemfile: bool = False
    has_pom: bool = False
    has_gradle: bool = False

    def read_marker(self, name: str) -> str | None:
        for base in (self.scan_root, self.root):
            content = read_text_if_exists(base / name)
            if content is not None:
                return content
        return None

    def has_marker(self, name: str) -> bool:
        return file_exists(self.scan_root / name) or file_exists(self.root / name)

    @property
    def dependencies(self) -> set[str]:
        return collect_dependencies(self.package_json)


def read_json(path: Path) -> Probe[dict[str, Any] | None]:
    content = read_text_if_exists(path)
    if content is None:
        return Probe.missing(None, f"unreadable: {path}")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug(f"Invalid JSON in {path}: {e}")
        return Probe.missing(None, str(e))
    if not isinstance(data, dict):
        return Probe.missing(None, "not an object")
    return Probe.found(data)


def collect_dependencies(pkg: dict[str, Any] | None) -> set[str]:
    deps: set[str] = set()
    if not pkg:
        return deps
    for section in DEPENDENCY_SECTIONS:
        entries = pkg.get(section)
        if isinstance(entries, dict):
            deps.update(entries.keys())
    return deps


def find_service_root(cwd: Path, root: Path) -> Path | None:
    """Nearest directory between ``cwd`` and ``root`` holding a project manifest."""
    current = cwd.resolve()
    resolved_root = root.resolve()
    while True:
        if any(file_exists(current / name) for name in SERVICE_ROOT_MANIFESTS):
            return current
        if current == resolved_root:
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_manifest_context(root: Path, service_root: Path | None) -> ManifestContext:
    scan_root = service_root or root
    package_json_path = find_up(scan_root, ["package.json"], stop_at=root)
    package_json = read_json(package_json_path).value if package_json_path else None

    ctx = ManifestContext(
        root=root,
        scan_root=scan_root,
        package_json=package_json,
        package_json_path=package_json_path,
    )
    ctx.has_tsconfig = ctx.has_marker("tsconfig.json")
    ctx.has_pyproject = ctx.has_marker("pyproject.toml")
    ctx.has_requirements = ctx.has_marker("requirements.txt")
    ctx.has_go_mod = ctx.has_marker("go.mod")
    ctx.has_cargo_toml = ctx.has_marker("Cargo.toml")
    ctx.has_gemfile = ctx.has_marker("Gemfile")
    ctx.has_pom = ctx.has_marker("pom.xml")
    ctx.has_gradle = ctx.has_marker("build.gradle")
    return ctx


def detect_framework(manifest: ManifestContext) -> str | None:
    deps = manifest.dependencies
    if deps:
        for framework, identifiers in FRAMEWORK_DEPENDENCIES.items():
            if any(dep in deps for dep in identifiers):
                return framework

    if manifest.has_pyproject or manifest.has_requirements:
        framework = _detect_python_framework(manifest)
        if framework:
            return framework

    if manifest.has_gemfile:
        gemfile = manifest.read_marker("Gemfile")
        if gemfile and "rails" in gemfile.lower():
            return "rails"

    if manifest.has_pom or manifest.has_gradle:
        return "spring"

    return None


def _detect_python_framework(manifest: ManifestContext) -> str | None:
    files = []
    if manifest.has_pyproject:
        files.append("pyproject.toml")
    if manifest.has_requirements:
        files.append("requirements.txt")
    files.append("Pipfile")

    for name in files:
        content = manifest.read_marker(name)
        if not content:
            continue
        lowered = content.lower()
        for candidate in PYTHON_FRAMEWORKS:
            if candidate in lowered:
                return candidate

    if manifest.has_marker("manage.py"):
        return "django"
    return None


def detect_project_type(framework: str | None, manifest: ManifestContext) -> ProjectType:
    if framework:
        if framework in FRONTEND_FRAMEWORKS:
            return ProjectType.FRONTEND
        if framework in MOBILE_FRAMEWORKS:
            return ProjectType.MOBILE
        if framework in BACKEND_FRAMEWORKS:
            return ProjectType.BACKEND

    pkg = manifest.package_json
    if pkg and pkg.get("private") is False and (pkg.get("main") or pkg.get("module") or pkg.get("types")):
        return ProjectType.LIBRARY

    # Go/Python/Rust services and anything unrecognised default to backend
    return ProjectType.BACKEND


def detect_languages(workspace_languages: list[str], manifest: ManifestContext) -> list[str]:
    detected: dict[str, None] = dict.fromkeys(lang.lower() for lang in workspace_languages)

    deps = manifest.dependencies
    if "typescript" in deps:
        detected["typescript"] = None
    if "javascript" in deps:
        detected["javascript"] = None
    if manifest.has_tsconfig:
        detected["typescript"] = None
    if manifest.has_pyproject or manifest.has_requirements:
        detected["python"] = None
    if manifest.has_go_mod:
        detected["go"] = None
    if manifest.has_cargo_toml:
        detected["rust"] = None
    return list(detected)


def detect_monorepo(root: Path) -> tuple[bool, MonorepoType]:
    for marker, monorepo_type in MONOREPO_MARKERS:
        if file_exists(root / marker):
            return True, monorepo_type

    package_json = root / "package.json"
    if file_exists(package_json):
        pkg = read_json(package_json).value
        if pkg and pkg.get("workspaces"):
            return True, MonorepoType.YARN_WORKSPACES

    return False, MonorepoType.UNKNOWN


def apply_overrides(context: DetectedContext, config: AutoConfig | None) -> DetectedContext:
    """Apply explicit ``project`` overrides; each field is independent."""
    if config is None:
        return context

    overrides = config.project
    project_update: dict[str, Any] = {}
    if overrides.type:
        try:
            project_update["type"] = ProjectType(overrides.type)
        except ValueError:
            logger.warning(f"Ignoring unknown project type override: {overrides.type}")
    if overrides.framework:
        project_update["framework"] = overrides.framework
    if overrides.language is not None:
        project_update["language"] = list(dict.fromkeys(lang.lower() for lang in overrides.language))
    if overrides.is_monorepo is not None:
        project_update["is_monorepo"] = overrides.is_monorepo

    service_update: dict[str, Any] = {}
    if overrides.service_name:
        service_update["name"] = overrides.service_name

    if not project_update and not service_update:
        return context
    return context.model_copy(
        update={
            "project": context.project.model_copy(update=project_update),
            "service": context.service.model_copy(update=service_update),
        }
    )


class ContextDetector:
    def __init__(
        self,
        settings: BebopSettings | None = None,
        config: AutoConfig | None = None,
        *,
        workspace_detector: WorkspaceDetector | None = None,
    ) -> None:
        self._settings = settings or BebopSettings()
        self._config = config
        self._workspace_detector = workspace_detector or WorkspaceDetector()

    def detect(self, cwd: Path | None = None, user_input: str | None = None) -> DetectedContext:
        working_dir = (cwd or Path.cwd()).resolve()
        config = self._config if self._config is not None else load_auto_config(working_dir)

        workspace_info = self._workspace_detector.detect(working_dir)
        workspace_root = (self._settings.workspace_root or Path(workspace_info.root)).resolve()

        service_root = find_service_root(working_dir, workspace_root)
        manifest = load_manifest_context(workspace_root, service_root)
        framework = detect_framework(manifest)
        is_monorepo, monorepo_type = detect_monorepo(workspace_root)

        context = DetectedContext(
            project=ProjectInfo(
                type=detect_project_type(framework, manifest),
                framework=framework,
                language=detect_languages(workspace_info.languages, manifest),
                is_monorepo=is_monorepo,
                monorepo_type=monorepo_type,
            ),
            service=ServiceContext(
                name=workspace_info.service,
                root=str(service_root) if service_root else None,
            ),
            git=detect_git_context(working_dir, self._settings.ci_env),
            task=analyze_task(user_input),
            workspace=WorkspaceContext(
                root=str(workspace_root),
                cwd=str(working_dir),
                service_root=str(service_root) if service_root else None,
                relative_cwd=_relative(working_dir, workspace_root),
            ),
        )
        logger.debug(
            f"Detected {context.project.type} project "
            f"(framework={framework}, languages={context.project.language})"
        )
        return apply_overrides(context, config)


def _relative(path: Path, root: Path) -> str:
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        return "."
    return normalize_path(rel) if rel else "."
