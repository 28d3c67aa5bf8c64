"""Workspace heuristics: git root, service name, source languages."""

from __future__ import annotations

import logging
import os
import re
from collections import deque
from pathlib import Path

from bebop.detection.models import WorkspaceInfo
from bebop.fs_utils import file_exists, normalize_path

logger = logging.getLogger(__name__)

MAX_ROOT_HOPS = 50
MAX_LANGUAGE_FILES = 100

SKIP_DIRS = {
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    "vendor",
}

# Checked in order against the cwd path relative to the repo root
SERVICE_PATTERNS = [
    re.compile(r"(?:^|/)services/([\w-]+)"),
    re.compile(r"(?:^|/)apps/([\w-]+)"),
    re.compile(r"(?:^|/)packages/([\w-]+)"),
    re.compile(r"(?:^|/)src/([\w-]+)"),
]

SERVICE_MANIFESTS = ("package.json", "go.mod", "pyproject.toml")

EXTENSION_LANGUAGES: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".swift": "swift",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
}


def find_git_root(start: Path, max_hops: int = MAX_ROOT_HOPS) -> Path | None:
    """Walk upward from ``start`` looking for a ``.git`` directory."""
    current = start.resolve()
    for _ in range(max_hops):
        try:
            if (current / ".git").is_dir():
                return current
        except OSError:
            pass
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def infer_service_name(cwd: Path, root: Path | None) -> str | None:
    if root is None:
        return None

    try:
        relative = normalize_path(os.path.relpath(cwd, root))
    except ValueError:
        relative = ""
    for pattern in SERVICE_PATTERNS:
        match = pattern.search(relative)
        if match:
            return match.group(1)

    if any(file_exists(cwd / name) for name in SERVICE_MANIFESTS):
        return cwd.name
    return None


def walk_files(start: Path, max_files: int = MAX_LANGUAGE_FILES) -> list[Path]:
    """Breadth-first file listing, capped at ``max_files`` entries."""
    files: list[Path] = []
    queue: deque[Path] = deque([start])
    while queue and len(files) < max_files:
        current = queue.popleft()
        try:
            entries = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {current}: {e}")
            continue
        for entry in entries:
            if len(files) >= max_files:
                break
            if entry.name in SKIP_DIRS:
                continue
            try:
                if entry.is_dir():
                    queue.append(entry)
                elif entry.is_file():
                    files.append(entry)
            except OSError:
                continue
    return files


def detect_languages(start: Path, max_files: int = MAX_LANGUAGE_FILES) -> list[str]:
    languages: dict[str, None] = {}
    for path in walk_files(start, max_files):
        language = EXTENSION_LANGUAGES.get(path.suffix.lower())
        if language:
            languages[language] = None
    return list(languages)


class WorkspaceDetector:
    def __init__(self, max_files: int = MAX_LANGUAGE_FILES) -> None:
        self._max_files = max_files

    def detect(self, cwd: Path) -> WorkspaceInfo:
        working_dir = cwd.resolve()
        git_root = find_git_root(working_dir)
        return WorkspaceInfo(
            root=str(git_root or working_dir),
            service=infer_service_name(working_dir, git_root),
            languages=detect_languages(working_dir, self._max_files),
            path=str(working_dir),
            is_git_repo=git_root is not None,
        )
