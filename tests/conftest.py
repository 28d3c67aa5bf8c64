"""Shared fixtures for bebop tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from bebop.detection.models import (
    DetectedContext,
    ProjectInfo,
    ProjectType,
    ServiceContext,
    TaskContext,
    WorkspaceContext,
)
from bebop.settings import BebopSettings


def write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def write_json(path: Path, data: dict) -> Path:
    return write(path, json.dumps(data))


def write_pack(
    directory: Path,
    filename: str,
    pack_id: str,
    rules: list[dict],
    *,
    version: str | int | None = None,
    markdown: bool = False,
) -> Path:
    """Write a pack file; ``markdown=True`` wraps the YAML in a fenced block."""
    data: dict = {"id": pack_id, "rules": rules}
    if version is not None:
        data["version"] = version
    body = yaml.safe_dump(data, sort_keys=False)
    if markdown:
        body = f"# {pack_id}\n\nSome narrative text.\n\n```yaml\n{body}```\n\nMore notes.\n"
    return write(directory / filename, body)


def make_context(
    *,
    project_type: ProjectType = ProjectType.BACKEND,
    framework: str | None = None,
    languages: list[str] | None = None,
    service: str | None = None,
    keywords: list[str] | None = None,
    relative_cwd: str = ".",
) -> DetectedContext:
    return DetectedContext(
        project=ProjectInfo(type=project_type, framework=framework, language=languages or []),
        service=ServiceContext(name=service),
        task=TaskContext(keywords=keywords or []),
        workspace=WorkspaceContext(root="/repo", cwd="/repo", relative_cwd=relative_cwd),
    )


@pytest.fixture
def settings(tmp_path: Path) -> BebopSettings:
    """Settings isolated from the real home directory and CI environment."""
    home = tmp_path / "home"
    home.mkdir()
    return BebopSettings(home=home)


@pytest.fixture
def no_git(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make the git branch lookup report nothing."""
    from bebop.detection import git
    from bebop.probe import Probe

    monkeypatch.setattr(git, "read_current_branch", lambda cwd: Probe.missing("", "stubbed"))
