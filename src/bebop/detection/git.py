"""Git branch and pull-request signals."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping
from pathlib import Path

from bebop.detection.models import BranchType, GitContext
from bebop.probe import Probe

logger = logging.getLogger(__name__)

_BRANCH_PREFIXES: list[tuple[tuple[str, ...], BranchType]] = [
    (("feature/", "feat/"), BranchType.FEATURE),
    (("bugfix/", "fix/"), BranchType.BUGFIX),
    (("release/",), BranchType.RELEASE),
]

_PR_EVENTS = {"pull_request", "pull_request_target"}


def read_current_branch(cwd: Path) -> Probe[str]:
    """Ask git for the checked-out branch. Empty when detached or unavailable."""
    try:
        result = subprocess.run(
            ["git", "branch", "--show-current"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=cwd,
        )
    except (FileNotFoundError, NotADirectoryError, subprocess.TimeoutExpired, OSError) as e:
        logger.debug(f"git branch probe failed: {e}")
        return Probe.missing("", str(e))
    if result.returncode != 0:
        return Probe.missing("", result.stderr.strip())
    branch = result.stdout.strip()
    if not branch:
        return Probe.missing("", "detached HEAD")
    return Probe.found(branch)


def classify_branch(branch: str) -> BranchType:
    if not branch:
        return BranchType.UNKNOWN
    if branch in ("main", "master"):
        return BranchType.MAIN
    for prefixes, branch_type in _BRANCH_PREFIXES:
        if branch.startswith(prefixes):
            return branch_type
    return BranchType.UNKNOWN


def is_pull_request(ci_env: Mapping[str, str]) -> bool:
    return bool(
        ci_env.get("GITHUB_HEAD_REF")
        or ci_env.get("CI_PULL_REQUEST")
        or ci_env.get("GITHUB_EVENT_NAME") in _PR_EVENTS
    )


def detect_git_context(cwd: Path, ci_env: Mapping[str, str]) -> GitContext:
    branch = read_current_branch(cwd).value
    return GitContext(
        branch=branch or "unknown",
        branch_type=classify_branch(branch),
        is_pr=is_pull_request(ci_env),
    )
