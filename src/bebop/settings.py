"""Process-level settings resolved once at the pipeline entry point."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

PR_ENV_KEYS = ("GITHUB_HEAD_REF", "CI_PULL_REQUEST", "GITHUB_EVENT_NAME")


@dataclass(frozen=True)
class BebopSettings:
    workspace_root: Path | None = None
    registry_root: Path | None = None
    home: Path = field(default_factory=Path.home)
    ci_env: Mapping[str, str] = field(default_factory=dict)
    enforce: bool = True

    @property
    def user_packs_dir(self) -> Path:
        return self.home / ".bebop" / "packs"

    def resolved_registry_root(self) -> Path:
        return self.registry_root or (self.home / ".bebop")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BebopSettings:
        """Snapshot the environment variables bebop understands."""
        env = os.environ if environ is None else environ
        workspace = env.get("BEBOP_WORKSPACE")
        registry = env.get("BEBOP_REGISTRY")
        return cls(
            workspace_root=Path(workspace).resolve() if workspace else None,
            registry_root=Path(registry).expanduser() if registry else None,
            ci_env={k: env[k] for k in PR_ENV_KEYS if env.get(k)},
            # BEBOP_ENFORCE=0 turns enforcement off globally
            enforce=env.get("BEBOP_ENFORCE") != "0",
        )
