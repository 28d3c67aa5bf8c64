"""Tests for settings.py: environment snapshot."""

from __future__ import annotations

from pathlib import Path

from bebop.settings import BebopSettings


class TestFromEnv:
    def test_defaults(self):
        settings = BebopSettings.from_env({})
        assert settings.workspace_root is None
        assert settings.registry_root is None
        assert settings.enforce is True
        assert settings.ci_env == {}

    def test_enforce_disabled_only_by_zero(self):
        assert BebopSettings.from_env({"BEBOP_ENFORCE": "0"}).enforce is False
        assert BebopSettings.from_env({"BEBOP_ENFORCE": "false"}).enforce is True
        assert BebopSettings.from_env({"BEBOP_ENFORCE": "1"}).enforce is True

    def test_paths_and_ci_keys(self, tmp_path):
        settings = BebopSettings.from_env(
            {
                "BEBOP_WORKSPACE": str(tmp_path),
                "BEBOP_REGISTRY": str(tmp_path / "reg"),
                "GITHUB_HEAD_REF": "feature/x",
                "CI_PULL_REQUEST": "",
                "UNRELATED": "1",
            }
        )
        assert settings.workspace_root == tmp_path.resolve()
        assert settings.resolved_registry_root() == tmp_path / "reg"
        assert settings.ci_env == {"GITHUB_HEAD_REF": "feature/x"}

    def test_registry_defaults_under_home(self):
        settings = BebopSettings(home=Path("/h"))
        assert settings.resolved_registry_root() == Path("/h/.bebop")
        assert settings.user_packs_dir == Path("/h/.bebop/packs")
