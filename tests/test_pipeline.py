"""Tests for pipeline.py: detect -> select -> compile end to end."""

from __future__ import annotations

from pathlib import Path

import pytest

from bebop.errors import EnforcementError
from bebop.pipeline import Pipeline
from tests.conftest import write, write_json, write_pack

SECURITY_RULES = [
    {
        "id": "sec-001",
        "text": "Never hardcode secrets",
        "enforce": {"type": "secret-scan", "patterns": ["password\\s*="]},
    }
]
NEST_RULES = [{"id": "nest-001", "text": "Use DTOs for request bodies"}]


@pytest.fixture
def repo(tmp_path: Path, no_git) -> Path:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    write_json(root / "package.json", {"dependencies": {"@nestjs/core": "10"}})
    write(root / "src" / "main.ts", "bootstrap()")
    write_pack(root / "packs", "security.md", "core/security", SECURITY_RULES, markdown=True)
    write_pack(root / "packs", "nestjs.yaml", "framework/nestjs", NEST_RULES)
    return root


class TestPipelineRun:
    def test_end_to_end(self, repo, settings):
        result = Pipeline(repo, settings).run("Add a login endpoint")

        assert result.context.project.framework == "nestjs"
        assert "framework/nestjs" in result.selection.packs
        assert [c.id for c in result.prompt.constraints] == ["sec-001", "nest-001"]
        assert "core/code-quality" in result.prompt.stats.missing_packs
        assert result.prompt.formatted.startswith("Task: Add a login endpoint")

    def test_explicit_packs_replace_selection(self, repo, settings):
        result = Pipeline(repo, settings).run("Add a login endpoint", pack_ids=["framework/nestjs"])
        assert result.selection.packs == ["framework/nestjs"]
        assert result.selection.reasons == {"framework/nestjs": ["explicit"]}
        assert [c.id for c in result.prompt.constraints] == ["nest-001"]

    def test_directive_beats_explicit_packs(self, repo, settings):
        result = Pipeline(repo, settings).run(
            "&use core/security Add a login endpoint", pack_ids=["framework/nestjs"]
        )
        assert result.selection.packs == ["core/security"]
        assert result.prompt.task == "Add a login endpoint"

    def test_enforcement_blocks(self, repo, settings):
        with pytest.raises(EnforcementError):
            Pipeline(repo, settings).run("set password = hunter2")

    def test_enforcement_disabled(self, repo, settings):
        result = Pipeline(repo, settings).run("set password = hunter2", enforce=False)
        assert result.prompt.stats.rule_count == 2

    def test_auto_config_applies(self, repo, settings):
        write(
            repo / ".bebop-auto.yaml",
            "packs:\n  always_include: []\ncompilation:\n  max_constraints: 1\n",
        )
        pipeline = Pipeline(repo, settings)
        assert pipeline.config is not None
        result = pipeline.run("Add a login endpoint")
        assert "core/security" not in result.selection.packs
        assert [c.id for c in result.prompt.constraints] == ["nest-001"]

    def test_user_packs_searched_first(self, repo, settings):
        write_pack(
            settings.user_packs_dir,
            "mine.yaml",
            "framework/nestjs",
            [{"id": "mine-001", "text": "House style"}],
        )
        result = Pipeline(repo, settings).run("x", pack_ids=["framework/nestjs"])
        assert [c.id for c in result.prompt.constraints] == ["mine-001"]

    def test_explicit_packs_all_missing_are_reported(self, repo, settings):
        result = Pipeline(repo, settings).run("x", pack_ids=["team/nope", "team/gone"])
        assert result.prompt.stats.missing_packs == ["team/nope", "team/gone"]
        assert result.prompt.constraints == []

    def test_directive_packs_all_missing_are_reported(self, repo, settings):
        result = Pipeline(repo, settings).run("&use team/nope team/gone do it")
        assert result.prompt.stats.missing_packs == ["team/nope", "team/gone"]
        assert result.prompt.task == "do it"

    def test_partial_explicit_packs_compile(self, repo, settings):
        result = Pipeline(repo, settings).run("x", pack_ids=["team/nope", "framework/nestjs"])
        assert result.prompt.stats.missing_packs == ["team/nope"]


class TestDirectiveHandling:
    def test_task_detected_from_cleaned_input(self, repo, settings):
        write_pack(repo / "packs", "spec.yaml", "spec", NEST_RULES)
        result = Pipeline(repo, settings).run("&pack spec update readme")

        assert result.selection.packs == ["spec"]
        assert result.context.task.keywords == ["documentation"]
        assert result.context.task.type == "documentation"
        assert result.prompt.task == "update readme"

    def test_use_directive_packs_not_counted_as_words(self, repo, settings):
        result = Pipeline(repo, settings).run(
            "&use core/security core/code-quality framework/nestjs fix the login"
        )
        assert result.selection.packs == ["core/security", "core/code-quality", "framework/nestjs"]
        assert result.context.task.keywords == ["bugfix"]
        assert result.context.task.complexity == "low"

    def test_auto_ignores_directives(self, repo, settings):
        result = Pipeline(repo, settings).run("&use core/security fix login", auto=True)
        assert "framework/nestjs" in result.selection.packs
        assert "directive" not in {tag for tags in result.selection.reasons.values() for tag in tags}
        assert result.prompt.task == "&use core/security fix login"
