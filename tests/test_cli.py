"""Tests for cli.py: argument parsing, output and exit codes."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from bebop.cli import _parse_pack_list, main
from tests.conftest import write_json, write_pack

RULES = [
    {
        "id": "sec-001",
        "text": "Never hardcode secrets",
        "enforce": {"type": "secret-scan", "patterns": ["password\\s*="]},
    }
]


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "BEBOP_WORKSPACE",
        "BEBOP_REGISTRY",
        "BEBOP_ENFORCE",
        "GITHUB_HEAD_REF",
        "CI_PULL_REQUEST",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def repo(tmp_path: Path, home: Path, no_git) -> Path:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    write_json(root / "package.json", {"dependencies": {"express": "4"}})
    write_pack(root / "packs", "security.yaml", "core/security", RULES)
    return root


class TestParsePackList:
    def test_json_list(self):
        assert _parse_pack_list('["a/b", "c/d"]') == ["a/b", "c/d"]

    def test_json_object(self):
        assert _parse_pack_list('{"packs": ["a/b"]}') == ["a/b"]

    def test_comma_and_space_separated(self):
        assert _parse_pack_list("a/b, c/d e/f") == ["a/b", "c/d", "e/f"]

    def test_empty(self):
        assert _parse_pack_list(None) == []
        assert _parse_pack_list("") == []


class TestCompileCommand:
    def test_prints_prompt(self, repo, capsys):
        main(["compile", "--cwd", str(repo), "Add", "a", "route"])
        out = capsys.readouterr()
        assert out.out.startswith("Task: Add a route")
        assert "[sec-001]" in out.out
        assert "Missing packs:" in out.err

    def test_json_output(self, repo, capsys):
        main(["compile", "--cwd", str(repo), "--json", "--packs", "core/security", "Add a route"])
        data = json.loads(capsys.readouterr().out)
        assert data["constraints"][0]["id"] == "sec-001"
        assert data["stats"]["missing_packs"] == []

    def test_enforcement_failure_exits(self, repo, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["compile", "--cwd", str(repo), "set password = x"])
        assert exc_info.value.code == 1
        assert "ENFORCEMENT_FAILED" in capsys.readouterr().err

    def test_unknown_explicit_pack_still_compiles(self, repo, capsys):
        main(["compile", "--cwd", str(repo), "--packs", "team/nope", "Add a route"])
        out = capsys.readouterr()
        assert out.out.startswith("Task: Add a route")
        assert "Missing packs: team/nope" in out.err

    def test_enforce_env_off(self, repo, capsys, monkeypatch):
        monkeypatch.setenv("BEBOP_ENFORCE", "0")
        main(["compile", "--cwd", str(repo), "set password = x"])
        assert "[sec-001]" in capsys.readouterr().out

    def test_auto_flag_ignores_directives(self, repo, capsys):
        main(["compile", "--cwd", str(repo), "--auto", "--json", "&use team/nope Add a route"])
        data = json.loads(capsys.readouterr().out)
        assert data["task"] == "&use team/nope Add a route"
        assert "team/nope" not in data["stats"]["missing_packs"]
        assert data["constraints"][0]["id"] == "sec-001"

    def test_no_enforce_flag(self, repo, capsys):
        main(["compile", "--cwd", str(repo), "--no-enforce", "set password = x"])
        assert "[sec-001]" in capsys.readouterr().out

    def test_reads_stdin(self, repo, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Fix the bug\n"))
        main(["compile", "--cwd", str(repo)])
        assert capsys.readouterr().out.startswith("Task: Fix the bug")

    def test_empty_input_exits(self, repo, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(SystemExit):
            main(["compile", "--cwd", str(repo)])

    def test_show_selected_packs(self, repo, capsys):
        (repo / ".bebop-auto.yaml").write_text("debug:\n  show_selected_packs: true\n")
        main(["compile", "--cwd", str(repo), "Add a route"])
        assert "Selected packs: core/security" in capsys.readouterr().err


class TestInspectCommands:
    def test_detect(self, repo, capsys):
        main(["detect", "--cwd", str(repo), "write unit tests"])
        data = json.loads(capsys.readouterr().out)
        assert data["project"]["framework"] == "express"
        assert data["task"]["type"] == "test"

    def test_select(self, repo, capsys):
        main(["select", "--cwd", str(repo), "improve performance"])
        data = json.loads(capsys.readouterr().out)
        assert "framework/express" in data["packs"]
        assert data["reasons"]["tasks/performance"] == ["keyword:performance"]


class TestPacksCommands:
    def test_list(self, repo, capsys):
        main(["packs", "list", "--cwd", str(repo)])
        out = capsys.readouterr().out
        assert "core/security@1  (1 rules)" in out

    def test_import_then_conflict(self, repo, home, capsys):
        source = write_pack(repo / "incoming", "team.yaml", "team/rules", RULES)
        main(["packs", "import", str(source)])
        assert "Imported" in capsys.readouterr().out
        assert (home / ".bebop" / "packs" / "team.yaml").is_file()

        with pytest.raises(SystemExit):
            main(["packs", "import", str(source)])
        assert "PACK_IMPORT_FAILED" in capsys.readouterr().err

        main(["packs", "import", str(source), "--force"])
        assert "Replaced" in capsys.readouterr().out

    def test_no_command(self, home, capsys):
        with pytest.raises(SystemExit):
            main([])
