"""Tests for fs_utils.py: upward search and glob matching."""

from __future__ import annotations

from bebop.fs_utils import (
    file_exists,
    find_up,
    glob_to_regex,
    matches_glob,
    normalize_path,
    read_text_if_exists,
)
from tests.conftest import write


class TestFileHelpers:
    def test_file_exists(self, tmp_path):
        assert file_exists(write(tmp_path / "a.txt"))
        assert not file_exists(tmp_path / "missing.txt")

    def test_read_text_if_exists_missing_returns_none(self, tmp_path):
        assert read_text_if_exists(tmp_path / "nope") is None

    def test_read_text_if_exists_reads_content(self, tmp_path):
        assert read_text_if_exists(write(tmp_path / "a.txt", "hello")) == "hello"

    def test_normalize_path_uses_forward_slashes(self):
        assert normalize_path("a\\b\\c") == "a/b/c"


class TestFindUp:
    def test_finds_in_start_dir(self, tmp_path):
        target = write(tmp_path / "package.json", "{}")
        assert find_up(tmp_path, ["package.json"]) == target

    def test_finds_in_ancestor(self, tmp_path):
        target = write(tmp_path / "package.json", "{}")
        deep = tmp_path / "a" / "b"
        deep.mkdir(parents=True)
        assert find_up(deep, ["package.json"]) == target

    def test_first_name_wins_within_directory(self, tmp_path):
        write(tmp_path / "second.yml")
        first = write(tmp_path / "first.yaml")
        assert find_up(tmp_path, ["first.yaml", "second.yml"]) == first

    def test_stop_at_bounds_search(self, tmp_path):
        write(tmp_path / "package.json", "{}")
        stop = tmp_path / "repo"
        deep = stop / "pkg"
        deep.mkdir(parents=True)
        assert find_up(deep, ["package.json"], stop_at=stop) is None

    def test_stop_at_itself_is_checked(self, tmp_path):
        stop = tmp_path / "repo"
        target = write(stop / "package.json", "{}")
        deep = stop / "pkg"
        deep.mkdir()
        assert find_up(deep, ["package.json"], stop_at=stop) == target


class TestGlob:
    def test_single_star_stays_in_segment(self):
        assert matches_glob("services/*", "services/api")
        assert not matches_glob("services/*", "services/api/src")

    def test_double_star_spans_segments(self):
        assert matches_glob("services/**", "services/api/src")
        assert matches_glob("**", "anything/at/all")

    def test_dots_are_literal(self):
        assert matches_glob("a.b", "a.b")
        assert not matches_glob("a.b", "axb")

    def test_question_mark_matches_one_char(self):
        assert matches_glob("app?", "app1")
        assert not matches_glob("app?", "app")

    def test_anchored(self):
        assert glob_to_regex("api").match("api")
        assert not matches_glob("api", "services/api")

    def test_whitespace_trimmed(self):
        assert matches_glob(" apps/web ", "apps/web")
