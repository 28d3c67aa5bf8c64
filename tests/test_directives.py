"""Tests for directives.py: &use / &pack parsing."""

from __future__ import annotations

from bebop.directives import parse_directives


class TestParseDirectives:
    def test_use_single_pack(self):
        parsed = parse_directives("&use core/security Implement login")
        assert parsed.packs == ["core/security"]
        assert parsed.cleaned_input == "Implement login"
        assert parsed.has_directives is True

    def test_use_multiple_packs(self):
        parsed = parse_directives("&use core/security core/python@v2 write the parser")
        assert parsed.packs == ["core/security", "core/python@v2"]
        assert parsed.cleaned_input == "write the parser"

    def test_use_stops_at_non_pack_token(self):
        parsed = parse_directives("&use refactor core/security")
        assert parsed.packs == []
        assert parsed.cleaned_input == "refactor core/security"

    def test_pack_takes_next_token(self):
        parsed = parse_directives("tidy up &pack legacy now")
        assert parsed.packs == ["legacy"]
        assert parsed.cleaned_input == "tidy up now"

    def test_unknown_directive_dropped(self):
        parsed = parse_directives("&fast build it")
        assert parsed.packs == []
        assert parsed.cleaned_input == "build it"
        assert parsed.has_directives is True

    def test_pack_without_argument(self):
        parsed = parse_directives("do it &pack")
        assert parsed.packs == []
        assert parsed.cleaned_input == "do it"

    def test_no_directives(self):
        parsed = parse_directives("  plain   text ")
        assert parsed.has_directives is False
        assert parsed.cleaned_input == "plain text"
