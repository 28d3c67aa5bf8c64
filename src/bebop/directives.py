"""Inline ``&use`` / ``&pack`` directives embedded in task text."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParsedDirectives(BaseModel):
    packs: list[str] = Field(default_factory=list)
    cleaned_input: str = ""
    has_directives: bool = False


def parse_directives(text: str) -> ParsedDirectives:
    """Pull pack directives out of ``text``.

    ``&use a/b c/d`` consumes every following token that looks like a pack id
    (contains ``/``); ``&pack x`` consumes exactly one token. Any other
    ``&token`` is dropped from the cleaned text.
    """
    tokens = text.split()
    packs: list[str] = []
    cleaned: list[str] = []
    has_directives = False

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if not token.startswith("&"):
            cleaned.append(token)
            i += 1
            continue

        has_directives = True
        if token == "&use":
            i += 1
            while i < len(tokens) and not tokens[i].startswith("&") and "/" in tokens[i]:
                packs.append(tokens[i])
                i += 1
            continue
        if token == "&pack" and i + 1 < len(tokens) and not tokens[i + 1].startswith("&"):
            packs.append(tokens[i + 1])
            i += 2
            continue
        i += 1

    return ParsedDirectives(packs=packs, cleaned_input=" ".join(cleaned), has_directives=has_directives)
