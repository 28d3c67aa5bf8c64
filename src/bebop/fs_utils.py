"""Path helpers: existence checks, upward search, glob matching."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path


def file_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def read_text_if_exists(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def find_up(start: Path, names: Iterable[str], stop_at: Path | None = None) -> Path | None:
    """Return the first ``start/../name`` that exists, checking ``stop_at`` last."""
    names = list(names)
    current = start.resolve()
    stop = stop_at.resolve() if stop_at is not None else None

    while True:
        for name in names:
            candidate = current / name
            if file_exists(candidate):
                return candidate
        if stop is not None and current == stop:
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def normalize_path(path: str | os.PathLike[str]) -> str:
    return str(path).replace(os.sep, "/").replace("\\", "/")


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a path glob: ``**`` spans segments, ``*`` and ``?`` stay within one."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
            continue
        if ch == "*":
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(ch))
        i += 1
    return re.compile("^" + "".join(parts) + "$")


def matches_glob(pattern: str, target: str) -> bool:
    return glob_to_regex(normalize_path(pattern.strip())).match(normalize_path(target.strip())) is not None
