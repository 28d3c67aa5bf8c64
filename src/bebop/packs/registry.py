"""PackRegistry: locate, parse and look up rule packs across search directories."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import ValidationError

from bebop.errors import PackNotFoundError
from bebop.packs.models import Pack, PackLoadResult
from bebop.settings import BebopSettings

logger = logging.getLogger(__name__)

PACK_EXTENSIONS = {".md", ".yaml", ".yml"}

_FENCED_YAML = re.compile(r"```yaml\s*(.*?)```", re.IGNORECASE | re.DOTALL)


class PackSource(Protocol):
    """Anything that can resolve pack identifiers to packs."""

    def load_packs(self, pack_ids: list[str]) -> PackLoadResult: ...


def extract_yaml(raw: str) -> str | None:
    """Return the body of the first fenced ```yaml block, if any."""
    match = _FENCED_YAML.search(raw)
    if match is None:
        return None
    return match.group(1).strip()


def parse_pack_identifier(value: str) -> tuple[str, str | None]:
    """Split ``namespace/name@v2`` into ``("namespace/name", "2")``."""
    pack_id, _, version = value.partition("@")
    if not version:
        return pack_id, None
    return pack_id, version.removeprefix("v")


def versions_match(requested: str, actual: str | int) -> bool:
    # Plain string comparison after dropping a leading "v"; no semver ordering
    return requested.removeprefix("v") == str(actual).removeprefix("v")


def parse_pack_text(raw: str, source_path: str = "") -> Pack | None:
    """Parse pack text; None when it is not a pack (bad YAML, no id, no rules)."""
    source = extract_yaml(raw)
    if source is None:
        source = raw
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict) or not data.get("id") or data.get("rules") is None:
        return None
    try:
        return Pack.model_validate(
            {
                "id": data["id"],
                "version": data.get("version", "1"),
                "rules": data["rules"],
                "source_path": source_path,
            }
        )
    except ValidationError as e:
        logger.debug(f"Skipping malformed pack {source_path}: {e.error_count()} error(s)")
        return None


def raise_if_all_missing(result: PackLoadResult) -> None:
    if not result.packs and result.missing:
        raise PackNotFoundError(result.missing[0])


class PackRegistry:
    _dirs: list[Path]
    _cache: dict[Path, Pack | None]

    def __init__(
        self,
        workspace_root: Path | None = None,
        *,
        settings: BebopSettings | None = None,
        extra_dirs: list[Path] | None = None,
    ) -> None:
        settings = settings or BebopSettings()
        root = workspace_root or settings.workspace_root or Path.cwd()
        self._dirs = [
            settings.user_packs_dir,
            root / "packs",
            root / "templates" / "packs",
            *(extra_dirs or []),
        ]
        self._cache = {}

    @property
    def search_dirs(self) -> list[Path]:
        return list(self._dirs)

    def load_packs(self, pack_ids: list[str]) -> PackLoadResult:
        result = PackLoadResult()
        for pack_id in pack_ids:
            pack = self.load_pack(pack_id)
            if pack is not None:
                result.packs.append(pack)
            else:
                result.missing.append(pack_id)
        return result

    def load_pack(self, pack_id: str) -> Pack | None:
        """First pack in search order whose id (and version, if given) matches."""
        wanted_id, wanted_version = parse_pack_identifier(pack_id)
        for pack in self._iter_packs():
            if pack.id != wanted_id:
                continue
            if wanted_version and not versions_match(wanted_version, pack.version):
                continue
            return pack
        logger.debug(f"Pack not found: {pack_id}")
        return None

    def list_available(self) -> list[Pack]:
        return list(self._iter_packs())

    def _iter_packs(self) -> Iterator[Pack]:
        for directory in self._dirs:
            for path in self._pack_files(directory):
                pack = self._parse_file(path)
                if pack is not None:
                    yield pack

    def _pack_files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug(f"Cannot list pack directory {directory}: {e}")
            return []
        return [p for p in entries if p.suffix.lower() in PACK_EXTENSIONS and p.is_file()]

    def _parse_file(self, path: Path) -> Pack | None:
        if path in self._cache:
            return self._cache[path]
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            pack = None
        else:
            pack = parse_pack_text(raw, str(path))
        self._cache[path] = pack
        return pack
