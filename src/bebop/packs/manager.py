"""Registry location and pack import into the user registry."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from bebop.errors import PackImportError
from bebop.packs.models import PackImportResult
from bebop.packs.registry import PackRegistry
from bebop.settings import BebopSettings

logger = logging.getLogger(__name__)


def resolve_registry_path(settings: BebopSettings, override: Path | None = None) -> Path:
    """Registry root: explicit override, then BEBOP_REGISTRY, then ``~/.bebop``."""
    return override or settings.resolved_registry_root()


def build_registry(
    settings: BebopSettings,
    workspace_root: Path | None = None,
    *,
    registry_path: Path | None = None,
) -> PackRegistry:
    registry = resolve_registry_path(settings, registry_path)
    return PackRegistry(
        workspace_root,
        settings=settings,
        extra_dirs=[registry / "packs"],
    )


def import_pack(
    source: Path,
    settings: BebopSettings,
    *,
    registry_path: Path | None = None,
    force: bool = False,
) -> PackImportResult:
    """Copy a pack file into ``<registry>/packs``."""
    resolved = source.resolve()
    if not resolved.exists():
        raise PackImportError(f"File not found: {resolved}", str(resolved))
    if not resolved.is_file():
        raise PackImportError(f"Source path is not a file: {resolved}", str(resolved))

    dest_dir = resolve_registry_path(settings, registry_path) / "packs"
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / resolved.name
    exists = dest.exists()
    if exists and not force:
        raise PackImportError(
            f"Pack already exists at {dest}. Use --force to overwrite.", str(dest)
        )

    shutil.copyfile(resolved, dest)
    logger.info(f"Imported pack {resolved.name} into {dest_dir}")
    return PackImportResult(source_path=str(resolved), dest_path=str(dest), overwritten=exists)
