"""Rule packs: models, registry lookup, and selection."""

from bebop.packs.manager import build_registry, import_pack, resolve_registry_path
from bebop.packs.models import (
    AppliesWhen,
    EnforcementLevel,
    EnforceSpec,
    OwnedRule,
    Pack,
    PackImportResult,
    PackLoadResult,
    PackRule,
    PackSelection,
)
from bebop.packs.registry import (
    PackRegistry,
    PackSource,
    extract_yaml,
    parse_pack_identifier,
    parse_pack_text,
    raise_if_all_missing,
    versions_match,
)
from bebop.packs.selector import DEFAULT_RULES, PackSelector, SelectionRules

__all__ = [
    "DEFAULT_RULES",
    "AppliesWhen",
    "EnforceSpec",
    "EnforcementLevel",
    "OwnedRule",
    "Pack",
    "PackImportResult",
    "PackLoadResult",
    "PackRegistry",
    "PackRule",
    "PackSelection",
    "PackSelector",
    "PackSource",
    "SelectionRules",
    "build_registry",
    "extract_yaml",
    "import_pack",
    "parse_pack_identifier",
    "parse_pack_text",
    "raise_if_all_missing",
    "resolve_registry_path",
    "versions_match",
]
