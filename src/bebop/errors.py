"""Structured errors surfaced to the CLI layer."""

from __future__ import annotations

from typing import Any


class BebopError(Exception):
    """Base error carrying a stable code and remediation hints."""

    def __init__(
        self,
        message: str,
        code: str,
        suggestions: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestions = suggestions or []
        self.details = details or {}

    def format(self) -> str:
        out = f"Error [{self.code}]: {self.message}"
        if self.suggestions:
            out += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                out += f"\n  {i}. {suggestion}"
        return out


class PackNotFoundError(BebopError):
    def __init__(self, pack_id: str) -> None:
        super().__init__(
            f"Pack not found: {pack_id}",
            "PACK_NOT_FOUND",
            [
                "Run `bebop packs list` to see available packs",
                "Check the pack ID is correct (e.g., namespace/pack@version)",
            ],
            {"pack_id": pack_id},
        )
        self.pack_id = pack_id


class PackImportError(BebopError):
    def __init__(self, message: str, path: str) -> None:
        super().__init__(message, "PACK_IMPORT_FAILED", details={"path": path})


class EnforcementError(BebopError):
    """Raised when input trips a blocking enforcement rule. No prompt is produced."""

    def __init__(self, violations: list[Any]) -> None:
        super().__init__(
            f"Enforcement failed for {len(violations)} rule(s).",
            "ENFORCEMENT_FAILED",
            [
                "Remove sensitive values from your input",
                "Adjust the relevant pack enforcement rules if needed",
                "Disable enforcement with --no-enforce (if appropriate)",
            ],
            {
                "violations": [
                    {"rule_id": v.rule_id, "pack_id": v.pack_id, "type": v.type}
                    for v in violations
                ]
            },
        )
        self.violations = list(violations)
