"""Pydantic models for packs, rules and selection results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EnforcementLevel(StrEnum):
    BLOCK = "block"
    WARN = "warn"


class AppliesWhen(BaseModel):
    any: bool = False
    paths: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)

    @field_validator("paths", "languages", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (str, int, float)):
            return [str(value)]
        return [str(v) for v in value if v is not None]


class EnforceSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = ""
    patterns: Any = None
    deny_patterns: Any = None
    level: str = "block"

    @field_validator("type", "level", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)


class PackRule(BaseModel):
    id: str = ""
    text: str = ""
    applies_when: AppliesWhen | None = None
    enforce: EnforceSpec | None = None

    @field_validator("id", "text", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Pack(BaseModel):
    id: str
    version: str | int = "1"
    rules: list[PackRule]
    source_path: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> str | int:
        if value is None:
            return "1"
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return value
        # YAML reads `version: 1.0` as a float; it names the same version as 1
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


@dataclass(frozen=True)
class OwnedRule:
    """A rule tagged with the id of the pack it came from."""

    pack_id: str
    rule: PackRule

    @property
    def id(self) -> str:
        return self.rule.id


class PackLoadResult(BaseModel):
    packs: list[Pack] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class PackSelection(BaseModel):
    packs: list[str] = Field(default_factory=list)
    reasons: dict[str, list[str]] = Field(default_factory=dict)
    cleaned_input: str = ""


class PackImportResult(BaseModel):
    source_path: str
    dest_path: str
    overwritten: bool
