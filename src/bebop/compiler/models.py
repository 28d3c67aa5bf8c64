"""Pydantic models for enforcement results and compiled prompts."""

from __future__ import annotations

from pydantic import BaseModel, Field

from bebop.packs.models import EnforcementLevel


class EnforcementViolation(BaseModel):
    rule_id: str
    pack_id: str | None = None
    type: str
    pattern: str
    level: EnforcementLevel


class EnforcementResult(BaseModel):
    violations: list[EnforcementViolation] = Field(default_factory=list)
    warnings: list[EnforcementViolation] = Field(default_factory=list)


class CompiledConstraint(BaseModel):
    id: str
    text: str
    source: str


class ContextSummary(BaseModel):
    project: str
    service: str | None = None
    framework: str | None = None


class CompileStats(BaseModel):
    original_tokens: int
    compiled_tokens: int
    savings: float
    rule_count: int
    missing_packs: list[str] = Field(default_factory=list)


class CompiledPrompt(BaseModel):
    task: str
    constraints: list[CompiledConstraint] = Field(default_factory=list)
    context: ContextSummary
    stats: CompileStats
    enforcement_warnings: list[EnforcementViolation] = Field(default_factory=list)
    formatted: str
