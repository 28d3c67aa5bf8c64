"""Pydantic models and enums for workspace and context detection."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class ProjectType(StrEnum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    MOBILE = "mobile"
    LIBRARY = "library"


class MonorepoType(StrEnum):
    NX = "nx"
    TURBOREPO = "turborepo"
    LERNA = "lerna"
    PNPM = "pnpm"
    YARN_WORKSPACES = "yarn-workspaces"
    UNKNOWN = "unknown"


class BranchType(StrEnum):
    FEATURE = "feature"
    BUGFIX = "bugfix"
    RELEASE = "release"
    MAIN = "main"
    UNKNOWN = "unknown"


class TaskType(StrEnum):
    FEATURE = "feature"
    BUGFIX = "bugfix"
    REFACTOR = "refactor"
    TEST = "test"
    DOCUMENTATION = "documentation"
    UNKNOWN = "unknown"


class TaskComplexity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WorkspaceInfo(BaseModel):
    root: str
    service: str | None = None
    languages: list[str] = Field(default_factory=list)
    path: str
    is_git_repo: bool = False


class ProjectInfo(BaseModel):
    type: ProjectType = ProjectType.BACKEND
    framework: str | None = None
    language: list[str] = Field(default_factory=list)
    is_monorepo: bool = False
    monorepo_type: MonorepoType = MonorepoType.UNKNOWN

    @field_validator("language")
    @classmethod
    def _normalize_languages(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(lang.lower() for lang in value if lang))


class ServiceContext(BaseModel):
    name: str | None = None
    root: str | None = None


class GitContext(BaseModel):
    branch: str = "unknown"
    branch_type: BranchType = BranchType.UNKNOWN
    is_pr: bool = False


class TaskContext(BaseModel):
    keywords: list[str] = Field(default_factory=list)
    complexity: TaskComplexity = TaskComplexity.LOW
    type: TaskType = TaskType.UNKNOWN


class WorkspaceContext(BaseModel):
    root: str
    cwd: str
    service_root: str | None = None
    relative_cwd: str = "."


class DetectedContext(BaseModel):
    """Snapshot of one detection run."""

    project: ProjectInfo = Field(default_factory=ProjectInfo)
    service: ServiceContext = Field(default_factory=ServiceContext)
    git: GitContext = Field(default_factory=GitContext)
    task: TaskContext = Field(default_factory=TaskContext)
    workspace: WorkspaceContext | None = None
