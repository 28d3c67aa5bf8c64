"""Workspace and project context detection."""

from bebop.detection.context import ContextDetector
from bebop.detection.models import (
    BranchType,
    DetectedContext,
    GitContext,
    MonorepoType,
    ProjectInfo,
    ProjectType,
    ServiceContext,
    TaskComplexity,
    TaskContext,
    TaskType,
    WorkspaceContext,
    WorkspaceInfo,
)
from bebop.detection.task import analyze_task
from bebop.detection.workspace import WorkspaceDetector

__all__ = [
    "BranchType",
    "ContextDetector",
    "DetectedContext",
    "GitContext",
    "MonorepoType",
    "ProjectInfo",
    "ProjectType",
    "ServiceContext",
    "TaskComplexity",
    "TaskContext",
    "TaskType",
    "WorkspaceContext",
    "WorkspaceDetector",
    "WorkspaceInfo",
    "analyze_task",
]
