"""Data models for project analysis."""

from project_runner.models.project import (
    DependencyStatus,
    DetectedScripts,
    PackageManagerInfo,
    ProjectSnapshot,
    ScriptsInfo,
)

__all__ = [
    "DependencyStatus",
    "DetectedScripts",
    "PackageManagerInfo",
    "ProjectSnapshot",
    "ScriptsInfo",
]
