"""project-runner: detect a Node.js project's package manager and scripts, then run them."""

__version__ = "0.1.1"

from project_runner.analyzer import analyze_project
from project_runner.exceptions import CliError, RunnerError
from project_runner.models.project import (
    DependencyStatus,
    DetectedScripts,
    PackageManagerInfo,
    ProjectSnapshot,
    ScriptsInfo,
)

__all__ = [
    "CliError",
    "DependencyStatus",
    "DetectedScripts",
    "PackageManagerInfo",
    "ProjectSnapshot",
    "RunnerError",
    "ScriptsInfo",
    "analyze_project",
]
