"""Data models for a single project analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "yarn", "pnpm", "bun")
ROLES: tuple[str, ...] = ("dev", "test", "build", "start")


@dataclass(frozen=True)
class PackageManagerInfo:
    """Detected package manager and the rule that produced it."""

    name: str  # "npm" | "yarn" | "pnpm" | "bun"
    source: str  # "explicit-field" | "toolchain-pin" | "lockfile" | "default"
    version: str | None = None

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


@dataclass(frozen=True)
class DetectedScripts:
    """Script names inferred for each role. ``None`` means not detected."""

    dev: str | None = None
    test: str | None = None
    build: str | None = None
    start: str | None = None

    def get(self, role: str) -> str | None:
        if role not in ROLES:
            raise ValueError(f"Unknown script role: {role!r}")
        return getattr(self, role)

    def as_dict(self) -> dict[str, str]:
        """Only the detected roles."""
        found: dict[str, str] = {}
        for role in ROLES:
            name = getattr(self, role)
            if name is not None:
                found[role] = name
        return found


@dataclass(frozen=True)
class ScriptsInfo:
    scripts: dict[str, str] = field(default_factory=dict)  # manifest order preserved
    detected: DetectedScripts = field(default_factory=DetectedScripts)


@dataclass(frozen=True)
class DependencyStatus:
    has_node_modules: bool
    needs_install: bool
    reason: str | None = None


@dataclass(frozen=True)
class ProjectSnapshot:
    """Everything one CLI invocation needs to know about the project."""

    project_dir: str
    type: str  # "nodejs" | "unknown"
    package_manager: PackageManagerInfo
    scripts: ScriptsInfo | None
    dependencies: DependencyStatus
    name: str | None = None
    version: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.scripts is not None:
            data["scripts"]["detected"] = self.scripts.detected.as_dict()
        return data
