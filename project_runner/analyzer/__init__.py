"""Project analyzer — combine the detectors into one ProjectSnapshot."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from project_runner.analyzer.dependencies import check_dependency_status
from project_runner.analyzer.package_manager import detect_package_manager
from project_runner.analyzer.scripts import DEFAULT_ROLE_RULES, RoleRule, analyze_scripts
from project_runner.fs import MANIFEST_NAME, file_exists, read_manifest
from project_runner.models.project import DependencyStatus, PackageManagerInfo, ProjectSnapshot

log = structlog.get_logger("project_runner.analyzer")


def _text_field(manifest: dict, key: str) -> str | None:
    value = manifest.get(key)
    return value if isinstance(value, str) else None


def analyze_project(
    project_dir: str | Path, rules: Sequence[RoleRule] = DEFAULT_ROLE_RULES
) -> ProjectSnapshot:
    """Analyze *project_dir*. Detection problems degrade, they never raise."""
    root = Path(project_dir)

    if not file_exists(root / MANIFEST_NAME):
        log.debug("analyzer.no_manifest", project_dir=str(root))
        return ProjectSnapshot(
            project_dir=str(root),
            type="unknown",
            package_manager=PackageManagerInfo(name="npm", source="default"),
            scripts=None,
            dependencies=DependencyStatus(has_node_modules=False, needs_install=False),
        )

    # An unparseable manifest still marks a Node.js project, with no scripts
    # and the default package manager.
    loaded = read_manifest(root)
    manifest = loaded or {}

    if loaded is None:
        package_manager = PackageManagerInfo(name="npm", source="default")
    else:
        package_manager = detect_package_manager(root, loaded)
    scripts = analyze_scripts(manifest, rules)
    dependencies = check_dependency_status(root)

    log.debug(
        "analyzer.package_manager",
        name=package_manager.name,
        version=package_manager.version,
        source=package_manager.source,
    )
    log.debug("analyzer.scripts", detected=scripts.detected.as_dict() if scripts else {})
    log.debug(
        "analyzer.dependencies",
        needs_install=dependencies.needs_install,
        reason=dependencies.reason,
    )

    return ProjectSnapshot(
        project_dir=str(root),
        type="nodejs",
        package_manager=package_manager,
        scripts=scripts,
        dependencies=dependencies,
        name=_text_field(manifest, "name"),
        version=_text_field(manifest, "version"),
        description=_text_field(manifest, "description"),
    )


__all__ = [
    "analyze_project",
    "analyze_scripts",
    "check_dependency_status",
    "detect_package_manager",
]
