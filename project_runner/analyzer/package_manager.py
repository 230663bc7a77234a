"""Package manager detection — explicit field > toolchain pin > lockfile > default."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import structlog

from project_runner.fs import file_exists, read_manifest
from project_runner.models.project import PackageManagerInfo

log = structlog.get_logger("project_runner.analyzer")

# Lockfile -> package manager, ordered by priority
LOCKFILES: list[tuple[str, str]] = [
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
]

# Toolchain pin keys (volta), first present wins
TOOLCHAIN_PIN_FIELD = "volta"
TOOLCHAIN_PIN_ORDER: tuple[str, ...] = ("pnpm", "yarn", "npm")

_PACKAGE_MANAGER_FIELD_RE = re.compile(r"^(npm|yarn|pnpm|bun)@(.+)$")


def detect_package_manager(
    project_dir: Path, manifest: dict[str, Any] | None = None
) -> PackageManagerInfo:
    """Resolve the package manager of *project_dir*. Never raises.

    *manifest* may be passed in when the caller already loaded it; otherwise
    ``package.json`` is read here. An unreadable manifest counts as absent.
    """
    if manifest is None:
        manifest = read_manifest(project_dir)
    if manifest is None:
        return PackageManagerInfo(name="npm", source="default")

    # 1. packageManager field (corepack)
    field = manifest.get("packageManager")
    if isinstance(field, str):
        match = _PACKAGE_MANAGER_FIELD_RE.match(field)
        if match:
            return PackageManagerInfo(
                name=match.group(1), version=match.group(2), source="explicit-field"
            )
        log.debug("analyzer.package_manager_field_ignored", value=field)

    # 2. Toolchain pin
    pin = manifest.get(TOOLCHAIN_PIN_FIELD)
    if isinstance(pin, dict):
        for name in TOOLCHAIN_PIN_ORDER:
            version = pin.get(name)
            if version:
                return PackageManagerInfo(name=name, version=str(version), source="toolchain-pin")

    # 3. Lockfile scan
    lockfile = find_lockfile(project_dir)
    if lockfile is not None:
        return PackageManagerInfo(name=dict(LOCKFILES)[lockfile.name], source="lockfile")

    return PackageManagerInfo(name="npm", source="default")


def find_lockfile(project_dir: Path) -> Path | None:
    """Return the first existing lockfile in priority order."""
    for filename, _ in LOCKFILES:
        path = project_dir / filename
        if file_exists(path):
            return path
    return None


def run_command(package_manager: str, script: str, args: list[str] | None = None) -> list[str]:
    """Build the argv that runs *script*, forwarding *args* to it."""
    extra = list(args or [])
    if package_manager == "bun":
        return ["bun", "run", script, *extra]
    if package_manager in ("pnpm", "yarn"):
        return [package_manager, script, *extra]
    # npm needs "--" so the arguments reach the script instead of npm itself
    if extra:
        return ["npm", "run", script, "--", *extra]
    return ["npm", "run", script]


def install_command(package_manager: str) -> list[str]:
    return [package_manager, "install"]


def global_install_command(package_manager: str) -> list[str]:
    """Install *package_manager* globally through npm."""
    return ["npm", "install", "-g", package_manager]
