"""Script classification — map a manifest's scripts to dev/test/build/start roles.

Each role has an ordered list of candidate names. Matching runs in two passes:

1. exact: the first candidate that is itself a script name wins;
2. fuzzy: for each candidate in order, the first script (manifest order) whose
   name contains the candidate, case-insensitively, wins — skipping scripts
   whose command runs a dependency install ("npm install && vite" and the like).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from project_runner.core.config import DEFAULT_START_PATTERNS
from project_runner.models.project import PACKAGE_MANAGERS, DetectedScripts, ScriptsInfo

DEV_PATTERNS: tuple[str, ...] = ("dev", "serve", "start:dev", "develop", "watch")
TEST_PATTERNS: tuple[str, ...] = ("test", "test:unit", "test:all", "spec")
BUILD_PATTERNS: tuple[str, ...] = ("build", "compile", "bundle", "dist")
START_PATTERNS: tuple[str, ...] = DEFAULT_START_PATTERNS

# "<pm> install" or "<pm> i" as whole words, so "bun index.ts" and "npm init" do not count
INSTALL_INVOCATION = re.compile(
    r"\b(?:" + "|".join(PACKAGE_MANAGERS) + r")\s+(?:install|i)\b", re.IGNORECASE
)


def runs_install(command: str) -> bool:
    """True if the script command invokes a dependency install."""
    return INSTALL_INVOCATION.search(command) is not None


@dataclass(frozen=True)
class RoleRule:
    role: str
    patterns: tuple[str, ...]
    # Scripts for which this returns True never match in the fuzzy pass
    exclude: Callable[[str], bool] = runs_install


def build_role_rules(start_patterns: Sequence[str] = START_PATTERNS) -> tuple[RoleRule, ...]:
    return (
        RoleRule("dev", DEV_PATTERNS),
        RoleRule("test", TEST_PATTERNS),
        RoleRule("build", BUILD_PATTERNS),
        RoleRule("start", tuple(start_patterns)),
    )


DEFAULT_ROLE_RULES: tuple[RoleRule, ...] = build_role_rules()


def match_role(scripts: Mapping[str, str], rule: RoleRule) -> str | None:
    """Return the script name for *rule*, or ``None`` if nothing matches."""
    for pattern in rule.patterns:
        if pattern in scripts:
            return pattern

    for pattern in rule.patterns:
        needle = pattern.lower()
        for name, command in scripts.items():
            if needle in name.lower() and not rule.exclude(command):
                return name

    return None


def classify_scripts(
    scripts: Mapping[str, str], rules: Sequence[RoleRule] = DEFAULT_ROLE_RULES
) -> DetectedScripts:
    found = {rule.role: match_role(scripts, rule) for rule in rules}
    return DetectedScripts(**found)


def normalize_scripts(raw: Any) -> dict[str, str]:
    """Keep only ``name -> command`` string pairs, in manifest order."""
    if not isinstance(raw, dict):
        return {}
    return {k: v for k, v in raw.items() if isinstance(k, str) and isinstance(v, str)}


def analyze_scripts(
    manifest: Mapping[str, Any] | None, rules: Sequence[RoleRule] = DEFAULT_ROLE_RULES
) -> ScriptsInfo | None:
    """Read the ``scripts`` table of a loaded manifest and classify it."""
    if manifest is None:
        return None
    scripts = normalize_scripts(manifest.get("scripts"))
    return ScriptsInfo(scripts=scripts, detected=classify_scripts(scripts, rules))


def available_scripts(info: ScriptsInfo) -> list[str]:
    return list(info.scripts)


def has_script(info: ScriptsInfo, name: str) -> bool:
    return name in info.scripts
