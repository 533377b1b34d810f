"""
Project scope detection.

A scope is ``project:<name>`` when the working directory belongs to a
recognisable project, and ``global`` otherwise.
"""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

GLOBAL_SCOPE = "global"
PROJECT_PREFIX = "project:"

_VALID_PROJECT_NAME = re.compile(r"^[a-z0-9\-_.]+$")


@dataclass(frozen=True)
class ScopeDetection:
    scope: str
    source: str
    project_name: str | None = None
    git_root: Path | None = None


def find_git_root(start: Path) -> Path | None:
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _name_from_package_json(text: str) -> str | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    name = data.get("name") if isinstance(data, dict) else None
    if isinstance(name, str) and name and name != "undefined" and not name.startswith("@types/"):
        return name
    return None


def _name_from_cargo_toml(text: str) -> str | None:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        return None
    name = data.get("package", {}).get("name")
    return name if isinstance(name, str) and name else None


def _name_from_pyproject(text: str) -> str | None:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        return None
    name = data.get("project", {}).get("name") or data.get("tool", {}).get("poetry", {}).get("name")
    return name if isinstance(name, str) and name else None


def _name_from_go_mod(text: str) -> str | None:
    match = re.search(r"^module\s+(\S+)", text, re.MULTILINE)
    if match is None:
        return None
    return match.group(1).split("/")[-1]


# Checked in priority order.
_PROJECT_MARKERS: list[tuple[str, Callable[[str], str | None]]] = [
    ("package.json", _name_from_package_json),
    ("Cargo.toml", _name_from_cargo_toml),
    ("pyproject.toml", _name_from_pyproject),
    ("go.mod", _name_from_go_mod),
]


def sanitize_project_name(name: str) -> str:
    cleaned = name.lower()
    cleaned = re.sub(r"^@", "", cleaned)
    cleaned = cleaned.replace("/", "-")
    cleaned = re.sub(r"[^a-z0-9\-_.]", "", cleaned)
    return cleaned.strip("-")


def detect_scope_with_details(cwd: str | Path | None = None) -> ScopeDetection:
    directory = Path(cwd) if cwd is not None else Path.cwd()
    git_root = find_git_root(directory)
    search_dir = git_root or directory

    for marker, extract in _PROJECT_MARKERS:
        path = search_dir / marker
        if not path.is_file():
            continue
        try:
            name = extract(path.read_text(encoding="utf-8"))
        except OSError:
            continue
        if name:
            return ScopeDetection(
                scope=f"{PROJECT_PREFIX}{sanitize_project_name(name)}",
                source=marker,
                project_name=name,
                git_root=git_root,
            )

    if git_root is not None:
        return ScopeDetection(
            scope=f"{PROJECT_PREFIX}{sanitize_project_name(git_root.name)}",
            source="git",
            project_name=git_root.name,
            git_root=git_root,
        )

    return ScopeDetection(scope=GLOBAL_SCOPE, source="none")


def detect_scope(cwd: str | Path | None = None) -> str:
    return detect_scope_with_details(cwd).scope


def is_valid_scope(scope: str) -> bool:
    if scope == GLOBAL_SCOPE:
        return True
    if scope.startswith(PROJECT_PREFIX):
        return bool(_VALID_PROJECT_NAME.match(scope[len(PROJECT_PREFIX):]))
    return False


def parse_scope(scope: str) -> tuple[str, str | None]:
    """Split a scope into ``(kind, project_name)``. Unknown formats count as global."""
    if scope.startswith(PROJECT_PREFIX):
        return "project", scope[len(PROJECT_PREFIX):]
    return "global", None
