"""Filesystem helper utilities for CLI discovery commands."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterable, Set

WORKFLOW_SUFFIXES = (".yaml", ".yml", ".json")


def _load_gitignore_patterns(search_path: Path) -> Set[str]:
    """Load gitignore patterns from .gitignore files in the search path and its parents."""
    patterns: Set[str] = {
        "__pycache__/",
        "build/",
        "dist/",
        "*.egg-info/",
        ".git/",
        ".venv/",
        "venv/",
        "node_modules/",
    }

    # Walk up the directory tree looking for .gitignore files
    current_path = search_path
    while current_path != current_path.parent:
        gitignore_file = current_path / ".gitignore"
        if gitignore_file.exists():
            try:
                with open(gitignore_file, "r", encoding="utf-8") as f:
                    for line in f:
                        line = line.strip()
                        if line and not line.startswith("#"):
                            patterns.add(line)
            except (OSError, UnicodeDecodeError):
                # Skip files we can't read
                pass
        current_path = current_path.parent

    return patterns


def _should_ignore_path(path: Path, patterns: Set[str], base_path: Path) -> bool:
    """Check if a path should be ignored based on gitignore patterns."""
    try:
        relative_path = path.relative_to(base_path)
    except ValueError:
        return False

    path_str = str(relative_path)
    path_parts = relative_path.parts

    for pattern in patterns:
        if pattern.endswith("/"):
            pattern_no_slash = pattern[:-1]
            if any(fnmatch.fnmatch(part, pattern_no_slash) for part in path_parts[:-1]):
                return True
        elif fnmatch.fnmatch(path.name, pattern) or fnmatch.fnmatch(path_str, pattern):
            return True

    return False


def _iter_workflow_files(
    search_path: Path, respect_gitignore: bool = True
) -> Iterable[Path]:
    """Yield YAML and JSON files within ``search_path`` respecting ``.gitignore``."""

    if search_path.is_file():
        if search_path.suffix in WORKFLOW_SUFFIXES:
            yield search_path
        return

    gitignore_patterns: Set[str] = set()
    if respect_gitignore:
        gitignore_patterns = _load_gitignore_patterns(search_path)

    candidates = sorted(
        p for p in search_path.rglob("*") if p.suffix in WORKFLOW_SUFFIXES
    )
    for candidate in candidates:
        if respect_gitignore and _should_ignore_path(
            candidate, gitignore_patterns, search_path
        ):
            continue
        if candidate.is_file():
            yield candidate
