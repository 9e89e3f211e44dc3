"""Utility functions to load workflow files for the CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from deskflow.errors import WorkflowValidationError


def load_workflow_file(path: Path) -> Dict[str, Any]:
    """Parse a YAML or JSON workflow document.

    Raises:
        WorkflowValidationError: If the file cannot be parsed or is not a mapping.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise WorkflowValidationError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise WorkflowValidationError(f"{path} does not contain a workflow mapping")
    return data


def _analyze_workflow_file(path: Path) -> Optional[Dict[str, Any]]:
    """Return discovery metadata when ``path`` looks like a workflow document."""
    try:
        data = load_workflow_file(path)
    except WorkflowValidationError:
        return None
    steps = data.get("steps")
    if not isinstance(steps, list):
        return None
    actions = [
        step.get("action_type") or step.get("actionType") or step.get("action")
        for step in steps
        if isinstance(step, dict)
    ]
    return {
        "path": path,
        "name": data.get("name") or path.stem,
        "description": data.get("description"),
        "actions": _unique_preserve_order(actions),
        "steps": len(steps),
    }


def _format_workflow_path(path: Path, search_path: Path) -> str:
    resolved_path = path.resolve()
    candidate_bases = []
    if search_path.is_dir():
        candidate_bases.append(search_path.resolve())
    else:
        candidate_bases.append(search_path.parent.resolve())
    candidate_bases.append(Path.cwd())

    for base in candidate_bases:
        try:
            rel = resolved_path.relative_to(base)
            return f"./{rel}"
        except ValueError:
            continue
    return str(path)


def _unique_preserve_order(values: Iterable[Optional[str]]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def parse_variables(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into a context mapping.

    Values are parsed as YAML scalars so ``count=3`` yields an int.
    """
    variables: Dict[str, Any] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Expected key=value, got '{pair}'")
        key, raw = pair.split("=", 1)
        try:
            value = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            value = raw
        if isinstance(value, (dict, list)):
            value = raw
        variables[key.strip()] = value
    return variables
