"""Placeholder substitution over nested parameter trees."""

from __future__ import annotations

import re
from typing import Any, Mapping

PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def resolve_string(value: str, context: Mapping[str, Any]) -> str:
    """Replace ``{{key}}`` tokens with ``str(context[key])``.

    Unknown keys are left verbatim so a later pass (or the caller) can still
    see which variables were missing.
    """

    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in context:
            return str(context[key])
        return match.group(0)

    return PLACEHOLDER.sub(_substitute, value)


def resolve_parameters(value: Any, context: Mapping[str, Any]) -> Any:
    """Recursively resolve placeholders in strings, lists, tuples and dicts."""
    if isinstance(value, str):
        return resolve_string(value, context)
    if isinstance(value, list):
        return [resolve_parameters(item, context) for item in value]
    if isinstance(value, tuple):
        return tuple(resolve_parameters(item, context) for item in value)
    if isinstance(value, Mapping):
        return {key: resolve_parameters(item, context) for key, item in value.items()}
    return value


def find_placeholders(value: Any) -> list[str]:
    """Return placeholder names referenced anywhere in ``value``, in order."""
    found: list[str] = []
    if isinstance(value, str):
        found.extend(PLACEHOLDER.findall(value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            found.extend(find_placeholders(item))
    elif isinstance(value, Mapping):
        for item in value.values():
            found.extend(find_placeholders(item))
    return found
