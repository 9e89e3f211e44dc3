"""Base capability provider interface."""

from __future__ import annotations

import abc
from typing import Any, Callable, Dict, FrozenSet, Mapping


class CapabilityProvider(metaclass=abc.ABCMeta):
    """Abstract source of action implementations.

    A provider groups related operations (files, clipboard, browser...) and
    exposes them keyed by action type. Each operation receives the resolved
    params mapping and returns a result or raises.
    """

    name: str = "provider"
    dangerous_actions: FrozenSet[str] = frozenset()

    @abc.abstractmethod
    def actions(self) -> Mapping[str, Callable[[Any], Any]]:
        """Return the action types this provider implements."""
        raise NotImplementedError

    def describe(self) -> Dict[str, str]:
        """Human-readable descriptions keyed by action type (empty by default)."""
        return {}


class FunctionProvider(CapabilityProvider):
    """Wrap a plain mapping of action type to callable as a provider."""

    def __init__(
        self,
        operations: Mapping[str, Callable[[Any], Any]],
        name: str = "functions",
        dangerous_actions: FrozenSet[str] = frozenset(),
    ) -> None:
        self._operations = dict(operations)
        self.name = name
        self.dangerous_actions = frozenset(dangerous_actions)

    def actions(self) -> Mapping[str, Callable[[Any], Any]]:
        return dict(self._operations)
