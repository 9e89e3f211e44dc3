"""Capability providers and registry construction."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..registry import ActionRegistry
from .base import CapabilityProvider, FunctionProvider
from .files import FileProvider
from .system import SystemProvider


def default_providers() -> List[CapabilityProvider]:
    """Providers that work on every platform without extra dependencies."""
    return [SystemProvider(), FileProvider()]


def build_registry(
    providers: Optional[Iterable[CapabilityProvider]] = None,
) -> ActionRegistry:
    """Build an :class:`ActionRegistry` from ``providers`` (defaults if omitted)."""
    return ActionRegistry(default_providers() if providers is None else providers)


__all__ = [
    "CapabilityProvider",
    "FunctionProvider",
    "FileProvider",
    "SystemProvider",
    "build_registry",
    "default_providers",
]
