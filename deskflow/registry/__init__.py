"""Action registry mapping action types to provider operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, List, Optional

from .models import ActionDescriptor

if TYPE_CHECKING:
    from ..providers.base import CapabilityProvider

logger = logging.getLogger(__name__)

ProviderOperation = Callable[[Any], Any]


class ActionRegistry:
    """Explicit action-type registry.

    One instance is built at startup from the available providers and handed
    to the :class:`~deskflow.executor.ActionExecutor`. Separate registries can
    live side by side in one process, which keeps tests isolated.
    """

    def __init__(self, providers: Optional[Iterable["CapabilityProvider"]] = None) -> None:
        self._operations: Dict[str, ProviderOperation] = {}
        self._descriptors: Dict[str, ActionDescriptor] = {}
        for provider in providers or ():
            self.register_provider(provider)

    def register(
        self,
        action_type: str,
        operation: ProviderOperation,
        description: Optional[str] = None,
        dangerous: bool = False,
        provider: Optional[str] = None,
    ) -> ActionDescriptor:
        """Register ``operation`` under ``action_type``, replacing any previous one."""
        if not callable(operation):
            raise TypeError(f"Operation for '{action_type}' must be callable")
        descriptor = ActionDescriptor(
            action_type=action_type,
            description=description,
            provider=provider,
            dangerous=dangerous,
        )
        if action_type in self._operations:
            logger.debug(f"Replacing registered action {action_type}")
        self._operations[action_type] = operation
        self._descriptors[action_type] = descriptor
        return descriptor

    def register_provider(self, provider: "CapabilityProvider") -> List[str]:
        """Register every action a provider exposes and return their names."""
        descriptions = provider.describe()
        registered = []
        for action_type, operation in provider.actions().items():
            self.register(
                action_type,
                operation,
                description=descriptions.get(action_type),
                dangerous=action_type in provider.dangerous_actions,
                provider=provider.name,
            )
            registered.append(action_type)
        logger.debug(f"Registered provider {provider.name}: {registered}")
        return registered

    def unregister(self, action_type: str) -> bool:
        self._descriptors.pop(action_type, None)
        return self._operations.pop(action_type, None) is not None

    def get(self, action_type: str) -> Optional[ProviderOperation]:
        return self._operations.get(action_type)

    def descriptor(self, action_type: str) -> Optional[ActionDescriptor]:
        return self._descriptors.get(action_type)

    def action_types(self) -> List[str]:
        return list(self._operations)

    def describe(self) -> List[ActionDescriptor]:
        return list(self._descriptors.values())

    def __contains__(self, action_type: object) -> bool:
        return action_type in self._operations

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)


__all__ = ["ActionDescriptor", "ActionRegistry", "ProviderOperation"]
