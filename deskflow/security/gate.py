"""Confirmation gates consulted before actions that require approval."""

from __future__ import annotations

import asyncio
import inspect
import json
from typing import Any, Awaitable, Callable, Protocol, Union

from ..contracts import ActionRequest


class ConfirmationGate(Protocol):
    """Decides whether a pending action may run."""

    async def confirm(self, request: ActionRequest) -> bool:
        """Return ``True`` to approve ``request``."""


class AutoApproveGate:
    """Approves everything. Default for non-interactive use."""

    async def confirm(self, request: ActionRequest) -> bool:
        return True


class DenyAllGate:
    """Refuses everything."""

    async def confirm(self, request: ActionRequest) -> bool:
        return False


class CallbackGate:
    """Adapt a plain predicate, sync or async, into a gate."""

    def __init__(
        self, callback: Callable[[ActionRequest], Union[bool, Awaitable[bool]]]
    ) -> None:
        self._callback = callback

    async def confirm(self, request: ActionRequest) -> bool:
        answer = self._callback(request)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)


class PromptGate:
    """Ask on the terminal through ``typer.confirm``."""

    def __init__(self, sanitize: Callable[[Any], Any] | None = None) -> None:
        self._sanitize = sanitize or (lambda params: params)

    async def confirm(self, request: ActionRequest) -> bool:
        import typer

        params = json.dumps(self._sanitize(request.params), default=str)
        question = f"Run '{request.action_type}' with {params}?"
        return await asyncio.to_thread(typer.confirm, question, default=False)
