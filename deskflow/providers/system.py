"""Portable system actions that need no platform integration."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Mapping

from .base import CapabilityProvider


class SystemProvider(CapabilityProvider):
    """``wait`` and ``echo`` actions."""

    name = "system"

    def actions(self) -> Mapping[str, Callable[[Any], Any]]:
        return {"wait": self.wait, "echo": self.echo}

    def describe(self) -> Dict[str, str]:
        return {
            "wait": "Pause for a number of milliseconds (ms, default 1000)",
            "echo": "Return the given value unchanged (value)",
        }

    async def wait(self, params: Mapping[str, Any]) -> float:
        ms = float((params or {}).get("ms") or 1000)
        await asyncio.sleep(ms / 1000)
        return ms

    def echo(self, params: Mapping[str, Any]) -> Any:
        params = params or {}
        return params.get("value", params.get("text"))
