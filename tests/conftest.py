"""Shared fixtures for deskflow tests."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from deskflow import ActionExecutor, ActionRegistry, FunctionProvider, WorkflowEngine


class RecordingProvider(FunctionProvider):
    """Provider whose actions record every call they receive."""

    def __init__(self) -> None:
        self.calls: List[tuple[str, Any]] = []
        super().__init__(
            {
                "ok": self._record("ok", lambda params: "done"),
                "echo": self._record("echo", lambda params: params.get("value")),
                "fail": self._record("fail", self._raise),
                "nothing": self._record("nothing", lambda params: None),
                "screen_capture": self._record("screen_capture", lambda params: "PNGDATA"),
                "file_write": self._record("file_write", lambda params: True),
            },
            name="recording",
        )

    def _record(self, action_type: str, fn):
        def operation(params: Any) -> Any:
            self.calls.append((action_type, params))
            return fn(params)

        return operation

    @staticmethod
    def _raise(params: Any) -> Any:
        raise RuntimeError((params or {}).get("message", "boom"))

    def count(self, action_type: str) -> int:
        return sum(1 for name, _ in self.calls if name == action_type)

    def params_for(self, action_type: str) -> List[Dict[str, Any]]:
        return [params for name, params in self.calls if name == action_type]


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def registry(provider: RecordingProvider) -> ActionRegistry:
    return ActionRegistry([provider])


@pytest.fixture
def executor(registry: ActionRegistry) -> ActionExecutor:
    return ActionExecutor(registry)


@pytest.fixture
def engine(executor: ActionExecutor) -> WorkflowEngine:
    return WorkflowEngine(executor)
