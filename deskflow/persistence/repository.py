"""Repository abstraction for workflow execution history."""

from __future__ import annotations

from typing import Protocol

from ..contracts import WorkflowExecution


class ExecutionRepository(Protocol):
    """Protocol for execution history persistence backends."""

    async def save_execution(self, execution: WorkflowExecution) -> None:
        """Persist a finished execution, replacing any earlier copy."""

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        """Retrieve an execution by id."""

    async def list_executions(self, limit: int | None = None) -> list[WorkflowExecution]:
        """Return persisted executions, oldest first."""
