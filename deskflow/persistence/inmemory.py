"""In-memory implementation of the execution repository."""

from __future__ import annotations

from typing import Dict

from ..contracts import WorkflowExecution
from .repository import ExecutionRepository


class InMemoryExecutionRepository(ExecutionRepository):
    """Store executions in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._executions: Dict[str, WorkflowExecution] = {}

    async def save_execution(self, execution: WorkflowExecution) -> None:
        self._executions[execution.id] = execution.model_copy(deep=True)

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        return self._executions.get(execution_id)

    async def list_executions(self, limit: int | None = None) -> list[WorkflowExecution]:
        executions = list(self._executions.values())
        if limit is not None:
            executions = executions[-limit:] if limit > 0 else []
        return executions
