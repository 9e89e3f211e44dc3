"""Core data contracts for the deskflow orchestration core."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .constants import DEFAULT_PRIORITY


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_ms(start: Optional[datetime], end: Optional[datetime]) -> Optional[int]:
    """Milliseconds between two timestamps, ``None`` if either is missing."""
    if start is None or end is None:
        return None
    return int((end - start).total_seconds() * 1000)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class TaskStatus(str, Enum):
    """Lifecycle of a queued task."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED)


class ExecutionStatus(str, Enum):
    """Lifecycle of a workflow execution."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"
    STOPPED = "stopped"


class StepStatus(str, Enum):
    """Outcome of a single workflow step."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"


class Task(BaseModel):
    """A unit of deferred work held by the task queue."""

    id: str = Field(default_factory=lambda: new_id("task"))
    payload: Callable[[], Any] = Field(exclude=True, repr=False)
    priority: int = DEFAULT_PRIORITY
    status: TaskStatus = TaskStatus.QUEUED
    submitted_at: datetime = Field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    result: Any = None
    error: Optional[str] = None


class Step(BaseModel):
    """One instruction within a workflow."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    action_type: str = Field(
        validation_alias=AliasChoices("action_type", "actionType", "action")
    )
    params: Any = Field(default_factory=dict)
    delay_ms: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("delay_ms", "delayMs", "delay")
    )
    stop_on_error: bool = Field(
        default=True, validation_alias=AliasChoices("stop_on_error", "stopOnError")
    )
    require_confirmation: bool = Field(
        default=False,
        validation_alias=AliasChoices("require_confirmation", "requireConfirmation"),
    )


class Workflow(BaseModel):
    """Named, ordered sequence of steps."""

    name: str = "Unnamed"
    description: Optional[str] = None
    steps: List[Step] = Field(default_factory=list)


class ActionRequest(BaseModel):
    """An action awaiting dispatch, as seen by the confirmation gate."""

    model_config = ConfigDict(populate_by_name=True)

    action_type: str = Field(
        validation_alias=AliasChoices("action_type", "actionType", "type", "action")
    )
    params: Any = Field(default_factory=dict)
    require_confirmation: bool = Field(
        default=False,
        validation_alias=AliasChoices("require_confirmation", "requireConfirmation"),
    )
    stop_on_error: bool = Field(
        default=True, validation_alias=AliasChoices("stop_on_error", "stopOnError")
    )
    delay_ms: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("delay_ms", "delayMs", "delay")
    )


class ActionResult(BaseModel):
    """Uniform outcome of a single action."""

    success: bool
    action_type: str
    result: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class StepResult(BaseModel):
    """Per-step record inside a workflow execution."""

    name: str
    action_type: str
    status: StepStatus = StepStatus.RUNNING
    success: bool = False
    output: Any = None
    error: Optional[str] = None
    started_at: datetime = Field(default_factory=utcnow)
    ended_at: Optional[datetime] = None
    duration_ms: Optional[int] = None


class WorkflowExecution(BaseModel):
    """Runtime record of running a workflow."""

    id: str = Field(default_factory=lambda: new_id("wf"))
    workflow: str = "Unnamed"
    status: ExecutionStatus = ExecutionStatus.RUNNING
    steps: List[StepResult] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    started_at: datetime = Field(default_factory=utcnow)
    ended_at: Optional[datetime] = None
    duration_ms: Optional[int] = None

    def finish(self, status: Optional[ExecutionStatus] = None) -> None:
        """Stamp end time and, if given, the terminal status."""
        if status is not None:
            self.status = status
        self.ended_at = utcnow()
        self.duration_ms = elapsed_ms(self.started_at, self.ended_at)


class ValidationReport(BaseModel):
    """Result of a static workflow check."""

    valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class QueueStats(BaseModel):
    """Snapshot of task queue counters."""

    pending: int = 0
    running: int = 0
    paused: bool = False
    max_concurrent: int = 1
    total: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    average_duration_ms: int = 0
