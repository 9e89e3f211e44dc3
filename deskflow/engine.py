"""Sequential workflow runner with context propagation."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from numbers import Real
from typing import Any, Deque, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from .constants import DEFAULT_HISTORY_LIMIT, DEFAULT_HISTORY_PAGE
from .contracts import (
    ExecutionStatus,
    Step,
    StepResult,
    StepStatus,
    ValidationReport,
    Workflow,
    WorkflowExecution,
    elapsed_ms,
    utcnow,
)
from .errors import OrchestrationError, WorkflowValidationError
from .executor import ActionExecutor
from .persistence import ExecutionRepository
from .templates import TemplateCatalog
from .templating import resolve_parameters

logger = logging.getLogger(__name__)

WorkflowLike = Union[Workflow, Mapping[str, Any]]

_ACTION_KEYS = ("action_type", "actionType", "action")
_DELAY_KEYS = ("delay_ms", "delayMs", "delay")


def _first_present(data: Mapping[str, Any], keys: tuple) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class WorkflowEngine:
    """Runs workflows step by step through an :class:`ActionExecutor`.

    Steps run strictly in order because any step may reference the output
    of any earlier one through ``{{name}}`` placeholders. Each step's output
    is stored in the execution context under the step name, or
    ``step_<index>`` for unnamed steps.
    """

    def __init__(
        self,
        executor: ActionExecutor,
        templates: Optional[TemplateCatalog] = None,
        repository: Optional[ExecutionRepository] = None,
        history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._executor = executor
        self._templates = templates or TemplateCatalog()
        self._repository = repository
        self._active: Dict[str, WorkflowExecution] = {}
        self._history: Deque[WorkflowExecution] = deque(maxlen=history_limit)

    @property
    def executor(self) -> ActionExecutor:
        return self._executor

    @property
    def templates(self) -> TemplateCatalog:
        return self._templates

    # ------------------------------------------------------------------
    # Execution
    async def execute_workflow(
        self,
        workflow: WorkflowLike,
        initial_context: Optional[Mapping[str, Any]] = None,
    ) -> WorkflowExecution:
        """Execute ``workflow`` and return its finished execution record.

        Raises:
            WorkflowValidationError: If ``workflow`` is a mapping that does not
                describe a valid workflow. Nothing is executed in that case.
        """
        workflow = self._coerce(workflow)
        execution = WorkflowExecution(
            workflow=workflow.name,
            context=dict(initial_context or {}),
        )
        self._active[execution.id] = execution
        logger.info(f"Starting workflow {workflow.name} as {execution.id}")

        try:
            for index, step in enumerate(workflow.steps):
                if execution.status != ExecutionStatus.RUNNING:
                    break

                step_result = StepResult(
                    name=step.name or f"step_{index}",
                    action_type=step.action_type,
                )
                execution.steps.append(step_result)
                await self._execute_step(step, step_result, execution.context)

                if not step_result.success and step.stop_on_error:
                    if execution.status == ExecutionStatus.RUNNING:
                        execution.status = ExecutionStatus.FAILED
                        execution.error = step_result.error
                    break

                if step_result.output is not None:
                    execution.context[step.name or f"step_{index}"] = step_result.output

                if step.delay_ms and execution.status == ExecutionStatus.RUNNING:
                    await asyncio.sleep(step.delay_ms / 1000)

            if execution.status == ExecutionStatus.RUNNING:
                execution.status = ExecutionStatus.COMPLETED
        except Exception as exc:
            logger.exception(f"Workflow {execution.id} aborted by an internal error")
            # A stopped execution is already terminal
            if execution.status == ExecutionStatus.RUNNING:
                execution.status = ExecutionStatus.ERROR
                execution.error = str(exc)

        if execution.ended_at is None:
            execution.finish()
        self._active.pop(execution.id, None)
        self._history.append(execution)
        logger.info(
            f"Workflow {execution.id} finished: {execution.status.value} "
            f"({len(execution.steps)}/{len(workflow.steps)} steps)"
        )
        await self._persist(execution)
        return execution

    async def _execute_step(
        self, step: Step, step_result: StepResult, context: Mapping[str, Any]
    ) -> None:
        try:
            params = resolve_parameters(step.params, context)
            action_result = await self._executor.execute(
                step.action_type, params, step.require_confirmation
            )
        except Exception as exc:
            step_result.status = StepStatus.ERROR
            step_result.success = False
            step_result.error = str(exc)
            self._stamp(step_result)
            raise OrchestrationError(
                f"Step '{step_result.name}' raised unexpectedly: {exc}"
            ) from exc

        step_result.success = action_result.success
        step_result.output = action_result.result
        step_result.error = action_result.error
        step_result.status = StepStatus.COMPLETED if action_result.success else StepStatus.FAILED
        self._stamp(step_result)
        logger.debug(
            f"Step {step_result.name} ({step.action_type}) {step_result.status.value}"
        )

    @staticmethod
    def _stamp(step_result: StepResult) -> None:
        step_result.ended_at = utcnow()
        step_result.duration_ms = elapsed_ms(step_result.started_at, step_result.ended_at)

    async def _persist(self, execution: WorkflowExecution) -> None:
        if self._repository is None:
            return
        try:
            await self._repository.save_execution(execution)
        except Exception:
            logger.exception(f"Failed to persist execution {execution.id}")

    def stop_workflow(self, execution_id: str) -> bool:
        """Stop an active execution before its next step starts."""
        execution = self._active.pop(execution_id, None)
        if execution is None:
            return False
        execution.finish(ExecutionStatus.STOPPED)
        logger.info(f"Stopped workflow {execution_id}")
        return True

    # ------------------------------------------------------------------
    # Definitions
    def _coerce(self, workflow: WorkflowLike) -> Workflow:
        if isinstance(workflow, Workflow):
            return workflow
        report = self.validate_workflow(workflow)
        if not report.valid:
            raise WorkflowValidationError("Invalid workflow definition", report.errors)
        return Workflow.model_validate(workflow)

    def validate_workflow(
        self, workflow: Any, check_safety: bool = False
    ) -> ValidationReport:
        """Statically check a workflow definition without running it.

        Accepts a :class:`Workflow` or a raw mapping. With ``check_safety``
        the executor's safety policy, if any, is applied to every step too.
        """
        report = ValidationReport()
        if isinstance(workflow, Workflow):
            data = workflow.model_dump()
        elif isinstance(workflow, Mapping):
            data = workflow
        else:
            report.errors.append("Workflow must be a mapping")
            report.valid = False
            return report

        steps = data.get("steps")
        if not isinstance(steps, list):
            report.errors.append("Workflow must have a steps array")
            report.valid = False
            return report

        if not steps:
            report.warnings.append("Workflow has no steps")

        for index, step in enumerate(steps, start=1):
            if not isinstance(step, Mapping):
                report.errors.append(f"Step {index}: Step must be a mapping")
                continue
            if not _first_present(step, _ACTION_KEYS):
                report.errors.append(f"Step {index}: Missing action type")
            delay = _first_present(step, _DELAY_KEYS)
            if delay is not None and (isinstance(delay, bool) or not isinstance(delay, Real)):
                report.errors.append(f"Step {index}: Delay must be a number")

        if not report.errors and not isinstance(workflow, Workflow):
            try:
                workflow = Workflow.model_validate(data)
            except ValidationError as exc:
                for error in exc.errors():
                    location = ".".join(str(part) for part in error["loc"])
                    report.errors.append(f"{location}: {error['msg']}")

        policy = self._executor.policy
        if check_safety and policy is not None and not report.errors:
            safety = policy.check_workflow(workflow)
            report.errors.extend(safety.errors)
            report.warnings.extend(safety.warnings)

        report.valid = not report.errors
        return report

    def create_from_template(
        self, name: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Workflow:
        """Instantiate the named template with ``variables``.

        Raises:
            TemplateNotFoundError: If no template is registered under ``name``.
        """
        return self._templates.instantiate(name, variables)

    def register_template(self, name: str, template: WorkflowLike) -> None:
        self._templates.register(name, template)

    def get_templates(self) -> List[str]:
        return self._templates.names()

    # ------------------------------------------------------------------
    # Read accessors
    def get_active_workflows(self) -> List[WorkflowExecution]:
        return list(self._active.values())

    def get_history(self, limit: int = DEFAULT_HISTORY_PAGE) -> List[WorkflowExecution]:
        if limit <= 0:
            return []
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
