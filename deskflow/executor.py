"""Uniform action dispatch with a confirmation gate."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .contracts import ActionRequest, ActionResult
from .errors import (
    ActionCancelledError,
    DeskflowError,
    PolicyViolationError,
    ProviderFailure,
    UnknownActionError,
)
from .registry import ActionRegistry
from .security import AuditLog, AutoApproveGate, ConfirmationGate, SafetyPolicy

logger = logging.getLogger(__name__)

SequenceEntry = Union[ActionRequest, Mapping[str, Any]]


def _opts_out_of_stop(entry: Any) -> bool:
    if not isinstance(entry, Mapping):
        return False
    for key in ("stop_on_error", "stopOnError"):
        if key in entry:
            return entry[key] is False
    return False


class ActionExecutor:
    """Maps action types to provider operations and normalizes outcomes.

    ``execute`` never raises for provider, gate or lookup failures; every
    outcome comes back as an :class:`ActionResult`.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        gate: Optional[ConfirmationGate] = None,
        policy: Optional[SafetyPolicy] = None,
        audit: Optional[AuditLog] = None,
    ) -> None:
        self._registry = registry
        self._gate = gate or AutoApproveGate()
        self._policy = policy
        self._audit = audit or AuditLog()

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def policy(self) -> Optional[SafetyPolicy]:
        return self._policy

    @property
    def audit(self) -> AuditLog:
        return self._audit

    async def execute(
        self,
        action_type: str,
        params: Any = None,
        require_confirmation: bool = False,
    ) -> ActionResult:
        """Run one action and return its normalized result."""
        params = {} if params is None else params
        try:
            result = await self._dispatch(action_type, params, require_confirmation)
        except DeskflowError as exc:
            return ActionResult(
                success=False,
                action_type=action_type,
                error=str(exc),
                error_kind=exc.kind,
            )
        return ActionResult(success=True, action_type=action_type, result=result)

    async def _dispatch(
        self, action_type: str, params: Any, require_confirmation: bool
    ) -> Any:
        needs_confirmation = require_confirmation or (
            self._policy is not None and self._policy.requires_confirmation(action_type)
        )
        if needs_confirmation:
            await self._confirm(ActionRequest(
                action_type=action_type,
                params=params,
                require_confirmation=True,
            ))

        operation = self._registry.get(action_type)
        if operation is None:
            logger.warning(f"Unknown action type requested: {action_type}")
            raise UnknownActionError(action_type)

        if self._policy is not None:
            try:
                decision = self._policy.check_action(action_type, params)
            except Exception as exc:
                self._audit.record("policy_error", action_type, error=str(exc))
                logger.warning(f"Policy check failed for {action_type}: {exc}")
                raise PolicyViolationError(
                    action_type, f"Policy check failed: {exc}"
                ) from exc
            for warning in decision.warnings:
                logger.warning(warning)
            if not decision.allowed:
                self._audit.record("policy_blocked", action_type, reason=decision.reason)
                logger.warning(f"Policy blocked {action_type}: {decision.reason}")
                raise PolicyViolationError(action_type, decision.reason or "Blocked by policy")

        logger.debug(f"Executing {action_type} with {self._loggable(params)}")
        try:
            result = operation(params)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.info(f"Action {action_type} failed: {exc}")
            raise ProviderFailure(action_type, str(exc)) from exc
        return result

    async def _confirm(self, request: ActionRequest) -> None:
        try:
            approved = await self._gate.confirm(request)
        except Exception as exc:
            self._audit.record("confirmation_aborted", request.action_type, error=str(exc))
            logger.warning(f"Confirmation aborted for {request.action_type}: {exc}")
            raise ActionCancelledError(request.action_type, str(exc)) from exc

        if not approved:
            self._audit.record("confirmation_denied", request.action_type)
            logger.warning(f"Confirmation denied for {request.action_type}")
            raise ActionCancelledError(request.action_type)
        self._audit.record(
            "confirmation_approved",
            request.action_type,
            params=self._loggable(request.params),
        )

    async def execute_sequence(self, actions: Iterable[SequenceEntry]) -> List[ActionResult]:
        """Run ``actions`` strictly in order.

        The sequence halts after the first failure unless that entry sets
        ``stop_on_error`` to ``False``. Results gathered so far, including the
        failing one, are returned.
        """
        results: List[ActionResult] = []
        for entry in actions:
            try:
                action = (
                    entry
                    if isinstance(entry, ActionRequest)
                    else ActionRequest.model_validate(entry)
                )
            except ValidationError as exc:
                action_type = str(entry.get("action_type", "")) if isinstance(entry, Mapping) else ""
                results.append(ActionResult(
                    success=False,
                    action_type=action_type,
                    error=f"Invalid action entry: {exc.errors()[0]['msg']}",
                    error_kind="ValidationError",
                ))
                if _opts_out_of_stop(entry):
                    continue
                break

            result = await self.execute(
                action.action_type, action.params, action.require_confirmation
            )
            results.append(result)

            if not result.success and action.stop_on_error:
                break

            if action.delay_ms:
                await asyncio.sleep(action.delay_ms / 1000)

        return results

    def get_available_actions(self) -> List[str]:
        return self._registry.action_types()

    def _loggable(self, params: Any) -> Any:
        if self._policy is None:
            return params
        return self._policy.sanitize_params(params)
