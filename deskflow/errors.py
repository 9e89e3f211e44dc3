"""Exception hierarchy for deskflow."""

from __future__ import annotations

from typing import List, Optional


class DeskflowError(Exception):
    """Base exception for deskflow."""

    kind = "DeskflowError"


class UnknownActionError(DeskflowError):
    """No provider is registered for the requested action type."""

    kind = "UnknownAction"

    def __init__(self, action_type: str):
        self.action_type = action_type
        super().__init__(f"Unknown action type: {action_type}")


class ActionCancelledError(DeskflowError):
    """The confirmation gate refused the action."""

    kind = "Cancelled"

    def __init__(self, action_type: str, reason: Optional[str] = None):
        self.action_type = action_type
        self.reason = reason
        message = "Action cancelled by user"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PolicyViolationError(DeskflowError):
    """The safety policy blocked the action parameters."""

    kind = "PolicyViolation"

    def __init__(self, action_type: str, reason: str):
        self.action_type = action_type
        self.reason = reason
        super().__init__(reason)


class ProviderFailure(DeskflowError):
    """A capability provider raised while performing an action."""

    kind = "ProviderFailure"

    def __init__(self, action_type: str, message: str):
        self.action_type = action_type
        super().__init__(message)


class WorkflowValidationError(DeskflowError):
    """Workflow definition is malformed."""

    kind = "ValidationError"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        super().__init__(message)


class OrchestrationError(DeskflowError):
    """Unexpected failure inside the engine itself."""

    kind = "OrchestrationError"


class TemplateNotFoundError(DeskflowError):
    """Requested workflow template does not exist."""

    kind = "TemplateNotFound"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Template not found: {name}")
