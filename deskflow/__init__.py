"""Deskflow: task orchestration core for desktop automation."""

from .config import DeskflowConfig, load_config
from .contracts import (
    ActionRequest,
    ActionResult,
    ExecutionStatus,
    Step,
    StepResult,
    Task,
    TaskStatus,
    ValidationReport,
    Workflow,
    WorkflowExecution,
)
from .core import DeskflowCore, build_core
from .engine import WorkflowEngine
from .errors import (
    ActionCancelledError,
    DeskflowError,
    OrchestrationError,
    PolicyViolationError,
    ProviderFailure,
    TemplateNotFoundError,
    UnknownActionError,
    WorkflowValidationError,
)
from .executor import ActionExecutor
from .persistence import create_repository, get_repository
from .providers import CapabilityProvider, FunctionProvider, build_registry
from .queue import TaskQueue
from .registry import ActionRegistry
from .templates import TemplateCatalog

__version__ = "0.1.0"
__all__ = [
    "ActionCancelledError",
    "ActionExecutor",
    "ActionRegistry",
    "ActionRequest",
    "ActionResult",
    "CapabilityProvider",
    "DeskflowConfig",
    "DeskflowCore",
    "DeskflowError",
    "ExecutionStatus",
    "FunctionProvider",
    "OrchestrationError",
    "PolicyViolationError",
    "ProviderFailure",
    "Step",
    "StepResult",
    "Task",
    "TaskQueue",
    "TaskStatus",
    "TemplateCatalog",
    "TemplateNotFoundError",
    "UnknownActionError",
    "ValidationReport",
    "Workflow",
    "WorkflowEngine",
    "WorkflowExecution",
    "WorkflowValidationError",
    "build_core",
    "build_registry",
    "create_repository",
    "get_repository",
    "load_config",
]
