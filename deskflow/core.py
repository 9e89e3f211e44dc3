"""Process-level wiring of registry, executor, queue and engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import DeskflowConfig, load_config
from .engine import WorkflowEngine
from .executor import ActionExecutor
from .persistence import ExecutionRepository
from .providers import CapabilityProvider, build_registry
from .queue import TaskQueue
from .registry import ActionRegistry
from .security import AuditLog, ConfirmationGate, SafetyPolicy
from .templates import TemplateCatalog

logger = logging.getLogger(__name__)


@dataclass
class DeskflowCore:
    """The objects one process needs, built once and passed around explicitly."""

    config: DeskflowConfig
    registry: ActionRegistry
    executor: ActionExecutor
    queue: TaskQueue
    engine: WorkflowEngine


def build_core(
    config: Optional[DeskflowConfig] = None,
    providers: Optional[Iterable[CapabilityProvider]] = None,
    gate: Optional[ConfirmationGate] = None,
    repository: Optional[ExecutionRepository] = None,
    templates: Optional[TemplateCatalog] = None,
) -> DeskflowCore:
    """Construct a fully wired core from configuration."""
    config = config or load_config()
    registry = build_registry(providers)
    policy = SafetyPolicy.from_config(config.safety) if config.safety.enabled else None
    executor = ActionExecutor(registry, gate=gate, policy=policy, audit=AuditLog())
    queue = TaskQueue(
        max_concurrent=config.queue.max_concurrent,
        history_limit=config.queue.history_limit,
    )
    engine = WorkflowEngine(
        executor,
        templates=templates,
        repository=repository,
        history_limit=config.workflow.history_limit,
    )
    logger.debug(
        f"Built core with {len(registry)} actions, max_concurrent={queue.max_concurrent}"
    )
    return DeskflowCore(
        config=config,
        registry=registry,
        executor=executor,
        queue=queue,
        engine=engine,
    )
