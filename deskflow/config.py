from __future__ import annotations

import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_BLOCKED_PATHS,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DANGEROUS_ACTIONS,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_MAX_CONCURRENT,
)


class QueueConfig(BaseModel):
    """Task queue settings."""

    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT


class WorkflowConfig(BaseModel):
    """Workflow engine settings."""

    history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT


class SafetyConfig(BaseModel):
    """Safety policy settings for the action executor."""

    enabled: bool = True
    dangerous_actions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DANGEROUS_ACTIONS)
    )
    blocked_paths: List[str] = Field(default_factory=lambda: list(DEFAULT_BLOCKED_PATHS))
    blocked_domains: List[str] = Field(default_factory=list)


class DeskflowConfig(BaseModel):
    """Top-level configuration model."""

    queue: QueueConfig = QueueConfig()
    workflow: WorkflowConfig = WorkflowConfig()
    safety: SafetyConfig = SafetyConfig()
    log_level: str = "INFO"
    database_url: Optional[str] = None


def load_config(path: Optional[str] = None) -> DeskflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to DESKFLOW_CONFIG env
            variable or 'deskflow.yaml' in the current directory.
    """

    config_path = path or os.getenv("DESKFLOW_CONFIG", DEFAULT_CONFIG_FILE)
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = DeskflowConfig(**data)
    else:
        config = DeskflowConfig()

    env_max_concurrent = os.getenv("DESKFLOW_MAX_CONCURRENT")
    if env_max_concurrent:
        config.queue.max_concurrent = int(env_max_concurrent)
    env_log_level = os.getenv("DESKFLOW_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level
    env_db_url = os.getenv("DESKFLOW_DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
