"""Persistence layer for workflow execution history."""

from __future__ import annotations

import os
from typing import Optional

from ..config import DeskflowConfig, load_config
from .inmemory import InMemoryExecutionRepository
from .repository import ExecutionRepository
from .sqlite import SQLiteExecutionRepository

_repository_instance: ExecutionRepository | None = None


def create_repository(
    database_url: Optional[str] = None, config: Optional[DeskflowConfig] = None
) -> ExecutionRepository:
    """Build a new execution repository.

    The backend is selected from ``database_url``, which can be provided
    explicitly, via the ``DESKFLOW_DATABASE_URL`` environment variable, or
    from loaded configuration. Without a database an in-memory repository is
    returned. Only ``sqlite://`` URLs are supported.
    """

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("DESKFLOW_DATABASE_URL")
        or getattr(config, "database_url", None)
    )

    if not database_url:
        return InMemoryExecutionRepository()

    if database_url.startswith("sqlite://"):
        return SQLiteExecutionRepository(database_url.replace("sqlite://", "", 1))
    raise ValueError(f"Unsupported database backend: {database_url}")


def get_repository(
    database_url: Optional[str] = None, config: Optional[DeskflowConfig] = None
) -> ExecutionRepository:
    """Return the process-wide repository, creating it on first use.

    Passing ``database_url`` or ``config`` always builds a fresh repository
    and makes it the shared one. Callers that wire their own objects should
    use :func:`create_repository` instead.
    """

    global _repository_instance
    if _repository_instance is not None and database_url is None and config is None:
        return _repository_instance

    _repository_instance = create_repository(database_url, config)
    return _repository_instance


__all__ = [
    "ExecutionRepository",
    "InMemoryExecutionRepository",
    "SQLiteExecutionRepository",
    "create_repository",
    "get_repository",
]
