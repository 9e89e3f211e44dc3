"""SQLite implementation of the execution repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..contracts import WorkflowExecution
from .repository import ExecutionRepository


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


class SQLiteExecutionRepository(ExecutionRepository):
    """Persist execution history using SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS executions (
                id TEXT PRIMARY KEY,
                workflow TEXT NOT NULL,
                status TEXT NOT NULL,
                started_at TEXT NOT NULL,
                data TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    @staticmethod
    def _to_model(row: sqlite3.Row) -> WorkflowExecution:
        return WorkflowExecution.model_validate(json.loads(row["data"]))

    # ------------------------------------------------------------------
    # Repository API
    async def save_execution(self, execution: WorkflowExecution) -> None:
        data = json.dumps(execution.model_dump(), default=_json_default)
        await asyncio.to_thread(
            self._execute,
            """
            INSERT INTO executions (id, workflow, status, started_at, data)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET status = excluded.status, data = excluded.data
            """,
            execution.id,
            execution.workflow,
            execution.status.value,
            execution.started_at.isoformat(),
            data,
        )

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        row = await asyncio.to_thread(
            self._fetchone, "SELECT data FROM executions WHERE id = ?", execution_id
        )
        if not row:
            return None
        return self._to_model(row)

    async def list_executions(self, limit: int | None = None) -> list[WorkflowExecution]:
        rows = await asyncio.to_thread(
            self._fetchall, "SELECT data FROM executions ORDER BY started_at, id"
        )
        executions = [self._to_model(row) for row in rows]
        if limit is not None:
            executions = executions[-limit:] if limit > 0 else []
        return executions

    def close(self) -> None:
        self._conn.close()
