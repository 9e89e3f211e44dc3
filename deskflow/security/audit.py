"""Audit trail for confirmation and policy decisions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..contracts import utcnow

logger = logging.getLogger(__name__)


class AuditEntry(BaseModel):
    """One recorded decision."""

    event: str
    action_type: str
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


class AuditLog:
    """Records gate and policy decisions in memory."""

    def __init__(self, limit: Optional[int] = 1000) -> None:
        self._entries: List[AuditEntry] = []
        self._limit = limit

    def record(self, event: str, action_type: str, **details: Any) -> AuditEntry:
        entry = AuditEntry(event=event, action_type=action_type, details=details)
        self._entries.append(entry)
        if self._limit is not None and len(self._entries) > self._limit:
            del self._entries[: len(self._entries) - self._limit]
        logger.info(f"Audit {event} for {action_type}: {details}")
        return entry

    def entries(self, event: Optional[str] = None) -> List[AuditEntry]:
        if event is None:
            return list(self._entries)
        return [e for e in self._entries if e.event == event]

    def clear(self) -> None:
        self._entries.clear()
