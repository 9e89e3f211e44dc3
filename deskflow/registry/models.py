"""Pydantic models describing registered actions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator


class ActionDescriptor(BaseModel):
    """Metadata describing one registered action type."""

    action_type: str
    description: Optional[str] = None
    provider: Optional[str] = None
    dangerous: bool = False

    @field_validator("action_type")
    @classmethod
    def _ensure_action_type(cls, v: str) -> str:
        if not v:
            raise ValueError("action_type must be a non-empty string")
        return v
