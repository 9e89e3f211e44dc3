"""Safety gate, policy and audit for destructive actions."""

from .audit import AuditEntry, AuditLog
from .gate import AutoApproveGate, CallbackGate, ConfirmationGate, DenyAllGate, PromptGate
from .policy import PolicyDecision, SafetyPolicy

__all__ = [
    "AuditEntry",
    "AuditLog",
    "AutoApproveGate",
    "CallbackGate",
    "ConfirmationGate",
    "DenyAllGate",
    "PolicyDecision",
    "PromptGate",
    "SafetyPolicy",
]
