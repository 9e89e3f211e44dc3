"""Safety policy for actions with side effects."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from ..config import SafetyConfig
from ..constants import DEFAULT_BLOCKED_PATHS, DEFAULT_DANGEROUS_ACTIONS
from ..contracts import ValidationReport, Workflow

logger = logging.getLogger(__name__)

SENSITIVE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"password",
        r"token",
        r"secret",
        r"api[_-]?key",
        r"credit[_-]?card",
        r"ssn",
        r"social[_-]?security",
    )
]

REDACTED = "[REDACTED]"


class PolicyDecision(BaseModel):
    """Outcome of checking one action against the policy."""

    allowed: bool = True
    reason: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


def _normalize_path(path: str) -> str:
    return path.lower().replace("\\", "/")


class SafetyPolicy:
    """Flags dangerous actions and blocks access to protected paths and hosts."""

    def __init__(
        self,
        dangerous_actions: Optional[Iterable[str]] = None,
        blocked_paths: Optional[Iterable[str]] = None,
        blocked_domains: Optional[Iterable[str]] = None,
    ) -> None:
        self.dangerous_actions = set(
            DEFAULT_DANGEROUS_ACTIONS if dangerous_actions is None else dangerous_actions
        )
        self.blocked_paths = list(
            DEFAULT_BLOCKED_PATHS if blocked_paths is None else blocked_paths
        )
        self.blocked_domains = [d.lower() for d in blocked_domains or ()]

    @classmethod
    def from_config(cls, config: SafetyConfig) -> "SafetyPolicy":
        return cls(
            dangerous_actions=config.dangerous_actions,
            blocked_paths=config.blocked_paths,
            blocked_domains=config.blocked_domains,
        )

    # ------------------------------------------------------------------
    # Configuration
    def add_dangerous_action(self, action_type: str) -> None:
        self.dangerous_actions.add(action_type)

    def remove_dangerous_action(self, action_type: str) -> None:
        self.dangerous_actions.discard(action_type)

    def add_blocked_domain(self, domain: str) -> None:
        domain = domain.lower()
        if domain not in self.blocked_domains:
            self.blocked_domains.append(domain)

    def add_blocked_path(self, path: str) -> None:
        if path not in self.blocked_paths:
            self.blocked_paths.append(path)

    # ------------------------------------------------------------------
    # Checks
    def requires_confirmation(self, action_type: str) -> bool:
        return action_type in self.dangerous_actions

    def check_path(self, path: str) -> PolicyDecision:
        normalized = _normalize_path(path)
        for blocked in self.blocked_paths:
            if normalized.startswith(_normalize_path(blocked)):
                return PolicyDecision(
                    allowed=False,
                    reason=f"Access to system path '{blocked}' is blocked",
                )
        return PolicyDecision()

    def check_url(self, url: str) -> PolicyDecision:
        try:
            parsed = urlparse(url)
            hostname = (parsed.hostname or "").lower()
        except ValueError:
            return PolicyDecision(allowed=False, reason="Invalid URL format")
        if not parsed.scheme or not hostname:
            return PolicyDecision(allowed=False, reason="Invalid URL format")
        for blocked in self.blocked_domains:
            if hostname == blocked or hostname.endswith(f".{blocked}"):
                return PolicyDecision(allowed=False, reason=f"Domain '{blocked}' is blocked")
        if parsed.scheme not in ("http", "https"):
            return PolicyDecision(
                allowed=False, reason=f"Protocol '{parsed.scheme}:' is not allowed"
            )
        return PolicyDecision()

    def check_sensitive_data(self, params: Any) -> List[str]:
        """Keys whose name or string value looks like a credential."""
        if not isinstance(params, Mapping):
            return []
        sensitive = []
        for key, value in params.items():
            if not isinstance(value, str):
                continue
            if any(p.search(str(key)) or p.search(value) for p in SENSITIVE_PATTERNS):
                sensitive.append(str(key))
        return sensitive

    def sanitize_params(self, params: Any) -> Any:
        """Copy of ``params`` with sensitive keys redacted, safe for logs."""
        if not isinstance(params, Mapping):
            return params
        return {
            key: REDACTED if any(p.search(str(key)) for p in SENSITIVE_PATTERNS) else value
            for key, value in params.items()
        }

    def check_action(self, action_type: str, params: Any = None) -> PolicyDecision:
        decision = PolicyDecision()
        if action_type in self.dangerous_actions:
            decision.warnings.append(f"Action '{action_type}' is potentially dangerous")

        sensitive = self.check_sensitive_data(params)
        if sensitive:
            decision.warnings.append(
                f"Sensitive data detected in parameters: {', '.join(sensitive)}"
            )

        if not isinstance(params, Mapping):
            return decision

        for key in ("path", "from", "to"):
            value = params.get(key)
            if isinstance(value, str) and value:
                path_check = self.check_path(value)
                if not path_check.allowed:
                    decision.allowed = False
                    decision.reason = path_check.reason
                    return decision

        url = params.get("url")
        if isinstance(url, str) and url:
            url_check = self.check_url(url)
            if not url_check.allowed:
                decision.allowed = False
                decision.reason = url_check.reason
        return decision

    def check_workflow(self, workflow: Workflow) -> ValidationReport:
        """Run :meth:`check_action` over every step of ``workflow``."""
        report = ValidationReport()
        for index, step in enumerate(workflow.steps, start=1):
            decision = self.check_action(step.action_type, step.params)
            if not decision.allowed:
                report.errors.append(f"Step {index}: {decision.reason}")
            if decision.warnings:
                report.warnings.append(f"Step {index}: {', '.join(decision.warnings)}")
        report.valid = not report.errors
        return report
