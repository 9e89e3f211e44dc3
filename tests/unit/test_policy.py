"""Safety policy, confirmation gate and audit log tests."""

import pytest

from deskflow import ActionRequest, Step, Workflow
from deskflow.config import SafetyConfig
from deskflow.security import (
    AuditLog,
    AutoApproveGate,
    CallbackGate,
    DenyAllGate,
    PromptGate,
    SafetyPolicy,
)


def test_dangerous_actions_require_confirmation():
    policy = SafetyPolicy()
    assert policy.requires_confirmation("file_delete")
    assert not policy.requires_confirmation("file_read")

    policy.add_dangerous_action("file_read")
    policy.remove_dangerous_action("file_delete")
    assert policy.requires_confirmation("file_read")
    assert not policy.requires_confirmation("file_delete")


def test_blocked_paths_are_case_and_separator_insensitive():
    policy = SafetyPolicy()
    assert policy.check_path("c:/windows/system32/drivers").allowed is False
    assert policy.check_path("C:\\Program Files\\App").allowed is False
    assert policy.check_path("/home/user/notes.txt").allowed is True

    policy.add_blocked_path("/srv/secret")
    assert policy.check_path("/srv/secret/key").reason == (
        "Access to system path '/srv/secret' is blocked"
    )


def test_url_checks():
    policy = SafetyPolicy(blocked_domains=["Evil.example"])
    assert policy.check_url("https://example.com/page").allowed is True
    assert policy.check_url("not a url").reason == "Invalid URL format"
    assert policy.check_url("https://evil.example/x").allowed is False
    assert policy.check_url("http://api.evil.example").reason == "Domain 'evil.example' is blocked"
    assert policy.check_url("ftp://example.com/file").reason == "Protocol 'ftp:' is not allowed"


def test_sensitive_data_detection_and_sanitizing():
    policy = SafetyPolicy()
    params = {"user": "bob", "password": "hunter2", "note": "my api_key is here"}

    assert policy.check_sensitive_data(params) == ["password", "note"]
    assert policy.sanitize_params(params) == {
        "user": "bob",
        "password": "[REDACTED]",
        "note": "my api_key is here",
    }
    assert policy.sanitize_params("plain") == "plain"


def test_check_action_blocks_paths_and_urls():
    policy = SafetyPolicy(blocked_domains=["evil.example"])

    decision = policy.check_action("file_copy", {"from": "/tmp/a", "to": "/usr/bin/a"})
    assert decision.allowed is False
    assert decision.reason == "Access to system path '/usr/bin' is blocked"

    decision = policy.check_action("browser_navigate", {"url": "https://evil.example"})
    assert decision.allowed is False

    decision = policy.check_action("file_delete", {"path": "/tmp/a"})
    assert decision.allowed is True
    assert decision.warnings == ["Action 'file_delete' is potentially dangerous"]


def test_check_workflow_collects_findings():
    policy = SafetyPolicy()
    workflow = Workflow(
        steps=[
            Step(action_type="file_read", params={"path": "/tmp/ok"}),
            Step(action_type="file_write", params={"path": "/System/Library/x"}),
        ]
    )
    report = policy.check_workflow(workflow)
    assert report.valid is False
    assert report.errors == ["Step 2: Access to system path '/System' is blocked"]


def test_policy_from_config():
    policy = SafetyPolicy.from_config(
        SafetyConfig(dangerous_actions=["custom"], blocked_paths=[], blocked_domains=["x.test"])
    )
    assert policy.requires_confirmation("custom")
    assert not policy.requires_confirmation("file_delete")
    assert policy.check_path("/usr/bin/python").allowed is True
    assert policy.check_url("https://x.test").allowed is False


@pytest.mark.asyncio
async def test_builtin_gates():
    request = ActionRequest(action_type="file_delete", params={"path": "/tmp/x"})
    assert await AutoApproveGate().confirm(request) is True
    assert await DenyAllGate().confirm(request) is False
    assert await CallbackGate(lambda req: req.action_type == "file_delete").confirm(request) is True


@pytest.mark.asyncio
async def test_prompt_gate_uses_typer_confirm(monkeypatch):
    questions = []

    def fake_confirm(question, default=False):
        questions.append(question)
        return True

    monkeypatch.setattr("typer.confirm", fake_confirm)
    gate = PromptGate(SafetyPolicy().sanitize_params)
    request = ActionRequest(action_type="login", params={"password": "hunter2"})

    assert await gate.confirm(request) is True
    assert questions == ['Run \'login\' with {"password": "[REDACTED]"}?']


def test_audit_log_limit_and_filtering():
    audit = AuditLog(limit=2)
    audit.record("confirmation_denied", "file_delete")
    audit.record("policy_blocked", "file_write", reason="blocked")
    audit.record("policy_blocked", "file_copy", reason="blocked")

    entries = audit.entries()
    assert [e.action_type for e in entries] == ["file_write", "file_copy"]
    assert audit.entries("policy_blocked")[0].details == {"reason": "blocked"}
    assert audit.entries("confirmation_denied") == []

    audit.clear()
    assert audit.entries() == []


def test_unparseable_url_is_rejected():
    policy = SafetyPolicy()
    decision = policy.check_url("http://[::1")
    assert decision.allowed is False
    assert decision.reason == "Invalid URL format"
