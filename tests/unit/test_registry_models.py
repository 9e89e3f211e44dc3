"""Tests for the action registry and its models."""

import pytest
from pydantic import ValidationError

from deskflow import ActionRegistry, FunctionProvider
from deskflow.providers import SystemProvider, build_registry
from deskflow.registry import ActionDescriptor


def test_action_descriptor_defaults() -> None:
    descriptor = ActionDescriptor(action_type="echo")
    assert descriptor.description is None
    assert descriptor.provider is None
    assert descriptor.dangerous is False


def test_action_descriptor_rejects_empty_type() -> None:
    with pytest.raises(ValidationError):
        ActionDescriptor(action_type="")


def test_register_and_lookup() -> None:
    registry = ActionRegistry()
    descriptor = registry.register("greet", lambda params: "hi", description="Say hi")

    assert "greet" in registry
    assert len(registry) == 1
    assert registry.get("greet")({}) == "hi"
    assert registry.descriptor("greet") == descriptor
    assert registry.get("missing") is None


def test_register_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        ActionRegistry().register("broken", "not callable")


def test_register_replaces_existing_operation() -> None:
    registry = ActionRegistry()
    registry.register("greet", lambda params: "old")
    registry.register("greet", lambda params: "new")
    assert registry.get("greet")({}) == "new"
    assert registry.action_types() == ["greet"]


def test_unregister() -> None:
    registry = ActionRegistry()
    registry.register("greet", lambda params: "hi")
    assert registry.unregister("greet") is True
    assert registry.unregister("greet") is False
    assert registry.descriptor("greet") is None


def test_provider_registration_marks_dangerous_actions() -> None:
    provider = FunctionProvider(
        {"wipe": lambda params: True, "look": lambda params: "seen"},
        name="custom",
        dangerous_actions=frozenset({"wipe"}),
    )
    registry = ActionRegistry([provider])

    assert set(registry) == {"wipe", "look"}
    assert registry.descriptor("wipe").dangerous is True
    assert registry.descriptor("look").dangerous is False
    assert registry.descriptor("look").provider == "custom"


def test_provider_descriptions_are_recorded() -> None:
    registry = ActionRegistry([SystemProvider()])
    assert registry.descriptor("wait").description.startswith("Pause")
    assert {d.action_type for d in registry.describe()} == {"wait", "echo"}


def test_build_registry_defaults() -> None:
    registry = build_registry()
    for action_type in ("wait", "echo", "file_read", "file_write", "file_delete"):
        assert action_type in registry
    assert registry.descriptor("file_delete").dangerous is True


def test_separate_registries_are_isolated() -> None:
    first = build_registry([])
    second = build_registry([])
    first.register("only_here", lambda params: None)
    assert "only_here" not in second
