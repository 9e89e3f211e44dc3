"""Tests for configuration loading."""

from deskflow import build_core
from deskflow.config import load_config


def _clear_env(monkeypatch):
    for name in (
        "DESKFLOW_CONFIG",
        "DESKFLOW_MAX_CONCURRENT",
        "DESKFLOW_LOG_LEVEL",
        "DESKFLOW_DATABASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)

    config = load_config()
    assert config.queue.max_concurrent == 1
    assert config.queue.history_limit == 1000
    assert config.safety.enabled is True
    assert "file_delete" in config.safety.dangerous_actions
    assert config.database_url is None


def test_load_config_from_env(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
queue:
  max_concurrent: 4
  history_limit: 20
workflow:
  history_limit: 5
safety:
  blocked_domains:
    - evil.example
log_level: DEBUG
"""
    )
    monkeypatch.setenv("DESKFLOW_CONFIG", str(config_path))

    config = load_config()
    assert config.queue.max_concurrent == 4
    assert config.queue.history_limit == 20
    assert config.workflow.history_limit == 5
    assert config.safety.blocked_domains == ["evil.example"]
    assert config.log_level == "DEBUG"


def test_env_overrides_file_values(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    config_path = tmp_path / "deskflow.yaml"
    config_path.write_text("queue:\n  max_concurrent: 2\n")
    monkeypatch.setenv("DESKFLOW_MAX_CONCURRENT", "6")
    monkeypatch.setenv("DESKFLOW_DATABASE_URL", "sqlite:///tmp/deskflow.db")

    config = load_config(str(config_path))
    assert config.queue.max_concurrent == 6
    assert config.database_url == "sqlite:///tmp/deskflow.db"


def test_build_core_uses_config(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    config_path = tmp_path / "deskflow.yaml"
    config_path.write_text(
        """
queue:
  max_concurrent: 3
safety:
  enabled: false
"""
    )

    core = build_core(load_config(str(config_path)))
    assert core.queue.max_concurrent == 3
    assert core.executor.policy is None
    assert "file_read" in core.registry
    assert "echo" in core.executor.get_available_actions()


def test_build_core_with_safety_policy(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)

    core = build_core()
    assert core.executor.policy is not None
    assert core.executor.policy.requires_confirmation("file_delete")
