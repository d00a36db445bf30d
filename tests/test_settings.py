"""Tests for container settings resolution."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from locator_core import Container, ContainerSettings, NotFoundError, SettingsResolver
from locator_core.settings import CONFIG_FILE_NAME


def _config_dir(tmp_path: Path) -> Path:
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    return config_dir


def test_defaults(tmp_path: Path) -> None:
    resolver = SettingsResolver(config_dir=_config_dir(tmp_path), env={})
    settings = ContainerSettings.resolve(resolver)

    assert settings == ContainerSettings()
    assert settings.clone_mode == "shallow"
    assert settings.thread_safe is True
    assert settings.log_level is None


def test_resolution_precedence(tmp_path: Path) -> None:
    config_dir = _config_dir(tmp_path)
    (config_dir / CONFIG_FILE_NAME).write_text('clone_mode = "deep"\nthread_safe = false\n')

    resolver = SettingsResolver(
        overrides={"clone_mode": "shallow"},
        env={"LOCATOR_CLONE_MODE": "deep"},
        config_dir=config_dir,
    )
    assert resolver.resolve_setting("clone_mode") == "shallow"

    resolver = SettingsResolver(env={"LOCATOR_CLONE_MODE": "shallow"}, config_dir=config_dir)
    assert resolver.resolve_setting("clone_mode") == "shallow"

    resolver = SettingsResolver(env={}, config_dir=config_dir)
    settings = ContainerSettings.resolve(resolver)
    assert settings.clone_mode == "deep"
    assert settings.thread_safe is False


def test_environment_is_read_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCATOR_LOG_LEVEL", "debug")
    resolver = SettingsResolver(config_dir=_config_dir(tmp_path))
    assert ContainerSettings.resolve(resolver).log_level == "DEBUG"


def test_malformed_config_file_is_ignored(tmp_path: Path) -> None:
    config_dir = _config_dir(tmp_path)
    (config_dir / CONFIG_FILE_NAME).write_text("clone_mode = [")

    resolver = SettingsResolver(env={}, config_dir=config_dir)
    assert ContainerSettings.resolve(resolver).clone_mode == "shallow"


def test_invalid_values_raise() -> None:
    with pytest.raises(ValueError):
        ContainerSettings(clone_mode="sideways")
    with pytest.raises(ValueError):
        ContainerSettings(log_level="chatty")

    resolver = SettingsResolver(overrides={"thread_safe": "maybe"}, env={})
    with pytest.raises(ValueError):
        ContainerSettings.resolve(resolver)


def test_container_applies_log_level_and_logs_mutations(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.locator")
    container = Container(settings=ContainerSettings(log_level="debug"), logger=logger)
    assert logger.level == logging.DEBUG

    with caplog.at_level(logging.DEBUG, logger="tests.locator"):
        container.add("answer", 42)
        container.lock("answer")

    messages = [record.getMessage() for record in caplog.records]
    assert "set answer to Value" in messages
    assert "locked answer" in messages


def test_container_without_thread_safety_behaves_the_same() -> None:
    container = Container(settings=ContainerSettings(thread_safe=False))
    container.add("steps", lambda: [])
    container.extend("steps", lambda c, steps: steps + ["done"])
    container.copy("steps", "more_steps", lambda c, steps: steps + ["again"])

    assert container.get("steps") == ["done"]
    assert container.get("more_steps") == ["done", "again"]


def test_log_level_leaves_shared_module_logger_alone() -> None:
    module_logger = logging.getLogger("locator_core.container")
    before = module_logger.level

    Container(settings=ContainerSettings(log_level="debug"))
    assert module_logger.level == before


def test_missing_identifiers_are_logged_before_raising(caplog: pytest.LogCaptureFixture) -> None:
    container = Container(logger=logging.getLogger("tests.locator.missing"))

    with caplog.at_level(logging.DEBUG, logger="tests.locator.missing"):
        for operation in (
            lambda: container.get("ghost"),
            lambda: container.extend("ghost", lambda c, value: value),
            lambda: container.copy("ghost", "phantom"),
            lambda: container.lock("ghost"),
            lambda: container.unlock("ghost"),
        ):
            with pytest.raises(NotFoundError):
                operation()

    messages = [record.getMessage() for record in caplog.records]
    assert messages.count("identifier ghost is not registered") == 5
