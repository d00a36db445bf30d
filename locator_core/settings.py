"""Layered settings for service containers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib
from platformdirs import user_config_dir

DEFAULT_APP_NAME = "locator"
CONFIG_FILE_NAME = "locator.toml"
CLONE_MODES = ("shallow", "deep")

_DEFAULTS: dict[str, str] = {
    "clone_mode": "shallow",
    "thread_safe": "true",
}
_ENV_KEY_MAP: dict[str, str] = {
    "clone_mode": "LOCATOR_CLONE_MODE",
    "thread_safe": "LOCATOR_THREAD_SAFE",
    "log_level": "LOCATOR_LOG_LEVEL",
}
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def default_config_dir() -> Path:
    """Return the platform-specific user config directory for containers."""

    return Path(user_config_dir(DEFAULT_APP_NAME, appauthor=False))


def _load_config_from_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return {key: _stringify(value) for key, value in data.items()}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ContainerSettings:
    """Runtime knobs for a :class:`~locator_core.container.Container`."""

    clone_mode: str = "shallow"
    thread_safe: bool = True
    log_level: str | None = None

    def __post_init__(self) -> None:
        if self.clone_mode not in CLONE_MODES:
            raise ValueError(
                f"clone_mode must be one of {', '.join(CLONE_MODES)}; got {self.clone_mode!r}"
            )
        if self.log_level is not None:
            normalized = self.log_level.upper()
            if not isinstance(logging.getLevelName(normalized), int):
                raise ValueError(f"unknown log level {self.log_level!r}")
            object.__setattr__(self, "log_level", normalized)

    @property
    def deep_clone(self) -> bool:
        return self.clone_mode == "deep"

    @classmethod
    def resolve(cls, resolver: SettingsResolver | None = None) -> ContainerSettings:
        """Build settings from the layered sources of ``resolver``."""

        resolver = resolver or SettingsResolver()
        clone_mode = resolver.resolve_setting("clone_mode") or "shallow"
        thread_safe = resolver.resolve_setting("thread_safe") or "true"
        return cls(
            clone_mode=clone_mode.strip().lower(),
            thread_safe=_parse_bool("thread_safe", thread_safe),
            log_level=resolver.resolve_setting("log_level"),
        )


@dataclass
class SettingsResolver:
    """Resolve container settings while honoring layered configuration."""

    config_filename: str = CONFIG_FILE_NAME
    config_dir: Path | None = None
    overrides: Mapping[str, str] | None = None
    env: Mapping[str, str] | None = None
    defaults: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        self.config_dir = self.config_dir or default_config_dir()
        self.overrides = dict(self.overrides or {})
        self.env = self.env if self.env is not None else os.environ
        base_defaults = dict(_DEFAULTS)
        if self.defaults:
            base_defaults.update(self.defaults)
        self.defaults = base_defaults

    def resolve_setting(self, key: str) -> str | None:
        """Return the value for `key` using overrides, env, user file, defaults order."""
        if value := self.overrides.get(key):
            return value
        if value := self._env_value(key):
            return value
        if value := self._user_config_layer().get(key):
            return value
        return self.defaults.get(key)

    def _env_value(self, key: str) -> str | None:
        alias = _ENV_KEY_MAP.get(key)
        if alias:
            return self.env.get(alias) or None
        return None

    def _user_config_layer(self) -> dict[str, str]:
        config_path = self.config_dir / self.config_filename
        return _load_config_from_file(config_path)
