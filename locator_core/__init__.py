"""In-process service locator with lazy definitions, decoration and locking."""

from .container import Container
from .definitions import Factory, TypeHandle, Value, definition_for
from .errors import (
    ContainerError,
    DuplicateIdentifierError,
    InvalidDefinitionError,
    LockedError,
    NotFoundError,
)
from .settings import ContainerSettings, SettingsResolver, default_config_dir

__all__ = [
    "Container",
    "ContainerSettings",
    "SettingsResolver",
    "default_config_dir",
    "Value",
    "Factory",
    "TypeHandle",
    "definition_for",
    "ContainerError",
    "NotFoundError",
    "DuplicateIdentifierError",
    "LockedError",
    "InvalidDefinitionError",
]
