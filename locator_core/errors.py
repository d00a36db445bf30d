"""Custom errors raised by the service container."""

from __future__ import annotations


class ContainerError(Exception):
    """Base class for service container errors."""


class NotFoundError(ContainerError, LookupError):
    """Raised when an identifier is not registered."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"{identifier!r} is not registered.")
        self.identifier = identifier


class DuplicateIdentifierError(ContainerError):
    """Raised when an identifier is already registered."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"{identifier!r} is already registered.")
        self.identifier = identifier


class LockedError(ContainerError):
    """Raised when a locked identifier is modified or removed."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"{identifier!r} is locked.")
        self.identifier = identifier


class InvalidDefinitionError(ContainerError, TypeError):
    """Raised when a definition or decorator has the wrong shape."""
