"""Service container that lazily resolves registered definitions."""

from __future__ import annotations

import contextlib
import logging
import threading
import warnings
from typing import Any, ContextManager, Iterable, Mapping, Tuple, Union

from .definitions import (
    Decorator,
    Definition,
    Factory,
    Value,
    definition_for,
    validate_decorator,
)
from .errors import (
    DuplicateIdentifierError,
    InvalidDefinitionError,
    LockedError,
    NotFoundError,
)
from .settings import ContainerSettings

__all__ = ["Container"]

DefinitionSource = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


class Container:
    """Registry mapping identifiers to values, factories and classes.

    Factories and classes are resolved on every :meth:`get`; nothing is cached.
    A factory that should behave like a singleton has to close over its own
    instance, or the instance can be registered directly as a value.
    """

    def __init__(
        self,
        definitions: DefinitionSource | None = None,
        *,
        settings: ContainerSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or ContainerSettings()
        self._logger = logger or logging.getLogger(__name__)
        # the module logger is shared by every container, so only injected loggers are tuned
        if logger is not None and self.settings.log_level:
            self._logger.setLevel(self.settings.log_level)
        self._lock: ContextManager[Any] = (
            threading.RLock() if self.settings.thread_safe else contextlib.nullcontext()
        )
        self._definitions: dict[str, Definition] = {}
        self._locked: set[str] = set()

        if definitions:
            pairs = definitions.items() if isinstance(definitions, Mapping) else definitions
            for identifier, definition in pairs:
                self.set(identifier, definition)

    def _not_found(self, identifier: str) -> NotFoundError:
        self._logger.debug("identifier %s is not registered", identifier)
        return NotFoundError(identifier)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.has(identifier)

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __repr__(self) -> str:
        return f"Container<{len(self)} definitions, {len(self._locked)} locked>"

    def has(self, identifier: str) -> bool:
        """Return whether `identifier` is registered."""
        with self._lock:
            return identifier in self._definitions

    def identifiers(self) -> tuple[str, ...]:
        """Return all registered identifiers in sorted order."""
        with self._lock:
            return tuple(sorted(self._definitions))

    def add(self, identifier: str, definition: Any) -> None:
        """Register a new definition, raising if `identifier` is taken.

        Classes are instantiated lazily, callables taking zero or one argument
        become factories and anything else is stored as a plain value. Wrap an
        object in :class:`~locator_core.definitions.Value` to store a class or a
        callable as-is.
        """
        with self._lock:
            if identifier in self._definitions:
                self._logger.debug("rejecting duplicate registration of %s", identifier)
                raise DuplicateIdentifierError(identifier)
            self.set(identifier, definition)

    def set(self, identifier: str, definition: Any) -> None:
        """Create or replace the definition of `identifier` unless it is locked."""
        with self._lock:
            if identifier in self._locked:
                self._logger.debug("refusing to modify locked identifier %s", identifier)
                raise LockedError(identifier)
            normalized = definition_for(definition)
            self._definitions[identifier] = normalized
        self._logger.debug("set %s to %s", identifier, type(normalized).__name__)

    def get(self, identifier: str) -> Any:
        """Resolve `identifier` to a concrete value."""
        with self._lock:
            definition = self._definitions.get(identifier)
        if definition is None:
            raise self._not_found(identifier)
        return definition.resolve(self)

    def extend(self, identifier: str, decorator: Decorator) -> None:
        """Wrap the definition of `identifier` with `decorator`.

        ``decorator(container, previous)`` receives the value produced by the
        current definition and returns its replacement. Nothing runs until the
        next :meth:`get`; later decorators wrap earlier ones.
        """
        with self._lock:
            definition = self._definitions.get(identifier)
            if definition is None:
                raise self._not_found(identifier)
            if identifier in self._locked:
                self._logger.debug("refusing to extend locked identifier %s", identifier)
                raise LockedError(identifier)
            validate_decorator(decorator)

            previous = definition.as_factory()

            def extended(container: Container) -> Any:
                instance = previous.resolve(container)
                if instance is None:
                    raise InvalidDefinitionError(
                        f"old definition of {identifier!r} produced no value to extend"
                    )
                return decorator(container, instance)

            self.set(identifier, Factory(extended))
        self._logger.debug("extended %s", identifier)

    def copy(
        self,
        identifier: str,
        new_identifier: str,
        decorator: Decorator | None = None,
    ) -> None:
        """Register the definition of `identifier` again as `new_identifier`.

        Plain values holding mutable objects are cloned so the two entries do
        not share state; factories and classes are shared.
        """
        with self._lock:
            definition = self._definitions.get(identifier)
            if definition is None:
                raise self._not_found(identifier)
            if decorator is not None:
                validate_decorator(decorator)
            if isinstance(definition, Value):
                definition = definition.clone(deep=self.settings.deep_clone)
            self.add(new_identifier, definition)
            if decorator is not None:
                self.extend(new_identifier, decorator)
        self._logger.debug("copied %s to %s", identifier, new_identifier)

    def lock(self, identifier: str) -> None:
        """Protect `identifier` from being modified, extended or removed."""
        with self._lock:
            if identifier not in self._definitions:
                raise self._not_found(identifier)
            self._locked.add(identifier)
        self._logger.debug("locked %s", identifier)

    def locked(self, identifier: str) -> bool:
        """Return whether `identifier` is locked."""
        with self._lock:
            return identifier in self._locked

    def unlock(self, identifier: str) -> None:
        with self._lock:
            if identifier not in self._definitions:
                raise self._not_found(identifier)
            self._locked.discard(identifier)
        self._logger.debug("unlocked %s", identifier)

    def remove(self, identifier: str) -> None:
        """Unregister `identifier`; unknown identifiers are ignored."""
        with self._lock:
            if identifier in self._locked:
                self._logger.debug("refusing to remove locked identifier %s", identifier)
                raise LockedError(identifier)
            if self._definitions.pop(identifier, None) is not None:
                self._logger.debug("removed %s", identifier)

    # older method names, kept for backwards compatibility
    def register(self, identifier: str, definition: Any) -> None:
        self.add(identifier, definition)

    def modify(self, identifier: str, definition: Any) -> None:
        self.set(identifier, definition)

    def resolve(self, identifier: str) -> Any:
        return self.get(identifier)

    def unregister(self, identifier: str) -> None:
        self.remove(identifier)

    def register_as(
        self,
        new_identifier: str,
        identifier: str,
        decorator: Decorator | None = None,
    ) -> None:
        self.copy(identifier, new_identifier, decorator)

    def registered(self, identifier: str) -> bool:
        warnings.warn(
            "Container.registered() is deprecated; use has() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.has(identifier)
