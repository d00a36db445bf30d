"""Definition shapes stored by the service container.

A definition is exactly one of:

* :class:`Value` - an object handed back unchanged on every resolution.
* :class:`Factory` - a callable receiving the container, invoked on every
  resolution.
* :class:`TypeHandle` - a class instantiated with no arguments on every
  resolution.

Raw objects passed to the container are mapped onto these shapes by
:func:`definition_for`.
"""

from __future__ import annotations

import copy
import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from .errors import InvalidDefinitionError

if TYPE_CHECKING:
    from .container import Container

__all__ = [
    "Decorator",
    "Definition",
    "Factory",
    "FactoryFunc",
    "TypeHandle",
    "Value",
    "definition_for",
    "positional_arity",
    "validate_decorator",
]

FactoryFunc = Callable[["Container"], Any]
Decorator = Callable[["Container", Any], Any]

_ATOMIC_TYPES = (str, bytes, int, float, complex, bool, type(None), range)


def positional_arity(func: Callable[..., Any]) -> int | None:
    """Return how many positional arguments ``func`` declares.

    ``None`` means the callable takes ``*args`` and accepts any count.
    """

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise InvalidDefinitionError(f"cannot inspect the signature of {func!r}") from exc

    count = 0
    variadic = False
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            variadic = True
        elif parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
        elif (
            parameter.kind is inspect.Parameter.KEYWORD_ONLY
            and parameter.default is inspect.Parameter.empty
        ):
            raise InvalidDefinitionError(
                f"{func!r} requires keyword-only argument {parameter.name!r}"
            )
    return None if variadic else count


@dataclass(frozen=True)
class Value:
    """A plain object returned as-is."""

    value: Any

    def resolve(self, container: Container) -> Any:
        return self.value

    def as_factory(self) -> Factory:
        value = self.value

        def provide(_container: Container) -> Any:
            return value

        return Factory(provide)

    def clone(self, *, deep: bool = False) -> Value:
        """Return a copy that shares no mutable state with this value."""

        if isinstance(self.value, _ATOMIC_TYPES) or callable(self.value):
            return self
        if deep:
            return Value(copy.deepcopy(self.value))
        return Value(copy.copy(self.value))


@dataclass(frozen=True)
class Factory:
    """A callable invoked with the container on every resolution."""

    func: FactoryFunc

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise InvalidDefinitionError(f"factory {self.func!r} is not callable")
        arity = positional_arity(self.func)
        if arity is not None and arity != 1:
            raise InvalidDefinitionError(
                f"factory {self.func!r} must accept one argument (the container), "
                f"not {arity}; use Factory.from_callable for zero-argument callables"
            )

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> Factory:
        """Build a factory from a zero- or one-argument callable."""

        arity = positional_arity(func)
        if arity == 0:

            def call_without_container(_container: Container) -> Any:
                return func()

            return cls(call_without_container)
        if arity is None or arity == 1:
            return cls(func)
        raise InvalidDefinitionError(
            f"factory {func!r} must accept zero or one argument (the container), "
            f"not {arity}"
        )

    def resolve(self, container: Container) -> Any:
        return self.func(container)

    def as_factory(self) -> Factory:
        return self


@dataclass(frozen=True)
class TypeHandle:
    """A class instantiated lazily, once per resolution."""

    cls: type

    def __post_init__(self) -> None:
        if not isinstance(self.cls, type):
            raise InvalidDefinitionError(f"{self.cls!r} is not a class")

    def resolve(self, container: Container) -> Any:
        return self.cls()

    def as_factory(self) -> Factory:
        cls = self.cls

        def instantiate(_container: Container) -> Any:
            return cls()

        return Factory(instantiate)


Definition = Union[Value, Factory, TypeHandle]


def definition_for(obj: Any) -> Definition:
    """Map a raw registration argument onto a :data:`Definition`."""

    if isinstance(obj, (Value, Factory, TypeHandle)):
        return obj
    if isinstance(obj, type):
        return TypeHandle(obj)
    if callable(obj):
        return Factory.from_callable(obj)
    return Value(obj)


def validate_decorator(decorator: Decorator) -> None:
    """Ensure ``decorator`` accepts ``(container, previous)``."""

    if not callable(decorator):
        raise InvalidDefinitionError(f"decorator {decorator!r} is not callable")
    arity = positional_arity(decorator)
    if arity is not None and arity != 2:
        raise InvalidDefinitionError(
            "decorators must accept exactly two arguments, the container and "
            f"the previous instance; {decorator!r} accepts {arity}"
        )
