from __future__ import annotations

import inspect
import operator
import types
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from beanwire._internal.components import Component
from beanwire._internal.metadata import (
    ParameterDescriptor,
    PropertyDescriptor,
    get_metadata_provider,
)
from beanwire.exceptions import UnresolvedTypeError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Dependency:
    """Pair a parameter descriptor with the component that satisfies it.

    ``component`` is ``None`` for parameters whose type is undeterminable but
    which have a default value. Such parameters, and defaulted parameters whose
    component cannot be constructed, are left to their default.
    """

    descriptor: ParameterDescriptor
    component: Component[Any] | None

    def is_injectable(self) -> bool:
        """Return whether a value must be resolved instead of using the default."""
        if self.component is None:
            return False
        if not self.descriptor.has_default:
            return True
        return self.component.get_component().is_constructable()


def constructor_dependencies(cls: type[Any]) -> list[Dependency]:
    """Return the dependency list of ``cls``'s constructor."""
    descriptors = get_metadata_provider().get_constructor_params(cls)
    return _to_dependencies(cls, "__init__", descriptors)


def method_dependencies(cls: type[Any], member_name: str) -> list[Dependency]:
    """Return the dependency list of method ``member_name`` declared on ``cls``."""
    descriptors = get_metadata_provider().get_member_params(cls, member_name)
    return _to_dependencies(cls, member_name, descriptors)


def property_component(cls: type[Any], property_name: str) -> Component[Any]:
    """Return the component injected into autowired property ``property_name``."""
    for descriptor in get_metadata_provider().list_autowired_properties(cls):
        if descriptor.name != property_name:
            continue
        component = to_component(descriptor)
        if component is not None:
            return component
        break
    raise UnresolvedTypeError(cls, property_name=property_name)


def to_component(descriptor: ParameterDescriptor | PropertyDescriptor) -> Component[Any] | None:
    """Combine declared type, override and lazy flag; ``None`` when no type is known."""
    override = descriptor.type_override
    target = override.resolve_target() if override is not None else descriptor.declared_type
    if not _is_determinable(target):
        return None
    component = Component.create(target)
    return component.to_lazy() if descriptor.lazy else component


def _is_determinable(target: Any) -> bool:
    if isinstance(target, Component):
        return True
    if target is Any or target is object:
        return False
    return isinstance(target, type) and not isinstance(target, types.GenericAlias)


def _to_dependencies(
    cls: type[Any],
    member_name: str,
    descriptors: Sequence[ParameterDescriptor],
) -> list[Dependency]:
    dependencies: list[Dependency] = []
    for index, descriptor in enumerate(descriptors):
        component = to_component(descriptor)
        if component is None and not descriptor.has_default:
            raise UnresolvedTypeError(cls, index=index, member=member_name)
        dependencies.append(Dependency(descriptor, component))
    return dependencies


def bind_arguments(
    dependencies: Sequence[Dependency],
    values: Sequence[Any],
) -> tuple[list[Any], dict[str, Any]]:
    """Split resolved values into positional and keyword arguments.

    ``values`` holds one resolved value per dependency, in order.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for dependency, value in zip(dependencies, values, strict=True):
        if dependency.descriptor.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[dependency.descriptor.name] = value
    return args, kwargs


def _forward_unary(function: Callable[[Any], Any]) -> Callable[[LazyProxy[Any]], Any]:
    def method(self: LazyProxy[Any]) -> Any:
        return function(self._lazy_target())  # noqa: SLF001

    return method


def _forward_binary(function: Callable[[Any, Any], Any]) -> Callable[[LazyProxy[Any], Any], Any]:
    def method(self: LazyProxy[Any], other: Any) -> Any:
        return function(self._lazy_target(), other)  # noqa: SLF001

    return method


def _forward_reflected(
    function: Callable[[Any, Any], Any],
) -> Callable[[LazyProxy[Any], Any], Any]:
    def method(self: LazyProxy[Any], other: Any) -> Any:
        return function(other, self._lazy_target())  # noqa: SLF001

    return method


class LazyProxy(Generic[T]):
    """Stand in for a lazily injected dependency.

    The target is resolved on the first attribute access, call, assignment
    or operator use and reused afterwards. Truth tests, ``str``, comparisons,
    hashing, container protocols and arithmetic all see the target, so a
    target of ``None`` is falsy. ``repr`` describes the proxy itself. Use
    ``unwrap_lazy`` to get the target object, for example for identity checks
    or ``isinstance``.
    """

    __slots__ = ("_lazy_resolve", "_lazy_resolved", "_lazy_value")

    def __init__(self, resolve: Callable[[], T]) -> None:
        object.__setattr__(self, "_lazy_resolve", resolve)
        object.__setattr__(self, "_lazy_resolved", False)
        object.__setattr__(self, "_lazy_value", None)

    def _lazy_target(self) -> T:
        if not self._lazy_resolved:
            object.__setattr__(self, "_lazy_value", self._lazy_resolve())
            object.__setattr__(self, "_lazy_resolved", True)
        return self._lazy_value  # type: ignore[return-value]

    def __getattr__(self, name: str) -> Any:
        return getattr(self._lazy_target(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._lazy_target(), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._lazy_target(), name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._lazy_target()(*args, **kwargs)  # type: ignore[operator]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._lazy_target()[key] = value  # type: ignore[index]

    def __delitem__(self, key: Any) -> None:
        del self._lazy_target()[key]  # type: ignore[attr-defined]

    def __format__(self, format_spec: str) -> str:
        return format(self._lazy_target(), format_spec)

    def __dir__(self) -> list[str]:
        return dir(self._lazy_target())

    def __repr__(self) -> str:
        if self._lazy_resolved:
            return f"LazyProxy({self._lazy_value!r})"
        return "LazyProxy(<unresolved>)"

    __bool__ = _forward_unary(bool)
    __str__ = _forward_unary(str)
    __bytes__ = _forward_unary(bytes)
    __hash__ = _forward_unary(hash)  # type: ignore[assignment]
    __len__ = _forward_unary(len)
    __iter__ = _forward_unary(iter)
    __reversed__ = _forward_unary(reversed)
    __int__ = _forward_unary(int)
    __float__ = _forward_unary(float)
    __index__ = _forward_unary(operator.index)
    __neg__ = _forward_unary(operator.neg)
    __pos__ = _forward_unary(operator.pos)
    __abs__ = _forward_unary(abs)
    __invert__ = _forward_unary(operator.invert)

    __eq__ = _forward_binary(operator.eq)  # type: ignore[assignment]
    __ne__ = _forward_binary(operator.ne)  # type: ignore[assignment]
    __lt__ = _forward_binary(operator.lt)
    __le__ = _forward_binary(operator.le)
    __gt__ = _forward_binary(operator.gt)
    __ge__ = _forward_binary(operator.ge)
    __contains__ = _forward_binary(operator.contains)
    __getitem__ = _forward_binary(operator.getitem)

    __add__ = _forward_binary(operator.add)
    __sub__ = _forward_binary(operator.sub)
    __mul__ = _forward_binary(operator.mul)
    __matmul__ = _forward_binary(operator.matmul)
    __truediv__ = _forward_binary(operator.truediv)
    __floordiv__ = _forward_binary(operator.floordiv)
    __mod__ = _forward_binary(operator.mod)
    __pow__ = _forward_binary(operator.pow)
    __lshift__ = _forward_binary(operator.lshift)
    __rshift__ = _forward_binary(operator.rshift)
    __and__ = _forward_binary(operator.and_)
    __or__ = _forward_binary(operator.or_)
    __xor__ = _forward_binary(operator.xor)

    __radd__ = _forward_reflected(operator.add)
    __rsub__ = _forward_reflected(operator.sub)
    __rmul__ = _forward_reflected(operator.mul)
    __rmatmul__ = _forward_reflected(operator.matmul)
    __rtruediv__ = _forward_reflected(operator.truediv)
    __rfloordiv__ = _forward_reflected(operator.floordiv)
    __rmod__ = _forward_reflected(operator.mod)
    __rpow__ = _forward_reflected(operator.pow)
    __rlshift__ = _forward_reflected(operator.lshift)
    __rrshift__ = _forward_reflected(operator.rshift)
    __rand__ = _forward_reflected(operator.and_)
    __ror__ = _forward_reflected(operator.or_)
    __rxor__ = _forward_reflected(operator.xor)


def unwrap_lazy(value: Any) -> Any:
    """Return the resolved target of a ``LazyProxy``; other values pass through."""
    if isinstance(value, LazyProxy):
        return value._lazy_target()  # noqa: SLF001
    return value


__all__ = [
    "Dependency",
    "LazyProxy",
    "bind_arguments",
    "constructor_dependencies",
    "method_dependencies",
    "property_component",
    "to_component",
    "unwrap_lazy",
]
