from __future__ import annotations

import functools
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from beanwire._internal.container import ComponentContext

_COMPONENT_CONTEXT_ATTR = "__beanwire_component_context__"


class ConstructionContext:
    """Single-slot holder for the component context of the running construction.

    The slot is only written through ``bind``, which restores the previous
    value on every exit path. Outside of any construction or
    ``provide_scope`` call the slot is empty.
    """

    __slots__ = ("_current_var",)

    def __init__(self) -> None:
        self._current_var: ContextVar[ComponentContext | None] = ContextVar(
            "beanwire_construction_context",
            default=None,
        )

    @property
    def current(self) -> ComponentContext | None:
        return self._current_var.get()

    @contextmanager
    def bind(self, context: ComponentContext) -> Iterator[ComponentContext]:
        token = self._current_var.set(context)
        try:
            yield context
        finally:
            self._current_var.reset(token)


construction_context = ConstructionContext()


def current_component_context() -> ComponentContext | None:
    """Return the component context of the construction in progress, if any."""
    return construction_context.current


class _ContextTable:
    """Instance to build-context side table that never keeps instances alive.

    Entries are keyed by ``id`` and checked against a weak reference, so
    instances with value-based ``__eq__`` or ``__hash__`` never share an
    entry. Instances that do not support weak references fall back to their
    ``__dict__``.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[int, tuple[weakref.ReferenceType[Any], ComponentContext]] = {}

    def setdefault(self, instance: Any, context: ComponentContext) -> None:
        key = id(instance)
        entry = self._entries.get(key)
        if entry is not None and entry[0]() is instance:
            return
        try:
            reference = weakref.ref(instance, functools.partial(self._discard, key))
        except TypeError:
            namespace = getattr(instance, "__dict__", None)
            if isinstance(namespace, dict):
                namespace.setdefault(_COMPONENT_CONTEXT_ATTR, context)
            return
        self._entries[key] = (reference, context)

    def get(self, instance: Any) -> ComponentContext | None:
        entry = self._entries.get(id(instance))
        if entry is not None and entry[0]() is instance:
            return entry[1]
        namespace = getattr(instance, "__dict__", None)
        if isinstance(namespace, dict):
            return namespace.get(_COMPONENT_CONTEXT_ATTR)
        return None

    def _discard(self, key: int, reference: weakref.ReferenceType[Any]) -> None:
        entry = self._entries.get(key)
        if entry is not None and entry[0] is reference:
            del self._entries[key]


_bound_contexts = _ContextTable()


def bind_component_context(instance: Any, context: ComponentContext) -> None:
    """Remember ``context`` as the build context of ``instance`` unless one is set.

    The instance itself is not modified. Instances that support neither weak
    references nor ``__dict__`` (slotted classes, builtins) are left alone.
    """
    _bound_contexts.setdefault(instance, context)


def component_context_of(instance: Any) -> ComponentContext | None:
    """Return the component context attached to ``instance`` at construction."""
    return _bound_contexts.get(instance)


__all__ = [
    "ConstructionContext",
    "bind_component_context",
    "component_context_of",
    "construction_context",
    "current_component_context",
]
