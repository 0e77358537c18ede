from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from beanwire._internal.defaults import DEFAULT_COMPONENT_LIFETIME
from beanwire._internal.metadata import (
    COMPONENT_ATTR,
    CONTEXT_BOUND_ATTR,
    LIFETIME_ATTR,
    POST_CONSTRUCT_ATTR,
    SCOPE_ATTR,
)
from beanwire._internal.scope import Scope
from beanwire._internal.types import Lifetime

C = TypeVar("C", bound=type[Any])
F = TypeVar("F", bound=Callable[..., Any])


@overload
def component(cls: C, /) -> C: ...


@overload
def component(lifetime: Lifetime | None = None, /) -> Callable[[C], C]: ...


def component(cls_or_lifetime: Any = None, /) -> Any:
    """Mark a class as a component the container may construct.

    Supports bare and parametrized forms. A bare ``@component`` registers a
    singleton; pass ``Lifetime.PROTOTYPE`` to build a new instance on every
    resolution. The marker is not inherited: subclasses must be decorated
    themselves.

    Examples:
        .. code-block:: python

            @component
            class Repository: ...


            @component(Lifetime.PROTOTYPE)
            class Command:
                def __init__(self, repository: Repository) -> None:
                    self.repository = repository

    """
    if isinstance(cls_or_lifetime, type):
        return _mark_component(cls_or_lifetime, DEFAULT_COMPONENT_LIFETIME)

    lifetime = cls_or_lifetime or DEFAULT_COMPONENT_LIFETIME

    def decorator(cls: C) -> C:
        return _mark_component(cls, lifetime)

    return decorator


def _mark_component(cls: C, lifetime: Lifetime) -> C:
    setattr(cls, COMPONENT_ATTR, True)
    setattr(cls, LIFETIME_ATTR, lifetime)
    return cls


def scope(target_scope: Scope) -> Callable[[C], C]:
    """Place a component in ``target_scope`` instead of the root scope."""

    def decorator(cls: C) -> C:
        setattr(cls, SCOPE_ATTR, target_scope)
        return cls

    return decorator


def post_construct(method: F) -> F:
    """Mark a method to run once after construction.

    Hook parameters are injected like constructor parameters. Singletons are
    already cached when hooks run, so a hook may ask for its own class.
    """
    setattr(method, POST_CONSTRUCT_ATTR, True)
    return method


def context_bound(cls: C) -> C:
    """Mark a class that is always built by the container that requests it."""
    setattr(cls, CONTEXT_BOUND_ATTR, True)
    return cls


__all__ = ["component", "context_bound", "post_construct", "scope"]
