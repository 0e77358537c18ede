from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Generic, TypeVar, overload

from typing_extensions import Self

from beanwire._internal.application import ApplicationContext, get_base_application_context
from beanwire._internal.construction_context import (
    bind_component_context,
    component_context_of,
    current_component_context,
)
from beanwire._internal.container import ComponentContext
from beanwire._internal.markers import Inject
from beanwire._internal.metadata import NEED_SCOPE_ATTR
from beanwire._internal.resolution import property_component
from beanwire._internal.scope import Scope
from beanwire.exceptions import MustUseProvideScopeError, WrongScopeProvidedError

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])


class Autowired(Generic[T]):
    """Descriptor that injects a dependency on first attribute access.

    The resolved value is stored in the instance ``__dict__`` under the same
    name, so later reads skip the descriptor and the attribute stays
    assignable.
    """

    __beanwire_autowired__ = True

    def __init__(self, target: Any = None, *, lazy: bool = False) -> None:
        if target is None or isinstance(target, Inject):
            self.type_override: Inject | None = target
        else:
            self.type_override = Inject(target)
        self.lazy = lazy
        self.name: str | None = None

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        if self.name is None:
            msg = "autowired() must be assigned in a class body."
            raise TypeError(msg)

        context = component_context_of(instance)
        if context is None:
            context = current_component_context()
        if context is None:
            context = get_base_application_context().get_bean(ComponentContext)
        bind_component_context(instance, context)

        dependency = property_component(type(instance), self.name)
        (value,) = context.get_dependency_list([dependency])
        namespace = getattr(instance, "__dict__", None)
        if isinstance(namespace, dict):
            namespace[self.name] = value
        return value

    def __repr__(self) -> str:
        return (
            f"Autowired(name={self.name!r}, type_override={self.type_override!r}, "
            f"lazy={self.lazy})"
        )


def autowired(target: Any = None, *, lazy: bool = False) -> Any:
    """Declare a property injected on first access.

    The dependency type comes from the class annotation unless ``target``
    names a class, token or forward-reference callable. The instance resolves
    through the context that built it, then the ambient context, then the
    root container.

    Examples:
        .. code-block:: python

            class Handler:
                repository: Repository = autowired()
                url: str = autowired(API_URL)
                audit: AuditLog = autowired(lazy=True)

    """
    return Autowired(target, lazy=lazy)


def need_scope(required_scope: Scope) -> Callable[[C], C]:
    """Require direct instantiation of a class inside ``provide_scope`` of ``required_scope``.

    The instance is bound to the providing container, so its autowired
    properties resolve there. The class also receives ``application_context``
    and ``component_context`` properties unless it defines those names.

    Raises:
        MustUseProvideScopeError: When instantiated with no ambient context.
        WrongScopeProvidedError: When the ambient context belongs to another scope.

    """

    def decorator(cls: C) -> C:
        original_init = cls.__init__

        @functools.wraps(original_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            context = current_component_context()
            if context is None:
                raise MustUseProvideScopeError(type(self), required_scope.path)
            if context.scope is not required_scope:
                raise WrongScopeProvidedError(type(self), required_scope.path, context.scope.path)
            bind_component_context(self, context)
            original_init(self, *args, **kwargs)

        cls.__init__ = __init__  # type: ignore[misc]
        setattr(cls, NEED_SCOPE_ATTR, required_scope)
        _install_context_property(cls, "application_context", ApplicationContext)
        _install_context_property(cls, "component_context", ComponentContext)
        return cls

    return decorator


def _install_context_property(cls: type[Any], name: str, target: type[Any]) -> None:
    if hasattr(cls, name):
        return
    descriptor: Autowired[Any] = Autowired(target)
    setattr(cls, name, descriptor)
    descriptor.__set_name__(cls, name)


__all__ = ["Autowired", "autowired", "need_scope"]
