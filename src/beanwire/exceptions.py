from __future__ import annotations

from typing import Any


class BeanwireError(Exception):
    """Represent a base class for all beanwire-specific failures.

    Catch this type when you want to handle any beanwire error path without
    matching each concrete exception class individually. Exceptions raised by
    user factories, constructors and post-construct hooks are never wrapped and
    do not derive from this class.
    """


class NotAComponentError(BeanwireError):
    """Signal resolution of a class that is neither a component nor factory-bound.

    Raised by ``get_bean`` when the requested class (or a class reached through
    a dependency list) carries no ``@component`` marker and no factory was set
    with ``take(cls).set_factory(...)``.

    Typical fixes include decorating the class with ``@component`` or binding a
    factory for it.
    """

    def __init__(self, component_class: type[Any]) -> None:
        self.component_class = component_class
        super().__init__(
            f"Cannot instantiate class {component_class.__qualname__}: it is not a component.",
        )


class FactoryNotFoundError(BeanwireError):
    """Signal resolution of a ``DependencyToken`` that has no binding.

    Raised by ``get_bean`` when the token was never configured with
    ``set_factory`` or ``bind_to``.
    """

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"Factory for {token.name} not found.")


class UnresolvedTypeError(BeanwireError):
    """Signal a parameter or property whose dependency type cannot be determined.

    Raised while building a dependency list when a parameter has no annotation,
    is annotated with ``Any``/``object`` or with something that is neither a
    class nor a token, and carries no ``Inject(...)`` override. Constructor and
    method parameters fail at construction time, autowired properties fail on
    first access.
    """

    def __init__(
        self,
        owner: type[Any],
        *,
        index: int | None = None,
        member: str | None = None,
        property_name: str | None = None,
    ) -> None:
        self.owner = owner
        self.index = index
        self.member = member
        self.property_name = property_name
        if property_name is not None:
            msg = (
                f"Property {property_name} of class {owner.__qualname__} "
                "failed to determine type."
            )
        else:
            msg = (
                f"The parameter at index {index} of {owner.__qualname__}.{member} "
                "failed to determine type."
            )
        super().__init__(msg)


class MustUseProvideScopeError(BeanwireError):
    """Signal direct instantiation of a ``@need_scope`` class outside ``provide_scope``.

    Typical fix is wrapping the instantiation in
    ``scope_context.provide_scope(lambda: MyClass(...))`` where
    ``scope_context`` is the application context of the required scope.
    """

    def __init__(self, component_class: type[Any], required_scope: str) -> None:
        self.component_class = component_class
        self.required_scope = required_scope
        super().__init__(
            f"Class {component_class.__qualname__} must be initialized via "
            f"[provide_scope] {required_scope}.",
        )


class WrongScopeProvidedError(BeanwireError):
    """Signal direct instantiation of a ``@need_scope`` class under another scope."""

    def __init__(
        self,
        component_class: type[Any],
        required_scope: str,
        provided_scope: str,
    ) -> None:
        self.component_class = component_class
        self.required_scope = required_scope
        self.provided_scope = provided_scope
        super().__init__(
            f"Class {component_class.__qualname__} initialized with different scope provided, "
            f"please provide scope {required_scope} (provided {provided_scope}).",
        )


class CircularDependencyError(BeanwireError):
    """Signal a constructor dependency cycle within one container.

    Raised when building a component requires, directly or transitively, the
    same component of the same container before its constructor returned.

    Typical fix is marking one edge of the cycle as lazy with ``Lazy[T]``.
    """

    def __init__(self, component: Any) -> None:
        self.component = component
        super().__init__(f"Circular dependency detected while constructing {component.name}.")


class ScopeRoutingError(BeanwireError):
    """Signal a broken scope routing invariant.

    Raised when a scope is asked for a direct child toward a scope that is not
    one of its descendants, or when no container owns a common parent scope.
    ``source_scope`` and ``target_scope`` hold the dotted paths of the scope
    routed from and the scope routed toward.
    """

    def __init__(self, message: str, *, source_scope: str, target_scope: str) -> None:
        self.source_scope = source_scope
        self.target_scope = target_scope
        super().__init__(message)
