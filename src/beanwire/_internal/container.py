from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from beanwire._internal.components import ClassComponent, Component, LazyComponent
from beanwire._internal.construction_context import bind_component_context, construction_context
from beanwire._internal.decorators import component, context_bound
from beanwire._internal.metadata import get_metadata_provider
from beanwire._internal.resolution import (
    Dependency,
    LazyProxy,
    bind_arguments,
    constructor_dependencies,
    method_dependencies,
)
from beanwire._internal.scope import Scope, get_default_scope
from beanwire._internal.types import Lifetime, ScopeKind
from beanwire.exceptions import CircularDependencyError, ScopeRoutingError

logger = logging.getLogger(__name__)

_MISSING = object()


class DependencyStorage:
    """Instance cache keyed by canonical component.

    Lookups check presence, so ``None`` and other falsy values are cached
    like any other instance.
    """

    __slots__ = ("_instances",)

    def __init__(self) -> None:
        self._instances: dict[Component[Any], Any] = {}

    def get(self, component: Component[Any], default: Any = _MISSING) -> Any:
        return self._instances.get(component, default)

    def save(self, component: Component[Any], instance: Any) -> None:
        self._instances[component] = instance

    def __contains__(self, component: object) -> bool:
        return component in self._instances

    def __len__(self) -> int:
        return len(self._instances)


@context_bound
@component(Lifetime.PROTOTYPE)
class ComponentContext:
    """Handle used by a single construction to resolve its dependencies.

    Prototype components resolved through one handle are cached for the
    handle's lifetime, so a constructor, its post-construct hooks and the
    autowired properties of the built instance share prototype instances.
    Singleton requests go straight to the container.
    """

    __slots__ = ("_container", "_prototypes")

    def __init__(self, container: Container) -> None:
        self._container = container
        self._prototypes = DependencyStorage()

    @property
    def container(self) -> Container:
        return self._container

    @property
    def scope(self) -> Scope:
        return self._container.scope

    def get_bean(self, dependency: Any) -> Any:
        """Resolve a class, token or component through this handle."""
        resolved = Component.create(dependency).get_component()
        if resolved is _COMPONENT_CONTEXT:
            return self
        if resolved.get_type() is not Lifetime.PROTOTYPE:
            return self._container.get_component_instance(resolved)

        instance = self._prototypes.get(resolved)
        if instance is _MISSING:
            instance = self._container.get_component_instance(resolved)
            self._prototypes.save(resolved, instance)
        return instance

    def get_dependency_list(self, components: Iterable[Component[Any]]) -> list[Any]:
        """Resolve ``components`` in order; lazy components become ``LazyProxy`` objects."""
        values: list[Any] = []
        for item in components:
            if isinstance(item, LazyComponent):
                values.append(LazyProxy(functools.partial(self.get_bean, item.inner)))
            else:
                values.append(self.get_bean(item))
        return values

    def instantiate(self, component: ClassComponent[Any]) -> Any:
        cls = component.cls
        if component.is_settings:
            # Settings models read their fields from the environment.
            return cls()
        instance = self._call(cls, constructor_dependencies(cls))
        bind_component_context(instance, self)
        return instance

    def invoke_member(self, instance: Any, member_name: str) -> Any:
        """Call ``instance.member_name`` with its parameters injected."""
        dependencies = method_dependencies(type(instance), member_name)
        return self._call(getattr(instance, member_name), dependencies)

    def run_post_construct(self, component: ClassComponent[Any], instance: Any) -> None:
        for hook_name in get_metadata_provider().list_post_construct_hooks(component.cls):
            self._call(getattr(instance, hook_name), method_dependencies(component.cls, hook_name))

    def _call(self, function: Any, dependencies: Sequence[Dependency]) -> Any:
        injectable = [dependency for dependency in dependencies if dependency.is_injectable()]
        values = self.get_dependency_list(
            [dependency.component for dependency in injectable if dependency.component is not None],
        )
        args, kwargs = bind_arguments(injectable, values)
        return function(*args, **kwargs)

    def __repr__(self) -> str:
        return f"ComponentContext(scope={self.scope.path!r})"


_COMPONENT_CONTEXT = Component.create(ComponentContext)


@context_bound
@component(Lifetime.SINGLETON)
class Container:
    """Cache and routing node owning the instances of one scope.

    Requests for components of another scope are routed through the
    container tree: up to the container of the common parent scope, then down
    one scope at a time. Child containers of singleton-kind scopes are
    created once per parent container and reused. Containers of
    prototype-kind scopes are created fresh on every routing.
    """

    def __init__(self, parent: Container | None = None, scope: Scope | None = None) -> None:
        self._parent = parent
        self._scope = scope or get_default_scope()
        self._storage = DependencyStorage()
        self._children: dict[int, Container] = {}
        self._under_construction: set[Component[Any]] = set()

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def parent(self) -> Container | None:
        return self._parent

    def init(self) -> Container:
        """Register the container as its own ``Container`` component."""
        self._storage.save(_CONTAINER, self)
        return self

    def get_bean(self, dependency: Any) -> Any:
        """Resolve a class, token or component starting at this container."""
        return self.get_component_instance(Component.create(dependency))

    def get_component_instance(self, component: Component[Any]) -> Any:
        resolved = component.get_component()
        instance = self._storage.get(resolved)
        if instance is not _MISSING:
            return instance

        component_scope = resolved.get_scope()
        if component_scope is None or component_scope is self._scope:
            return self._build(resolved)
        return self.get_container_for_scope(component_scope).get_component_instance(resolved)

    def get_container_for_scope(self, scope: Scope) -> Container:
        """Return the container owning ``scope``, creating missing containers on the way."""
        if scope is self._scope:
            return self
        common = Scope.get_common_parent(scope, self._scope)
        container = self.get_parent_container_by_scope(common)
        if container is None:
            msg = f"No container for scope {common.path} above scope {self._scope.path}."
            raise ScopeRoutingError(msg, source_scope=self._scope.path, target_scope=scope.path)
        while container.scope is not scope:
            next_scope = container.scope.get_direct_child_for(scope)
            container = container._get_or_create_child(next_scope)  # noqa: SLF001
        return container

    def get_parent_container_by_scope(self, scope: Scope) -> Container | None:
        """Return this container or the nearest ancestor container owning ``scope``."""
        container: Container | None = self
        while container is not None:
            if container.scope is scope:
                return container
            container = container.parent
        return None

    def count_of_dependencies(self) -> int:
        """Return how many instances this container has cached."""
        return len(self._storage)

    def _get_or_create_child(self, child_scope: Scope) -> Container:
        child = self._children.get(child_scope.id)
        if child is not None:
            return child

        child = Container(parent=self, scope=child_scope).init()
        registered = child_scope.kind is ScopeKind.SINGLETON
        if registered:
            self._children[child_scope.id] = child
        logger.debug("Created container for scope %s (registered=%s)", child_scope.path, registered)
        return child

    def _build(self, component: Component[Any]) -> Any:
        component.ensure_constructable()
        if component in self._under_construction:
            raise CircularDependencyError(component)

        self._under_construction.add(component)
        try:
            context = ComponentContext(self)
            with construction_context.bind(context):
                logger.debug("Building %s in scope %s", component.name, self._scope.path)
                instance = component.construct(context)
                if component.get_type() is Lifetime.SINGLETON:
                    self._storage.save(component, instance)
                component.post_construct(context, instance)
        finally:
            self._under_construction.discard(component)
        return instance

    def __repr__(self) -> str:
        return f"Container(scope={self._scope.path!r})"


_CONTAINER = Component.create(Container)


__all__ = ["ComponentContext", "Container", "DependencyStorage"]
