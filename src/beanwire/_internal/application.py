from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from beanwire._internal.construction_context import construction_context
from beanwire._internal.container import ComponentContext, Container
from beanwire._internal.decorators import component, context_bound
from beanwire._internal.scope import Scope
from beanwire._internal.types import Lifetime

logger = logging.getLogger(__name__)

R = TypeVar("R")


@context_bound
@component(Lifetime.SINGLETON)
class ApplicationContext:
    """Public facade of a container.

    Every container owns exactly one application context. Resolve
    ``ApplicationContext`` from a component constructor to get the facade of
    the container that built the component.

    Examples:
        .. code-block:: python

            context = get_base_application_context()
            service = context.get_bean(Service)

            request = context.enter_scope(request_scope)
            handler = request.provide_scope(lambda: RequestHandler())

    """

    __slots__ = ("_container",)

    def __init__(self, container: Container) -> None:
        self._container = container

    @property
    def container(self) -> Container:
        return self._container

    @property
    def scope(self) -> Scope:
        return self._container.scope

    def get_bean(self, dependency: Any) -> Any:
        """Resolve a class, token or component from this context's container.

        Prototype components are built anew on every call.
        """
        return self._container.get_bean(dependency)

    def provide_scope(self, callback: Callable[[], R]) -> R:
        """Run ``callback`` with this context's container as the ambient context.

        Classes decorated with ``@need_scope`` for this context's scope can be
        instantiated directly inside the callback. The previous ambient context
        is restored when the callback returns or raises.
        """
        with construction_context.bind(ComponentContext(self._container)):
            return callback()

    def enter_scope(self, scope: Scope) -> ApplicationContext:
        """Return the application context of the container owning ``scope``.

        Entering a prototype-kind scope creates a new container on every call.
        """
        return self._container.get_container_for_scope(scope).get_bean(ApplicationContext)

    def __repr__(self) -> str:
        return f"ApplicationContext(scope={self.scope.path!r})"


class _RootContext:
    __slots__ = ("container",)

    def __init__(self) -> None:
        self.container: Container | None = None


_root = _RootContext()


def get_base_application_context() -> ApplicationContext:
    """Return the application context of the root container, creating it on first use."""
    if _root.container is None:
        _root.container = Container().init()
        logger.debug("Created root container for scope %s", _root.container.scope.path)
    return _root.container.get_bean(ApplicationContext)


def destroy_context() -> None:
    """Drop the root container and every singleton it holds.

    The next ``get_base_application_context`` call starts from an empty root.
    """
    if _root.container is not None:
        logger.debug("Destroyed root container")
    _root.container = None


__all__ = ["ApplicationContext", "destroy_context", "get_base_application_context"]
