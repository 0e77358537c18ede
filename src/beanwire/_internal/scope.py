from __future__ import annotations

import logging
from collections.abc import Iterator

from beanwire._internal.defaults import DEFAULT_SCOPE_KIND, DEFAULT_SCOPE_NAME
from beanwire._internal.types import ScopeKind
from beanwire.exceptions import ScopeRoutingError

logger = logging.getLogger(__name__)


class Scope:
    """Represent a node in the scope tree that partitions the object graph.

    Every scope except the root ``DEFAULT`` scope has exactly one parent.
    ``id`` is the index of the scope among its parent's children and is used by
    containers to look up child containers. Scopes compare by identity: two
    scopes created with the same name are different scopes.

    Examples:
        .. code-block:: python

            ticket = get_default_scope().create_scope("ticket", ScopeKind.SINGLETON)


            @component
            @scope(ticket)
            class TicketData: ...

    """

    __slots__ = ("_children", "_id", "_kind", "_name", "_parent")

    def __init__(
        self,
        name: str,
        parent: Scope | None = None,
        kind: ScopeKind = ScopeKind.SINGLETON,
        scope_id: int = 0,
    ) -> None:
        self._name = name
        self._parent = parent
        self._kind = kind
        self._id = scope_id
        self._children: list[Scope] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Scope | None:
        return self._parent

    @property
    def kind(self) -> ScopeKind:
        return self._kind

    @property
    def id(self) -> int:
        return self._id

    @property
    def path(self) -> str:
        """Return dotted names from the root, for example ``DEFAULT.ticket``."""
        return ".".join(scope.name for scope in reversed(list(self.ancestors())))

    def create_scope(self, name: str, kind: ScopeKind = DEFAULT_SCOPE_KIND) -> Scope:
        """Create a child scope and assign it the next unused child id.

        Scopes are meant to be created during application setup, before any
        component of the new scope is resolved.

        Args:
            name: Display name used in scope paths and error messages.
            kind: ``ScopeKind.SINGLETON`` to reuse one container per parent
                container, ``ScopeKind.PROTOTYPE`` for a fresh container on
                every entry.

        """
        child = Scope(name, self, kind, len(self._children))
        self._children.append(child)
        logger.debug("Created scope %s (kind=%s, id=%d)", child.path, kind.value, child.id)
        return child

    def ancestors(self) -> Iterator[Scope]:
        """Yield this scope followed by its ancestors up to the root."""
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def get_direct_child_for(self, scope: Scope) -> Scope:
        """Return the child of this scope on the path toward ``scope``."""
        for candidate in scope.ancestors():
            if candidate.parent is self:
                return candidate
        msg = f"Scope {scope.path} is not a descendant of scope {self.path}."
        raise ScopeRoutingError(msg, source_scope=self.path, target_scope=scope.path)

    @staticmethod
    def get_common_parent(first: Scope, second: Scope) -> Scope:
        """Return the lowest scope present in both ancestor chains.

        The root is an ancestor of every scope, so a common parent always exists.
        """
        first_chain = set(first.ancestors())
        for candidate in second.ancestors():
            if candidate in first_chain:
                return candidate
        msg = f"Scopes {first.path} and {second.path} do not share a root."
        raise ScopeRoutingError(msg, source_scope=first.path, target_scope=second.path)

    def __repr__(self) -> str:
        return f"Scope({self.path!r}, kind={self._kind.value})"


_DEFAULT_SCOPE = Scope(DEFAULT_SCOPE_NAME)


def get_default_scope() -> Scope:
    """Return the root ``DEFAULT`` scope."""
    return _DEFAULT_SCOPE


def create_scope(name: str, kind: ScopeKind = DEFAULT_SCOPE_KIND) -> Scope:
    """Create a child of the root scope."""
    return _DEFAULT_SCOPE.create_scope(name, kind)


__all__ = ["Scope", "create_scope", "get_default_scope"]
