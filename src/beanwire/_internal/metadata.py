from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, get_type_hints, runtime_checkable

from beanwire._internal.markers import Inject, split_annotation
from beanwire._internal.scope import Scope
from beanwire._internal.types import Lifetime

logger = logging.getLogger(__name__)

COMPONENT_ATTR = "__beanwire_component__"
LIFETIME_ATTR = "__beanwire_lifetime__"
SCOPE_ATTR = "__beanwire_scope__"
NEED_SCOPE_ATTR = "__beanwire_need_scope__"
CONTEXT_BOUND_ATTR = "__beanwire_context_bound__"
POST_CONSTRUCT_ATTR = "__beanwire_post_construct__"
AUTOWIRED_ATTR = "__beanwire_autowired__"

_VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe one injectable parameter of a constructor or method."""

    name: str
    kind: inspect._ParameterKind
    declared_type: Any = None
    type_override: Inject | None = None
    lazy: bool = False
    has_default: bool = False


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """Describe one property marked for property-based injection."""

    name: str
    declared_type: Any = None
    type_override: Inject | None = None
    lazy: bool = False


@runtime_checkable
class MetadataProvider(Protocol):
    """Supply the class-level metadata the resolution engine consumes.

    The engine never inspects classes itself. Implement this protocol to back
    components with static registration tables, generated descriptors or any
    other mechanism, then install it with ``set_metadata_provider``.
    """

    def get_constructor_params(self, cls: type[Any]) -> Sequence[ParameterDescriptor]: ...

    def get_member_params(
        self,
        cls: type[Any],
        member_name: str,
    ) -> Sequence[ParameterDescriptor]: ...

    def is_component(self, cls: type[Any]) -> bool: ...

    def get_lifecycle(self, cls: type[Any]) -> Lifetime | None: ...

    def get_scope(self, cls: type[Any]) -> Scope | None: ...

    def list_post_construct_hooks(self, cls: type[Any]) -> Sequence[str]: ...

    def list_autowired_properties(self, cls: type[Any]) -> Sequence[PropertyDescriptor]: ...


class AnnotationMetadataProvider:
    """Read metadata written by the beanwire decorators and type annotations.

    Parameter types come from ``typing.get_type_hints(include_extras=True)`` so
    ``Annotated[..., Inject(...)]`` and ``Lazy[...]`` metadata survive. The
    owning class is added to the local namespace, which lets string
    annotations refer to the class being declared.
    """

    def get_constructor_params(self, cls: type[Any]) -> Sequence[ParameterDescriptor]:
        init = cls.__init__
        if not inspect.isfunction(inspect.unwrap(init)):
            # object.__init__ and C-level initializers take nothing injectable.
            return ()
        return self._describe_callable(cls, init, skip_first=True)

    def get_member_params(
        self,
        cls: type[Any],
        member_name: str,
    ) -> Sequence[ParameterDescriptor]:
        raw_member = inspect.getattr_static(cls, member_name)
        member = getattr(cls, member_name)
        skip_first = not isinstance(raw_member, (staticmethod, classmethod))
        return self._describe_callable(cls, member, skip_first=skip_first)

    def is_component(self, cls: type[Any]) -> bool:
        return bool(cls.__dict__.get(COMPONENT_ATTR, False))

    def get_lifecycle(self, cls: type[Any]) -> Lifetime | None:
        return getattr(cls, LIFETIME_ATTR, None)

    def get_scope(self, cls: type[Any]) -> Scope | None:
        return getattr(cls, SCOPE_ATTR, None)

    def list_post_construct_hooks(self, cls: type[Any]) -> Sequence[str]:
        # A name stays a hook when a subclass overrides it without the decorator.
        hooks: list[str] = []
        for klass in cls.__mro__:
            for name, value in vars(klass).items():
                if name not in hooks and getattr(value, POST_CONSTRUCT_ATTR, False):
                    hooks.append(name)
        return hooks

    def list_autowired_properties(self, cls: type[Any]) -> Sequence[PropertyDescriptor]:
        hints = _evaluate_hints(cls, cls)
        descriptors: list[PropertyDescriptor] = []
        for name, value in _most_derived_members(cls):
            if not getattr(value, AUTOWIRED_ATTR, False):
                continue
            parts = split_annotation(hints.get(name))
            descriptors.append(
                PropertyDescriptor(
                    name=name,
                    declared_type=parts.declared_type,
                    type_override=value.type_override or parts.type_override,
                    lazy=value.lazy or parts.lazy,
                ),
            )
        return descriptors

    def _describe_callable(
        self,
        cls: type[Any],
        func: Callable[..., Any],
        *,
        skip_first: bool,
    ) -> list[ParameterDescriptor]:
        parameters = list(inspect.signature(func).parameters.values())
        if skip_first:
            parameters = parameters[1:]
        hints = _evaluate_hints(cls, func)

        descriptors: list[ParameterDescriptor] = []
        for parameter in parameters:
            if parameter.kind in _VARIADIC_KINDS:
                continue
            parts = split_annotation(hints.get(parameter.name))
            descriptors.append(
                ParameterDescriptor(
                    name=parameter.name,
                    kind=parameter.kind,
                    declared_type=parts.declared_type,
                    type_override=parts.type_override,
                    lazy=parts.lazy,
                    has_default=parameter.default is not inspect.Parameter.empty,
                ),
            )
        return descriptors


def _most_derived_members(cls: type[Any]) -> list[tuple[str, Any]]:
    """Return class attributes walking the MRO, keeping the most derived definition."""
    seen: set[str] = set()
    members: list[tuple[str, Any]] = []
    for klass in cls.__mro__:
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            members.append((name, value))
    return members


def _evaluate_hints(cls: type[Any], target: Any) -> dict[str, Any]:
    try:
        return get_type_hints(target, localns={cls.__name__: cls}, include_extras=True)
    except NameError as exc:
        logger.warning(
            "'%s' name error retrieving %s (%s) type hints",
            exc.name,
            getattr(target, "__name__", target),
            cls.__qualname__,
        )
        return {}


class _MetadataConfiguration:
    __slots__ = ("provider",)

    def __init__(self) -> None:
        self.provider: MetadataProvider = AnnotationMetadataProvider()


_configuration = _MetadataConfiguration()


def get_metadata_provider() -> MetadataProvider:
    """Return the metadata provider used by every component."""
    return _configuration.provider


def set_metadata_provider(provider: MetadataProvider) -> MetadataProvider:
    """Install ``provider`` for all components and return the previous provider.

    Configure the provider during application setup, before the first
    resolution. Components read the provider on every lookup, so swapping it
    later affects dependency lists that have not been built yet.
    """
    previous = _configuration.provider
    _configuration.provider = provider
    return previous


__all__ = [
    "AnnotationMetadataProvider",
    "MetadataProvider",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "get_metadata_provider",
    "set_metadata_provider",
]
