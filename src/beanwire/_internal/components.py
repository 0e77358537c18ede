from __future__ import annotations

import inspect
import weakref
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from typing_extensions import Self

from beanwire._internal.defaults import DEFAULT_CLASS_LIFETIME, DEFAULT_TOKEN_LIFETIME
from beanwire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from beanwire._internal.metadata import CONTEXT_BOUND_ATTR, get_metadata_provider
from beanwire._internal.scope import Scope, get_default_scope
from beanwire._internal.types import Lifetime
from beanwire.exceptions import FactoryNotFoundError, NotAComponentError

if TYPE_CHECKING:
    from beanwire._internal.container import ComponentContext

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class BeanFactory(Protocol[T_co]):
    """Shape of a factory class accepted by ``set_factory``.

    The factory class must itself be a component. Its ``create`` parameters
    are injected on every call.
    """

    def create(self, *args: Any, **kwargs: Any) -> T_co: ...


class ComponentFactory(ABC):
    """Produce instances for a component that is not built from its own constructor."""

    @abstractmethod
    def construct(self, context: ComponentContext) -> Any: ...


class FunctionFactory(ComponentFactory):
    """Call a plain function, passing the build context when it asks for one."""

    def __init__(self, function: Callable[..., Any]) -> None:
        self._function = function
        self._takes_context = _accepts_positional_argument(function)

    def construct(self, context: ComponentContext) -> Any:
        if self._takes_context:
            return self._function(context)
        return self._function()


class ClassFactory(ComponentFactory):
    """Resolve a factory component and call its injected ``create`` method."""

    def __init__(self, component: Component[Any]) -> None:
        self._component = component

    def construct(self, context: ComponentContext) -> Any:
        factory = context.get_bean(self._component)
        return context.invoke_member(factory, "create")


def _accepts_positional_argument(function: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(function).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        parameter.kind is inspect.Parameter.VAR_POSITIONAL
        or (
            parameter.kind
            in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and parameter.default is inspect.Parameter.empty
        )
        for parameter in parameters
    )


class Component(Generic[T]):
    """Canonical resolvable descriptor for a class or a token.

    Containers key their caches by the canonical component returned from
    ``get_component``, so every request for the same class or token lands on
    the same cache slot.
    """

    def __init__(self) -> None:
        self._factory: ComponentFactory | None = None
        self._lifetime_override: Lifetime | None = None

    @staticmethod
    def create(target: Any) -> Component[Any]:
        """Return the component for a class or token, memoized per class."""
        if isinstance(target, Component):
            return target
        if isinstance(target, type):
            return ClassComponent.for_class(target)
        msg = f"Cannot create a component for {target!r}: expected a class or a DependencyToken."
        raise TypeError(msg)

    @property
    def name(self) -> str:
        raise NotImplementedError

    @property
    def factory(self) -> ComponentFactory | None:
        return self._factory

    def get_component(self) -> Component[Any]:
        return self

    def get_scope(self) -> Scope | None:
        raise NotImplementedError

    def get_type(self) -> Lifetime:
        raise NotImplementedError

    def set_type(self, lifetime: Lifetime) -> Self:
        """Override the lifecycle declared by metadata or at token creation."""
        self._lifetime_override = lifetime
        return self

    def set_factory(self, factory: Callable[..., Any] | type[Any] | Component[Any]) -> Self:
        """Bind a factory function or a factory component, replacing any earlier binding.

        Bind factories during setup, before the component is first resolved.
        Functions taking a positional parameter receive the build's
        ``ComponentContext``.
        """
        if isinstance(factory, (type, Component)):
            self._factory = ClassFactory(Component.create(factory))
        elif callable(factory):
            self._factory = FunctionFactory(factory)
        else:
            msg = f"Factory must be a callable or a factory class, got {factory!r}."
            raise TypeError(msg)
        return self

    def is_constructable(self) -> bool:
        return self._factory is not None

    def ensure_constructable(self) -> None:
        raise NotImplementedError

    def is_application_context(self) -> bool:
        return False

    def construct(self, context: ComponentContext) -> T:
        raise NotImplementedError

    def post_construct(self, context: ComponentContext, instance: T) -> None:
        """Run post-construction hooks; components without hooks do nothing."""

    def to_lazy(self) -> LazyComponent[T]:
        return LazyComponent(self)


class ClassComponent(Component[T]):
    """Component backed by a class and the metadata provider's view of it."""

    _registry: ClassVar[weakref.WeakKeyDictionary[type[Any], ClassComponent[Any]]] = (
        weakref.WeakKeyDictionary()
    )

    def __init__(self, cls: type[T]) -> None:
        super().__init__()
        self._cls = cls

    @classmethod
    def for_class(cls, target: type[T]) -> ClassComponent[T]:
        component = cls._registry.get(target)
        if component is None:
            component = ClassComponent(target)
            cls._registry[target] = component
        return component

    @property
    def cls(self) -> type[T]:
        return self._cls

    @property
    def name(self) -> str:
        return f"class {self._cls.__qualname__}"

    @property
    def is_settings(self) -> bool:
        return is_pydantic_settings_subclass(self._cls)

    def get_scope(self) -> Scope | None:
        if self.is_application_context():
            return None
        return get_metadata_provider().get_scope(self._cls) or get_default_scope()

    def get_type(self) -> Lifetime:
        if self._lifetime_override is not None:
            return self._lifetime_override
        declared = get_metadata_provider().get_lifecycle(self._cls)
        if declared is not None:
            return declared
        if self.is_settings:
            return Lifetime.SINGLETON
        return DEFAULT_CLASS_LIFETIME

    def is_constructable(self) -> bool:
        return (
            get_metadata_provider().is_component(self._cls)
            or self._factory is not None
            or self.is_settings
        )

    def ensure_constructable(self) -> None:
        if not self.is_constructable():
            raise NotAComponentError(self._cls)

    def is_application_context(self) -> bool:
        return bool(getattr(self._cls, CONTEXT_BOUND_ATTR, False))

    def construct(self, context: ComponentContext) -> T:
        if self._factory is not None:
            return self._factory.construct(context)
        return context.instantiate(self)

    def post_construct(self, context: ComponentContext, instance: T) -> None:
        context.run_post_construct(self, instance)

    def __repr__(self) -> str:
        return f"ClassComponent({self._cls.__qualname__})"


class DependencyToken(Component[T]):
    """Named, typed identity for a dependency that is not a class.

    A token must be bound with ``set_factory`` or ``bind_to`` before its first
    resolution. Rebinding replaces the previous binding.

    Examples:
        .. code-block:: python

            API_URL: DependencyToken[str] = DependencyToken.create("api_url")
            take(API_URL).set_factory(lambda: "https://example.test")

            Storage: DependencyToken[BlobStore] = DependencyToken.create("storage")
            take(Storage).bind_to(S3BlobStore)

    """

    def __init__(
        self,
        name: str,
        *,
        lifetime: Lifetime = DEFAULT_TOKEN_LIFETIME,
        scope: Scope | None = None,
    ) -> None:
        super().__init__()
        self._name = name
        self._lifetime = lifetime
        self._scope = scope
        self._target: Component[Any] | None = None

    @classmethod
    def create(  # type: ignore[override]
        cls,
        name: str,
        *,
        lifetime: Lifetime = DEFAULT_TOKEN_LIFETIME,
        scope: Scope | None = None,
    ) -> DependencyToken[Any]:
        """Create a token; ``lifetime`` defaults to singleton and ``scope`` to the root."""
        return cls(name, lifetime=lifetime, scope=scope)

    @property
    def name(self) -> str:
        return f"token {self._name}"

    @property
    def token_name(self) -> str:
        return self._name

    def get_component(self) -> Component[Any]:
        if self._target is not None:
            return self._target.get_component()
        return self

    def get_scope(self) -> Scope | None:
        return self._scope or get_default_scope()

    def get_type(self) -> Lifetime:
        if self._lifetime_override is not None:
            return self._lifetime_override
        return self._lifetime

    def set_factory(self, factory: Callable[..., Any] | type[Any] | Component[Any]) -> Self:
        self._target = None
        return super().set_factory(factory)

    def bind_to(self, target: type[Any] | Component[Any]) -> Self:
        """Resolve this token as ``target``, replacing any factory binding."""
        self._target = Component.create(target)
        self._factory = None
        return self

    def ensure_constructable(self) -> None:
        if not self.is_constructable():
            raise FactoryNotFoundError(self)

    def construct(self, context: ComponentContext) -> T:
        if self._factory is None:
            raise FactoryNotFoundError(self)
        return self._factory.construct(context)

    def __repr__(self) -> str:
        return f"DependencyToken({self._name!r})"


class LazyComponent(Component[T]):
    """Wrap a component whose resolution is deferred to first use."""

    def __init__(self, inner: Component[T]) -> None:
        super().__init__()
        self._inner = inner

    @property
    def inner(self) -> Component[T]:
        return self._inner

    @property
    def name(self) -> str:
        return f"lazy {self._inner.name}"

    def get_component(self) -> Component[Any]:
        return self._inner.get_component()

    def get_scope(self) -> Scope | None:
        return self._inner.get_scope()

    def get_type(self) -> Lifetime:
        return self._inner.get_type()

    def is_constructable(self) -> bool:
        return self._inner.is_constructable()

    def ensure_constructable(self) -> None:
        self._inner.ensure_constructable()

    def construct(self, context: ComponentContext) -> T:
        return self._inner.construct(context)


def take(target: Any) -> Component[Any]:
    """Return the component of a class or token for configuration.

    Examples:
        .. code-block:: python

            take(Item).set_factory(lambda context: Item(context.get_bean(NAME)))
            take(Item).set_type(Lifetime.SINGLETON)

    """
    return Component.create(target)


__all__ = [
    "BeanFactory",
    "ClassComponent",
    "Component",
    "DependencyToken",
    "LazyComponent",
    "take",
]
