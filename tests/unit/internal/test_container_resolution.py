from __future__ import annotations

import logging
from typing import Annotated, Any

import pytest

from beanwire import (
    ApplicationContext,
    ComponentContext,
    Container,
    DependencyToken,
    Inject,
    Lifetime,
    NotAComponentError,
    autowired,
    component,
    destroy_context,
    get_base_application_context,
    post_construct,
    take,
)
from beanwire.exceptions import FactoryNotFoundError, UnresolvedTypeError


@component
class _Engine:
    def __init__(self) -> None:
        self.label = "engine"


@component
class _Car:
    engine: _Engine = autowired()


@component(Lifetime.PROTOTYPE)
class _Wheel:
    pass


@component
class _Garage:
    def __init__(self, engine: _Engine, wheel: _Wheel) -> None:
        self.engine = engine
        self.wheel = wheel


@component
class _Inspection:
    calls: list[tuple[Any, ...]] = []

    def __init__(self, engine: _Engine) -> None:
        self.engine = engine

    @post_construct
    def check(self, car: _Car, inspection: _Inspection) -> None:
        type(self).calls.append((car, inspection))


@component
class _ForwardInspection:
    car: Any = autowired(lambda: _Car)

    def __init__(self, engine: Annotated[Any, Inject(lambda: _Engine)]) -> None:
        self.engine = engine


class _NotComponent:
    pass


@component
class _Untyped:
    def __init__(self, value) -> None:  # type: ignore[no-untyped-def]  # noqa: ANN001
        self.value = value


@component
class _Defaults:
    def __init__(self, engine: _Engine, retries: int = 3, label="x") -> None:  # noqa: ANN001
        self.engine = engine
        self.retries = retries
        self.label = label


@component
class _Omg:
    pass


@component
class _Wtf:
    pass


@component
class _Base:
    def __init__(self, first: _Omg, second: _Omg) -> None:
        self.first = first
        self.second = second


@component
class _Child(_Base):
    def __init__(self, wtf: _Wtf) -> None:
        super().__init__(_Omg(), _Omg())
        self.wtf = wtf


class _Shape:
    x: int


SHAPE: DependencyToken[_Shape] = DependencyToken.create("shape")


@component
class _Square(_Shape):
    x = 10
    shape: _Shape = autowired(SHAPE)


SHAPE.bind_to(_Square)

_FIRST: DependencyToken[str] = DependencyToken.create("first")
_SECOND: DependencyToken[str] = DependencyToken.create("second")


class _Item:
    def __init__(self, value: str) -> None:
        self.value = value


@component
class _Consumer:
    seen: list[tuple[str, str, str]] = []

    def __init__(
        self,
        data: Annotated[str, Inject(_FIRST)],
        data2: Annotated[str, Inject(_SECOND)],
    ) -> None:
        self.data = data
        self.data2 = data2

    @post_construct
    def post(self, item: _Item) -> None:
        type(self).seen.append((self.data, self.data2, item.value))


def _count(context: ApplicationContext) -> int:
    return context.get_bean(Container).count_of_dependencies()


def test_root_context_starts_with_container_and_itself(
    application_context: ApplicationContext,
) -> None:
    assert _count(application_context) == 2
    assert application_context.get_bean(ApplicationContext) is application_context
    assert application_context.container.get_bean(Container) is application_context.container


def test_singletons_are_cached_and_counted(application_context: ApplicationContext) -> None:
    car = application_context.get_bean(_Car)
    assert _count(application_context) == 3
    assert application_context.get_bean(_Car) is car
    assert _count(application_context) == 3

    engine = application_context.get_bean(_Engine)
    assert _count(application_context) == 4
    assert application_context.get_bean(_Engine) is engine

    assert car.engine is engine


def test_prototypes_are_new_on_every_resolution(application_context: ApplicationContext) -> None:
    first = application_context.get_bean(_Wheel)

    assert application_context.get_bean(_Wheel) is not first
    assert _count(application_context) == 2


def test_singleton_keeps_prototype_resolved_at_construction(
    application_context: ApplicationContext,
) -> None:
    garage = application_context.get_bean(_Garage)

    assert application_context.get_bean(_Garage).wheel is garage.wheel
    assert application_context.get_bean(_Wheel) is not garage.wheel
    assert garage.engine is application_context.get_bean(_Engine)


def test_post_construct_sees_cached_self_and_dependencies(
    application_context: ApplicationContext,
) -> None:
    _Inspection.calls.clear()
    car = application_context.get_bean(_Car)

    inspection = application_context.get_bean(_Inspection)
    application_context.get_bean(_Inspection)

    assert _Inspection.calls == [(car, inspection)]
    assert inspection.engine is application_context.get_bean(_Engine)


def test_inject_override_accepts_forward_reference_callables(
    application_context: ApplicationContext,
) -> None:
    inspection = application_context.get_bean(_ForwardInspection)

    assert inspection.engine is application_context.get_bean(_Engine)
    assert inspection.car is application_context.get_bean(_Car)


def test_class_without_decorator_is_rejected(application_context: ApplicationContext) -> None:
    with pytest.raises(NotAComponentError) as exc_info:
        application_context.get_bean(_NotComponent)

    assert exc_info.value.component_class is _NotComponent
    assert str(exc_info.value) == "Cannot instantiate class _NotComponent: it is not a component."


def test_untyped_constructor_parameter_is_rejected(application_context: ApplicationContext) -> None:
    with pytest.raises(UnresolvedTypeError) as exc_info:
        application_context.get_bean(_Untyped)

    assert exc_info.value.index == 0
    assert exc_info.value.member == "__init__"
    assert "index 0 of _Untyped.__init__" in str(exc_info.value)


def test_parameters_with_defaults_keep_them_when_not_injectable(
    application_context: ApplicationContext,
) -> None:
    defaults = application_context.get_bean(_Defaults)

    assert defaults.engine is application_context.get_bean(_Engine)
    assert defaults.retries == 3
    assert defaults.label == "x"


def test_overridden_constructor_uses_own_parameters(
    application_context: ApplicationContext,
) -> None:
    base = application_context.get_bean(_Base)
    child = application_context.get_bean(_Child)

    assert base.first is base.second
    assert base.first is application_context.get_bean(_Omg)
    assert child.first is not base.first
    assert child.wtf is application_context.get_bean(_Wtf)


def test_token_bound_to_class_resolves_class_singleton(
    application_context: ApplicationContext,
) -> None:
    shape = application_context.get_bean(SHAPE)

    assert shape.x == 10
    assert shape.shape is shape
    assert shape is application_context.get_bean(_Square)


def test_token_factory_returning_none_is_cached(application_context: ApplicationContext) -> None:
    key: DependencyToken[str | None] = DependencyToken.create("nullable")
    calls: list[int] = []

    def factory() -> None:
        calls.append(1)

    take(key).set_factory(factory)

    assert application_context.get_bean(key) is None
    assert application_context.get_bean(key) is None
    assert calls == [1]


def test_singleton_token_calls_factory_once(application_context: ApplicationContext) -> None:
    key: DependencyToken[int] = DependencyToken.create("counter")
    counter = iter(range(10))
    take(key).set_factory(lambda: next(counter))

    assert [application_context.get_bean(key) for _ in range(3)] == [0, 0, 0]


def test_singleton_token_with_class_factory(application_context: ApplicationContext) -> None:
    key: DependencyToken[int] = DependencyToken.create("class-counter")
    counter = iter(range(10))

    @component
    class _Factory:
        def create(self) -> int:
            return next(counter)

    take(key).set_factory(_Factory)

    assert [application_context.get_bean(key) for _ in range(3)] == [0, 0, 0]


def test_prototype_token_calls_factory_every_time(application_context: ApplicationContext) -> None:
    key: DependencyToken[int] = DependencyToken.create("proto", lifetime=Lifetime.PROTOTYPE)
    counter = iter(range(10))
    take(key).set_factory(lambda: next(counter))

    assert [application_context.get_bean(key) for _ in range(3)] == [0, 1, 2]


def test_factory_errors_propagate_unchanged(application_context: ApplicationContext) -> None:
    key: DependencyToken[int] = DependencyToken.create("failing", lifetime=Lifetime.PROTOTYPE)

    def factory() -> int:
        raise RuntimeError("factory failed")

    take(key).set_factory(factory)

    with pytest.raises(RuntimeError, match="factory failed"):
        application_context.get_bean(key)


def test_prototype_token_with_class_factory_dependencies(
    application_context: ApplicationContext,
) -> None:
    key: DependencyToken[int] = DependencyToken.create("proto-class", lifetime=Lifetime.PROTOTYPE)
    counter = iter(range(10))
    seen: list[tuple[Any, Any, Any]] = []

    @component
    class _Factory:
        def create(
            self,
            engine: Annotated[Any, Inject(_Engine)],
            wheel: _Wheel,
            other: _Wheel,
        ) -> int:
            seen.append((engine, wheel, other))
            return next(counter)

    take(key).set_factory(_Factory)

    assert [application_context.get_bean(key) for _ in range(3)] == [0, 1, 2]
    for engine, wheel, other in seen:
        assert isinstance(engine, _Engine)
        assert isinstance(wheel, _Wheel)
        assert wheel is other


def test_function_factory_receives_component_context(
    application_context: ApplicationContext,
) -> None:
    key: DependencyToken[int] = DependencyToken.create("key", lifetime=Lifetime.PROTOTYPE)
    key2: DependencyToken[int] = DependencyToken.create("key2", lifetime=Lifetime.PROTOTYPE)
    counter = iter(range(100))
    take(key).set_factory(lambda: next(counter))

    def combined(context: ComponentContext) -> int:
        assert context.get_bean(key) == context.get_bean(key)
        return context.get_bean(key) + context.get_bean(key)

    take(key2).set_factory(combined)

    assert application_context.get_bean(key) == 0
    assert application_context.get_bean(key) == 1
    assert application_context.get_bean(key) == 2
    assert application_context.get_bean(key2) == 6
    assert application_context.get_bean(key2) == 8
    assert application_context.get_bean(key) == 5
    assert application_context.get_bean(key2) == 12


def test_token_without_factory_is_rejected(application_context: ApplicationContext) -> None:
    key: DependencyToken[int] = DependencyToken.create("missing", lifetime=Lifetime.PROTOTYPE)

    with pytest.raises(FactoryNotFoundError, match="Factory for token missing not found."):
        application_context.get_bean(key)


def test_tokens_and_class_factories_feed_components(
    application_context: ApplicationContext,
) -> None:
    _Consumer.seen.clear()

    take(_FIRST).set_factory(lambda: "datata")
    take(_SECOND).set_factory(lambda: "datata22")
    take(_Item).set_factory(
        lambda context: _Item(context.get_bean(_FIRST) + context.get_bean(_SECOND)),
    )
    take(_Item).set_type(Lifetime.SINGLETON)

    assert application_context.get_bean(_Item).value == "datatadatata22"
    assert application_context.get_bean(_Item) is application_context.get_bean(_Item)

    application_context.get_bean(_Consumer)

    assert _Consumer.seen == [("datata", "datata22", "datatadatata22")]


def test_destroy_context_drops_singletons() -> None:
    context = get_base_application_context()
    engine = context.get_bean(_Engine)

    destroy_context()
    fresh = get_base_application_context()

    try:
        assert fresh is not context
        assert fresh.get_bean(_Engine) is not engine
        assert fresh.get_bean(Container).count_of_dependencies() == 3
    finally:
        destroy_context()


def test_builds_are_logged(
    application_context: ApplicationContext,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="beanwire._internal.container"):
        application_context.get_bean(_Wheel)

    assert "Building class _Wheel in scope DEFAULT" in caplog.text
