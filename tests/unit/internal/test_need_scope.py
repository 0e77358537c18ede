from __future__ import annotations

from typing import Any

import pytest

from beanwire import (
    ApplicationContext,
    ComponentContext,
    MustUseProvideScopeError,
    WrongScopeProvidedError,
    autowired,
    component,
    create_scope,
    current_component_context,
    need_scope,
    scope,
)
from beanwire._internal.injection import Autowired
from beanwire._internal.metadata import NEED_SCOPE_ATTR

_SCOPE = create_scope("scopeName")


@need_scope(_SCOPE)
class _A:
    context: ApplicationContext = autowired()

    def test(self) -> str:
        return "text"


@need_scope(_SCOPE)
class _B(_A):
    def __init__(self, borec: int) -> None:
        super().__init__()
        self.borec = borec


@component
@scope(_SCOPE)
class _Help:
    context: ApplicationContext = autowired()


@need_scope(_SCOPE)
class _OwnContextName:
    application_context = "kept"


def test_wrong_scope_provided(application_context: ApplicationContext) -> None:
    with pytest.raises(WrongScopeProvidedError) as exc_info:
        application_context.provide_scope(lambda: _A())

    assert str(exc_info.value) == (
        "Class _A initialized with different scope provided, "
        "please provide scope DEFAULT.scopeName (provided DEFAULT)."
    )
    assert exc_info.value.required_scope == "DEFAULT.scopeName"
    assert exc_info.value.provided_scope == "DEFAULT"

    with pytest.raises(WrongScopeProvidedError, match="Class _B initialized with different scope"):
        application_context.provide_scope(lambda: _B(10))


def test_must_be_initialized_via_provide_scope() -> None:
    with pytest.raises(MustUseProvideScopeError) as exc_info:
        _A()

    assert str(exc_info.value) == (
        "Class _A must be initialized via [provide_scope] DEFAULT.scopeName."
    )
    assert exc_info.value.component_class is _A

    with pytest.raises(MustUseProvideScopeError, match="Class _B must be initialized"):
        _B(10)


def test_correct_scope_binds_instances(application_context: ApplicationContext) -> None:
    scope_context = application_context.get_bean(_Help).context

    a = scope_context.provide_scope(lambda: _A())
    b = scope_context.provide_scope(lambda: _B(11))

    assert scope_context.scope is _SCOPE
    assert a.test() == "text"
    a.test = lambda: "changed"  # type: ignore[method-assign]
    assert a.test() == "changed"
    assert b.test() == "text"
    assert b.borec == 11
    assert isinstance(b, _A)
    assert a.context is scope_context
    assert b.context is scope_context


def test_implicit_context_properties(application_context: ApplicationContext) -> None:
    scope_context = application_context.enter_scope(_SCOPE)

    a = scope_context.provide_scope(lambda: _A())

    implicit: Any = a

    assert implicit.application_context is scope_context
    assert isinstance(implicit.component_context, ComponentContext)
    assert implicit.component_context.scope is _SCOPE
    assert implicit.component_context.get_bean(ApplicationContext) is scope_context


def test_existing_names_are_not_replaced() -> None:
    assert _OwnContextName.application_context == "kept"
    assert isinstance(vars(_OwnContextName)["component_context"], Autowired)


def test_provide_scope_returns_result_and_restores_context(
    application_context: ApplicationContext,
) -> None:
    scope_context = application_context.enter_scope(_SCOPE)
    seen: list[object] = []

    result = scope_context.provide_scope(lambda: seen.append(current_component_context()) or 42)

    assert result == 42
    assert seen[0] is not None
    assert current_component_context() is None


def test_provide_scope_restores_context_on_error(application_context: ApplicationContext) -> None:
    def fail() -> None:
        raise RuntimeError("callback failed")

    with pytest.raises(RuntimeError, match="callback failed"):
        application_context.provide_scope(fail)

    assert current_component_context() is None


def test_need_scope_marks_class_and_keeps_init_metadata() -> None:
    assert getattr(_B, NEED_SCOPE_ATTR) is _SCOPE
    assert _B.__init__.__name__ == "__init__"
    assert _B.__init__.__wrapped__.__qualname__ == "_B.__init__"  # type: ignore[attr-defined]
