from __future__ import annotations

import logging

import pytest

from beanwire import Scope, ScopeKind, ScopeRoutingError, create_scope, get_default_scope

_ORDERS = create_scope("orders", ScopeKind.SINGLETON)
_ORDER_ITEMS = _ORDERS.create_scope("order_items")
_ORDER_NOTES = _ORDERS.create_scope("order_notes")
_BILLING = create_scope("billing")


def test_default_scope_is_singleton_root() -> None:
    root = get_default_scope()

    assert root.name == "DEFAULT"
    assert root.parent is None
    assert root.kind is ScopeKind.SINGLETON
    assert root.path == "DEFAULT"


def test_create_scope_defaults_to_prototype_kind() -> None:
    assert _BILLING.kind is ScopeKind.PROTOTYPE
    assert _ORDERS.kind is ScopeKind.SINGLETON


def test_child_scopes_get_sequential_ids() -> None:
    assert _ORDER_ITEMS.id == 0
    assert _ORDER_NOTES.id == 1
    assert _ORDER_ITEMS.parent is _ORDERS


def test_scope_path_joins_names_from_root() -> None:
    assert _ORDER_ITEMS.path == "DEFAULT.orders.order_items"


def test_scopes_with_same_name_are_distinct() -> None:
    first = _BILLING.create_scope("twin")
    second = _BILLING.create_scope("twin")

    assert first is not second
    assert first != second
    assert second.id == first.id + 1


def test_ancestors_yield_scope_then_parents() -> None:
    assert list(_ORDER_ITEMS.ancestors()) == [_ORDER_ITEMS, _ORDERS, get_default_scope()]


def test_common_parent_of_siblings_is_their_parent() -> None:
    assert Scope.get_common_parent(_ORDER_ITEMS, _ORDER_NOTES) is _ORDERS


def test_common_parent_of_unrelated_branches_is_root() -> None:
    assert Scope.get_common_parent(_ORDER_ITEMS, _BILLING) is get_default_scope()


def test_common_parent_of_ancestor_and_descendant_is_ancestor() -> None:
    assert Scope.get_common_parent(_ORDERS, _ORDER_ITEMS) is _ORDERS
    assert Scope.get_common_parent(_ORDER_ITEMS, _ORDER_ITEMS) is _ORDER_ITEMS


def test_direct_child_for_returns_next_hop() -> None:
    root = get_default_scope()

    assert root.get_direct_child_for(_ORDER_ITEMS) is _ORDERS
    assert _ORDERS.get_direct_child_for(_ORDER_ITEMS) is _ORDER_ITEMS


def test_direct_child_for_non_descendant_raises() -> None:
    with pytest.raises(ScopeRoutingError, match="DEFAULT.billing is not a descendant") as exc_info:
        _ORDERS.get_direct_child_for(_BILLING)

    assert exc_info.value.source_scope == "DEFAULT.orders"
    assert exc_info.value.target_scope == "DEFAULT.billing"

    with pytest.raises(ScopeRoutingError):
        _ORDERS.get_direct_child_for(_ORDERS)


def test_scope_creation_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="beanwire._internal.scope"):
        child = _BILLING.create_scope("logged")

    assert f"Created scope {child.path}" in caplog.text


def test_scope_repr_shows_path_and_kind() -> None:
    assert repr(_ORDERS) == "Scope('DEFAULT.orders', kind=singleton)"
