from __future__ import annotations

from collections.abc import Iterator

import pytest

from beanwire._internal.application import (
    ApplicationContext,
    destroy_context,
    get_base_application_context,
)
from beanwire._internal.construction_context import current_component_context


@pytest.fixture()
def application_context() -> Iterator[ApplicationContext]:
    """Provide the root application context and destroy it after the test.

    Singletons cached by one test are never visible to the next one.

    Yields:
        The root ``ApplicationContext``.

    """
    destroy_context()
    yield get_base_application_context()
    destroy_context()


@pytest.fixture(autouse=True)
def _beanwire_ambient_context_guard() -> Iterator[None]:
    """Fail tests that leave a construction context bound."""
    yield
    leaked = current_component_context()
    if leaked is not None:
        pytest.fail(f"Ambient component context still bound after test: {leaked!r}")
