"""Shared pytest fixtures for beanwire tests."""

from collections.abc import Iterator

import pytest

from beanwire import ApplicationContext, Container, get_metadata_provider, set_metadata_provider


@pytest.fixture()
def root_container(application_context: ApplicationContext) -> Container:
    """Root container behind the per-test application context."""
    return application_context.get_bean(Container)


@pytest.fixture()
def restore_metadata_provider() -> Iterator[None]:
    """Put back the process-wide metadata provider after the test."""
    previous = get_metadata_provider()
    yield
    set_metadata_provider(previous)
