from __future__ import annotations

import importlib
import warnings
from typing import Any

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    return base_settings if isinstance(base_settings, type) else None


def _discover_settings_bases() -> tuple[type[Any], ...]:
    candidates = [_load_base_settings("pydantic_settings")]
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        candidates.append(_load_base_settings("pydantic.v1"))

    bases: list[type[Any]] = []
    for candidate in candidates:
        if candidate is not None and candidate not in bases:
            bases.append(candidate)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _discover_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a Pydantic settings model class.

    Settings classes are resolvable without ``@component``: beanwire builds
    them with a zero-argument call so field values come from the environment,
    and caches them as singletons unless ``@component`` declares otherwise.
    Returns ``False`` for every candidate when pydantic-settings is not
    installed.
    """
    if not isinstance(candidate, type) or candidate in SETTINGS_BASES:
        return False
    return any(issubclass(candidate, base) for base in SETTINGS_BASES)


__all__ = ["SETTINGS_BASES", "is_pydantic_settings_subclass"]
