from __future__ import annotations

from enum import Enum


class Lifetime(str, Enum):
    """Define how long a resolved component instance is reused."""

    SINGLETON = "singleton"
    """One instance per container, cached on first resolution."""

    PROTOTYPE = "prototype"
    """A new instance for every resolution (shared within one construction)."""


class ScopeKind(str, Enum):
    """Define how many containers may exist for a scope under one parent."""

    SINGLETON = "singleton"
    """The child container is created once and reused by its parent container."""

    PROTOTYPE = "prototype"
    """A fresh child container is created each time the scope is entered."""
