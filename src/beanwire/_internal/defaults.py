from beanwire._internal.types import Lifetime, ScopeKind

DEFAULT_SCOPE_NAME = "DEFAULT"
"""Display name of the root scope."""

DEFAULT_CLASS_LIFETIME = Lifetime.PROTOTYPE
"""Lifetime of classes that declare none (for example factory-bound plain classes)."""

DEFAULT_COMPONENT_LIFETIME = Lifetime.SINGLETON
"""Lifetime applied by a bare ``@component`` decorator."""

DEFAULT_TOKEN_LIFETIME = Lifetime.SINGLETON
"""Lifetime of a ``DependencyToken`` created without ``lifetime=``."""

DEFAULT_SCOPE_KIND = ScopeKind.PROTOTYPE
"""Kind of scopes created without ``kind=``."""
