from beanwire._internal.application import (
    ApplicationContext,
    destroy_context,
    get_base_application_context,
)
from beanwire._internal.components import BeanFactory, Component, DependencyToken, take
from beanwire._internal.construction_context import current_component_context
from beanwire._internal.container import ComponentContext, Container
from beanwire._internal.decorators import component, post_construct, scope
from beanwire._internal.injection import autowired, need_scope
from beanwire._internal.markers import Inject, Lazy
from beanwire._internal.metadata import (
    AnnotationMetadataProvider,
    MetadataProvider,
    ParameterDescriptor,
    PropertyDescriptor,
    get_metadata_provider,
    set_metadata_provider,
)
from beanwire._internal.resolution import LazyProxy, unwrap_lazy
from beanwire._internal.scope import Scope, create_scope, get_default_scope
from beanwire._internal.types import Lifetime, ScopeKind
from beanwire.exceptions import (
    BeanwireError,
    CircularDependencyError,
    FactoryNotFoundError,
    MustUseProvideScopeError,
    NotAComponentError,
    ScopeRoutingError,
    UnresolvedTypeError,
    WrongScopeProvidedError,
)

__all__ = [
    "AnnotationMetadataProvider",
    "ApplicationContext",
    "BeanFactory",
    "BeanwireError",
    "CircularDependencyError",
    "Component",
    "ComponentContext",
    "Container",
    "DependencyToken",
    "FactoryNotFoundError",
    "Inject",
    "Lazy",
    "LazyProxy",
    "Lifetime",
    "MetadataProvider",
    "MustUseProvideScopeError",
    "NotAComponentError",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "Scope",
    "ScopeKind",
    "ScopeRoutingError",
    "UnresolvedTypeError",
    "WrongScopeProvidedError",
    "autowired",
    "component",
    "create_scope",
    "current_component_context",
    "destroy_context",
    "get_base_application_context",
    "get_default_scope",
    "get_metadata_provider",
    "need_scope",
    "post_construct",
    "scope",
    "set_metadata_provider",
    "take",
    "unwrap_lazy",
]
