from wirebox._internal.bindings import ContextualBindingBuilder
from wirebox._internal.container import Container
from wirebox._internal.descriptors import TypeConfig
from wirebox._internal.markers import Inject, Injected, Lifecycle, singleton, transient
from wirebox.exceptions import (
    WireboxCircularDependencyError,
    WireboxDependencyNotFoundError,
    WireboxError,
    WireboxFrozenInstanceError,
    WireboxFrozenInstanceExtendError,
    WireboxFrozenInstanceOverrideError,
    WireboxInstanceNotExtendableError,
    WireboxInstanceProtectedError,
    WireboxInvalidArgumentError,
    WireboxInvalidRegistrationError,
)

__all__ = [
    "Container",
    "ContextualBindingBuilder",
    "Inject",
    "Injected",
    "Lifecycle",
    "TypeConfig",
    "WireboxCircularDependencyError",
    "WireboxDependencyNotFoundError",
    "WireboxError",
    "WireboxFrozenInstanceError",
    "WireboxFrozenInstanceExtendError",
    "WireboxFrozenInstanceOverrideError",
    "WireboxInstanceNotExtendableError",
    "WireboxInstanceProtectedError",
    "WireboxInvalidArgumentError",
    "WireboxInvalidRegistrationError",
    "singleton",
    "transient",
]
