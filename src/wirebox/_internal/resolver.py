from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Generator, Iterable, Sequence
from contextlib import contextmanager
from typing import Any

from wirebox._internal.bindings import BindingRegistry
from wirebox._internal.descriptors import (
    Identifier,
    ParameterDescriptor,
    TypeDescriptor,
    is_runtime_class,
    split_arguments,
    type_name,
)
from wirebox._internal.fuzzy import find_similar
from wirebox._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from wirebox._internal.markers import Lifecycle
from wirebox.exceptions import (
    WireboxCircularDependencyError,
    WireboxDependencyNotFoundError,
    WireboxInvalidArgumentError,
)

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolve constructor and callable parameters by walking the type graph.

    Resolution is depth-first and eager: every class argument is fully built
    before the outer constructor runs. Classes being built are tracked on a
    resolution stack that is used for cycle detection and error diagnostics;
    every push is paired with a pop on all exit paths, so a failed resolution
    never leaks entries into a later one.
    """

    def __init__(self, *, descriptor: TypeDescriptor, bindings: BindingRegistry) -> None:
        self._descriptor = descriptor
        self._bindings = bindings
        self._stack: list[type[Any]] = []
        self._singletons: dict[type[Any], Any] = {}

    @property
    def resolution_chain(self) -> list[str]:
        """Names of the classes currently being built, outermost first."""
        return [type_name(cls) for cls in self._stack]

    def resolve_dependencies(self, target: Identifier | Callable[..., Any]) -> list[Any]:
        """Return the ordered argument values needed to build or call ``target``.

        Args:
            target: Class (or dotted class path) whose constructor is resolved,
                or a callable whose parameters are resolved.

        Raises:
            WireboxInvalidArgumentError: If a parameter is untyped or scalar
                without a default.
            WireboxDependencyNotFoundError: If a needed type has no concrete
                implementation.
            WireboxCircularDependencyError: If the graph contains a cycle.

        """
        cls = self._descriptor.locate(target)
        if cls is None and not callable(target):
            raise self.not_found(target)
        if cls is None:
            return self._resolve_parameters(target, consumer=None)

        self._require_instantiable(cls)
        if is_pydantic_settings_subclass(cls):
            return []
        with self._resolving(cls):
            return self._resolve_parameters(cls, consumer=cls)

    def resolve_class(self, type_id: Identifier, consumer: type[Any] | None = None) -> Any:
        """Build (or fetch from a binding) a value for a class-typed dependency.

        Args:
            type_id: Declared type of the dependency.
            consumer: Class whose constructor needs the dependency, used for
                contextual bindings.

        """
        concrete = self._bindings.resolve(type_id, consumer)
        target = type_id
        if concrete is not None:
            if not is_runtime_class(concrete) and not isinstance(concrete, str):
                return concrete() if callable(concrete) else concrete
            target = concrete

        cls = self._descriptor.locate(target)
        if cls is None:
            raise self.not_found(target)
        return self.instantiate(cls)

    def instantiate(self, cls: type[Any], arguments: Sequence[Any] | None = None) -> Any:
        """Build ``cls``, honouring its lifecycle.

        Args:
            cls: Concrete class to build.
            arguments: Pre-resolved constructor values; resolved on the spot
                when omitted.

        """
        is_settings = is_pydantic_settings_subclass(cls)
        is_singleton = is_settings or self._descriptor.config(cls).lifecycle is Lifecycle.SINGLETON
        if is_singleton and cls in self._singletons:
            return self._singletons[cls]

        self._require_instantiable(cls)
        with self._resolving(cls):
            if is_settings:
                instance = cls()
            else:
                values = self._resolve_parameters(cls, consumer=cls) if arguments is None else arguments
                args, kwargs = split_arguments(self._descriptor.parameters(cls), values)
                instance = cls(*args, **kwargs)
        logger.debug("Instantiated %s", type_name(cls))

        if is_singleton:
            self._singletons[cls] = instance
        return instance

    def _resolve_parameters(
        self,
        target: type[Any] | Callable[..., Any],
        *,
        consumer: type[Any] | None,
    ) -> list[Any]:
        return [
            self._resolve_parameter(parameter, consumer=consumer)
            for parameter in self._descriptor.parameters(target)
        ]

    def _resolve_parameter(self, parameter: ParameterDescriptor, *, consumer: type[Any] | None) -> Any:
        if parameter.inject is not None:
            return self.resolve_class(parameter.inject, consumer)

        if not parameter.has_annotation:
            raise WireboxInvalidArgumentError(
                parameter=parameter.name,
                owner=parameter.owner,
                chain=self.resolution_chain,
            )

        if parameter.is_scalar and not parameter.has_default:
            raise WireboxInvalidArgumentError(
                parameter=parameter.name,
                owner=parameter.owner,
                chain=self.resolution_chain,
                annotation=type_name(parameter.annotation),
            )

        if parameter.has_default:
            return parameter.default

        return self.resolve_class(parameter.annotation, consumer)

    @contextmanager
    def _resolving(self, cls: type[Any]) -> Generator[None, None, None]:
        if cls in self._stack:
            raise WireboxCircularDependencyError([*self.resolution_chain, type_name(cls)])

        self._stack.append(cls)
        try:
            yield
        finally:
            self._stack.pop()

    def _require_instantiable(self, cls: type[Any]) -> None:
        if not self._descriptor.is_instantiable(cls):
            raise self.not_found(cls)

    def not_found(
        self,
        identifier: Identifier,
        known: Iterable[Identifier] = (),
    ) -> WireboxDependencyNotFoundError:
        """Build the not-found error for ``identifier`` with near-miss suggestions.

        Candidates are the binding keys plus any ``known`` identifiers, compared
        by their short names and reported by their full names.
        """
        candidates = {
            type_name(key): _short_name(key) for key in (*self._bindings.keys(), *known)
        }
        return WireboxDependencyNotFoundError(
            identifier=type_name(identifier),
            suggestions=find_similar(_short_name(identifier), candidates, key=candidates.__getitem__),
        )


def _short_name(identifier: Identifier) -> str:
    if inspect.isclass(identifier):
        return identifier.__qualname__
    if isinstance(identifier, str):
        return identifier.rpartition(".")[2]
    return type_name(identifier)
