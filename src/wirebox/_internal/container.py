from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, overload

from wirebox._internal.aliases import AliasRegistry
from wirebox._internal.bindings import BindingRegistry, Concrete, ContextualBindingBuilder
from wirebox._internal.cache import DependencyCache
from wirebox._internal.dependency_tree import DependencyTreeAnalyzer
from wirebox._internal.descriptors import (
    Identifier,
    TypeConfig,
    TypeDescriptor,
    is_runtime_class,
    type_name,
)
from wirebox._internal.extensions import Decorator, ExtensionManager
from wirebox._internal.instances import InstanceRegistry
from wirebox._internal.resolver import DependencyResolver
from wirebox.exceptions import (
    WireboxFrozenInstanceExtendError,
    WireboxInstanceProtectedError,
    WireboxInvalidRegistrationError,
)

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class Container:
    """Build object graphs from constructor signatures and manage named services.

    Identifiers are classes, dotted import paths naming classes, or arbitrary
    service names. Classes are auto-wired on demand from their type hints;
    service names only resolve once registered with ``set``.

    Registered services follow a small state machine: ``set`` stores a value,
    the first ``get`` freezes it, and ``remove`` clears both. Callables stored
    with ``set`` are resolved lazily, once, unless marked with ``factory``
    (resolved on every read) or ``protect`` (never invoked).
    """

    def __init__(
        self,
        bindings: Mapping[Identifier, Concrete] | None = None,
        extensions: Mapping[Identifier, Iterable[Decorator]] | None = None,
        *,
        type_configs: Mapping[Identifier, TypeConfig] | None = None,
        thread_safe: bool = False,
    ) -> None:
        """Initialize a container with bindings and per-type configuration.

        Args:
            bindings: Global map from abstract identifiers to a concrete class
                (or dotted class path), a zero-argument producer, or a pre-built
                instance.
            extensions: Decorators queued per service identifier, applied in
                order when that service is first ``set``.
            type_configs: Explicit lifecycle and parameter injection settings
                per class. They take precedence over ``@singleton``,
                ``@transient`` and ``Inject`` markers.
            thread_safe: Guard every public operation with one re-entrant lock.

        Examples:
            .. code-block:: python

                container = Container(
                    bindings={LoggerInterface: FileLogger},
                    type_configs={Mailer: TypeConfig(lifecycle=Lifecycle.SINGLETON)},
                )
                service = container.get(ServiceWithLogger)

        """
        self._descriptor = TypeDescriptor(type_configs)
        self._aliases = AliasRegistry()
        self._bindings = BindingRegistry(self._descriptor, bindings)
        self._resolver = DependencyResolver(descriptor=self._descriptor, bindings=self._bindings)
        self._cache = DependencyCache(descriptor=self._descriptor, resolver=self._resolver)
        self._instances = InstanceRegistry()
        self._extensions = ExtensionManager(
            {self._canonical(identifier): decorators for identifier, decorators in (extensions or {}).items()},
        )
        self._tree = DependencyTreeAnalyzer(descriptor=self._descriptor, bindings=self._bindings)
        self._lock: AbstractContextManager[Any] = threading.RLock() if thread_safe else nullcontext()

    @classmethod
    def create(cls, type_id: type[T] | str) -> Any:
        """Build ``type_id`` with a fresh container that has no registrations."""
        return cls().get(type_id)

    # region Services
    @overload
    def get(self, identifier: type[T]) -> T: ...

    @overload
    def get(self, identifier: str) -> Any: ...

    def get(self, identifier: Any) -> Any:
        """Return a registered service or build the class an identifier names.

        Registered services are read through the instance registry, which
        freezes them. Anything else is looked up in the bindings and
        constructed with its cached constructor arguments.

        Args:
            identifier: Class, dotted class path, alias, or service name.

        Raises:
            WireboxDependencyNotFoundError: If the identifier is neither
                registered nor a buildable class.
            WireboxInvalidArgumentError: If a constructor parameter cannot be
                auto-wired.
            WireboxCircularDependencyError: If the constructor graph has a cycle.

        """
        with self._lock:
            identifier = self._canonical(identifier)
            if self._instances.has(identifier):
                return self._instances.get(identifier, self._extensions, self)
            return self._create_instance(identifier)

    def has(self, identifier: Identifier) -> bool:
        """Return whether a service is registered; classes are not registered implicitly."""
        with self._lock:
            return self._instances.has(self._canonical(identifier))

    def set(self, identifier: Identifier, value: Any) -> None:
        """Register ``value`` and apply any extensions queued for it.

        Raises:
            WireboxFrozenInstanceOverrideError: If the service was already read.

        """
        with self._lock:
            identifier = self._canonical(identifier)
            self._instances.set(identifier, value)
            logger.debug("Registered service %s", type_name(identifier))
            if self._extensions.is_currently_extending(identifier):
                return
            self._apply_pending_extensions(identifier)

    def remove(self, identifier: Identifier) -> None:
        """Forget a service and its frozen state. Removing an unknown id is a no-op."""
        with self._lock:
            self._instances.remove(self._canonical(identifier))

    def alias(self, alias: Identifier, identifier: Identifier) -> None:
        with self._lock:
            self._aliases.add(alias, identifier)
            logger.debug("Aliased %s to %s", type_name(alias), type_name(identifier))

    def factory(self, function: F) -> F:
        """Mark ``function`` so every ``get`` of its service calls it again.

        Raises:
            WireboxInvalidRegistrationError: If ``function`` is not callable or
                is a class. Classes are stored as values; wrap them in a
                callable to build a new instance per read.

        Examples:
            .. code-block:: python

                container.set("request_id", container.factory(lambda: uuid4()))

        """
        with self._lock:
            self._require_callable(function, "factory")
            if inspect.isclass(function):
                msg = (
                    f"factory() expects a service callable, got class {type_name(function)}. "
                    "Use container.factory(lambda: cls()) to build a new instance per read."
                )
                raise WireboxInvalidRegistrationError(msg)
            self._extensions.mark_as_factory(function)
            return function

    def protect(self, function: F) -> F:
        """Mark ``function`` so it is stored and returned as a plain value."""
        with self._lock:
            self._extensions.mark_as_protected(self._require_callable(function, "protect"))
            return function

    def extend(self, identifier: Identifier, decorator: Decorator) -> Decorator:
        """Decorate a service value, now or as soon as it is registered.

        ``decorator`` receives the current value (and the container when it
        accepts a second positional argument). Returning ``None`` keeps the
        value, so decorators may mutate in place.

        Args:
            identifier: Service to decorate.
            decorator: Callable applied to the service value.

        Returns:
            The composed service callable, or ``decorator`` itself when the
            extension was queued for a service that is not registered yet.

        Raises:
            WireboxFrozenInstanceExtendError: If the service was already read.
            WireboxInstanceProtectedError: If the service is a protected callable.
            WireboxInstanceNotExtendableError: If the service is a scalar value.

        Examples:
            .. code-block:: python

                container.set("numbers", [1, 2])
                container.extend("numbers", lambda numbers: numbers + [3])
                container.get("numbers")  # [1, 2, 3]

        """
        with self._lock:
            identifier = self._canonical(identifier)
            self._require_callable(decorator, "extend")
            if not self._instances.has(identifier):
                self._extensions.schedule(identifier, decorator)
                return decorator

            if self._instances.is_frozen(identifier):
                raise WireboxFrozenInstanceExtendError(type_name(identifier))

            current = self._instances.raw(identifier)
            if self._extensions.is_protected(current):
                raise WireboxInstanceProtectedError(type_name(identifier))

            extended = self._extensions.extend_value(identifier, decorator, current)
            self.set(identifier, extended)
            self._extensions.transfer_factory_status(current, extended)
            return extended

    def registered_services(self) -> list[Identifier]:
        with self._lock:
            return self._instances.ids()

    def is_factory(self, identifier: Identifier) -> bool:
        with self._lock:
            identifier = self._canonical(identifier)
            if not self._instances.has(identifier):
                return False
            return self._extensions.is_factory(self._instances.raw(identifier))

    def is_frozen(self, identifier: Identifier) -> bool:
        with self._lock:
            return self._instances.is_frozen(self._canonical(identifier))

    # endregion Services

    # region Bindings and Resolution
    @property
    def bindings(self) -> dict[Identifier, Concrete]:
        """Return a copy of the global bindings."""
        with self._lock:
            return self._bindings.as_dict()

    def when(self, *consumers: Identifier | Iterable[Identifier]) -> ContextualBindingBuilder:
        """Start a binding that applies only while building the given consumers.

        Examples:
            .. code-block:: python

                container.when(UserController).needs(LoggerInterface).give(FileLogger)

        """
        return self._bindings.when(*consumers)

    def resolve(self, function: Callable[..., T]) -> T:
        """Call ``function`` with its parameters resolved from the container.

        The resolved arguments are cached per callable value, so repeated
        calls with the same function reuse the same dependency objects.
        """
        with self._lock:
            self._require_callable(function, "resolve")
            return self._cache.invoke(function)

    def warm_up(self, identifiers: Iterable[Identifier]) -> None:
        """Resolve and cache constructor arguments ahead of the first ``get``.

        Identifiers that do not name an instantiable class are skipped.
        """
        with self._lock:
            identifiers = [self._canonical(identifier) for identifier in identifiers]
            self._cache.warm_up(identifiers)
            logger.debug("Warmed up %d dependency cache entries", len(self._cache))

    def dependency_tree(self, type_id: Identifier) -> list[str]:
        """Return the names of all types ``type_id`` transitively depends on.

        Nothing is instantiated. Bound abstractions are reported under their
        concrete class.
        """
        with self._lock:
            return self._tree.analyze(self._canonical(type_id))

    def stats(self) -> dict[str, int]:
        """Return counters describing the container state.

        Keys are ``registered_services``, ``frozen_services``,
        ``factory_services``, ``bindings`` and ``cached_dependencies``.
        """
        with self._lock:
            ids = self._instances.ids()
            return {
                "registered_services": len(self._instances),
                "frozen_services": len(self._instances.frozen_ids()),
                "factory_services": sum(
                    1 for identifier in ids if self._extensions.is_factory(self._instances.raw(identifier))
                ),
                "bindings": len(self._bindings),
                "cached_dependencies": len(self._cache),
            }

    # endregion Bindings and Resolution

    def _canonical(self, identifier: Identifier) -> Identifier:
        identifier = self._aliases.resolve(identifier)
        if self._instances.has(identifier):
            return identifier
        return self._descriptor.locate(identifier) or identifier

    def _create_instance(self, identifier: Identifier) -> Any:
        concrete = self._bindings.resolve(identifier)
        if concrete is not None:
            if not is_runtime_class(concrete) and not isinstance(concrete, str):
                return concrete() if callable(concrete) else concrete
            identifier = concrete

        cls = self._descriptor.locate(identifier)
        if cls is None:
            raise self._resolver.not_found(identifier, known=self._instances.ids())
        return self._cache.instantiate(cls)

    def _apply_pending_extensions(self, identifier: Identifier) -> None:
        if not self._extensions.has_pending(identifier):
            return

        pending = self._extensions.pending(identifier)
        with self._extensions.extending(identifier):
            for decorator in pending:
                self.extend(identifier, decorator)
        self._extensions.clear_pending(identifier)
        logger.debug("Applied %d queued extensions to %s", len(pending), type_name(identifier))

    def _require_callable(self, function: Any, operation: str) -> Any:
        if not callable(function):
            msg = f"{operation}() expects a callable, got {type(function).__name__}."
            raise WireboxInvalidRegistrationError(msg)
        return function
