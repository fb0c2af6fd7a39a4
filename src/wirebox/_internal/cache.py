from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from types import FunctionType
from typing import Any

from wirebox._internal.descriptors import Identifier, TypeDescriptor, split_arguments, type_name
from wirebox._internal.markers import Lifecycle
from wirebox._internal.resolver import DependencyResolver

logger = logging.getLogger(__name__)


class DependencyCache:
    """Memoize resolved argument lists per class and per callable.

    An entry stores the computed values, not a recipe: later constructions of
    the same class receive the same dependency objects. Entries are never
    invalidated; a fresh container starts with an empty cache.
    """

    def __init__(self, *, descriptor: TypeDescriptor, resolver: DependencyResolver) -> None:
        self._descriptor = descriptor
        self._resolver = resolver
        self._entries: dict[Any, list[Any]] = {}

    def get(self, target: Identifier | Callable[..., Any]) -> list[Any]:
        """Return the argument list for ``target``, resolving it on first access."""
        key = self.key_for(target)
        if key not in self._entries:
            self._entries[key] = self._resolver.resolve_dependencies(target)
        return self._entries[key]

    def warm_up(self, identifiers: Iterable[Identifier]) -> None:
        """Populate entries for every identifier naming an instantiable class.

        Identifiers that do not locate to such a class are skipped silently.
        """
        for identifier in identifiers:
            cls = self._descriptor.locate(identifier)
            if not self._descriptor.is_instantiable(cls):
                logger.debug("Skipping warm-up of %s", type_name(identifier))
                continue
            self.get(cls)

    def instantiate(self, cls: type[Any]) -> Any:
        """Build ``cls`` from its cached arguments.

        Transient classes bypass the cache and resolve fresh arguments.
        """
        if self._descriptor.config(cls).lifecycle is Lifecycle.TRANSIENT:
            return self._resolver.instantiate(cls)
        return self._resolver.instantiate(cls, self.get(cls))

    def invoke(self, function: Callable[..., Any]) -> Any:
        """Call ``function`` with its cached arguments."""
        values = self.get(function)
        args, kwargs = split_arguments(self._descriptor.parameters(function), values)
        return function(*args, **kwargs)

    def key_for(self, target: Identifier | Callable[..., Any]) -> Any:
        """Return the cache key of a class or callable.

        Classes key by their class, plain module-level functions by their
        dotted name. Everything else (lambdas, closures, bound methods and
        callable objects) keys by the callable value itself, so two distinct
        closures never share an entry.
        """
        cls = self._descriptor.locate(target)
        if cls is not None:
            return cls
        if isinstance(target, FunctionType) and "<" not in target.__qualname__:
            return f"{target.__module__}.{target.__qualname__}"
        return target

    def __len__(self) -> int:
        return len(self._entries)
