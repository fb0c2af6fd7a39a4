from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from wirebox._internal.descriptors import Identifier, TypeDescriptor, is_runtime_class
from wirebox.exceptions import WireboxInvalidRegistrationError

Concrete = Any
"""A class or dotted class path, a zero-argument producer, or a pre-built instance."""


class BindingRegistry:
    """Map abstract identifiers to concrete implementations.

    Global bindings apply everywhere. Contextual bindings are keyed by the
    consumer being built and are consulted first. Dotted string keys are
    normalised to the class they name so ``"app.Repo"`` and ``Repo`` share a
    binding.
    """

    def __init__(
        self,
        descriptor: TypeDescriptor,
        bindings: Mapping[Identifier, Concrete] | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._bindings: dict[Identifier, Concrete] = {
            self._key(identifier): concrete for identifier, concrete in (bindings or {}).items()
        }
        self._contextual: dict[Identifier, dict[Identifier, Concrete]] = {}

    def resolve(self, type_id: Identifier, consumer: Identifier | None = None) -> Concrete | None:
        """Return the concrete bound to ``type_id``, preferring the consumer's binding.

        Args:
            type_id: Identifier being resolved.
            consumer: Class whose constructor needs ``type_id``, if any.

        Returns:
            The bound concrete, or ``None`` when nothing is bound.

        """
        key = self._key(type_id)
        if consumer is not None:
            contextual = self._contextual.get(self._key(consumer))
            if contextual is not None and key in contextual:
                return contextual[key]
        return self._bindings.get(key)

    def resolve_type_name(self, type_id: Identifier, consumer: Identifier | None = None) -> Identifier:
        """Return the bound class when ``type_id`` is bound to a class, else ``type_id``."""
        concrete = self.resolve(type_id, consumer)
        if is_runtime_class(concrete):
            return concrete
        if isinstance(concrete, str):
            located = self._descriptor.locate(concrete)
            if located is not None:
                return located
        return type_id

    def when(self, *consumers: Identifier | Iterable[Identifier]) -> ContextualBindingBuilder:
        """Start a contextual binding for one or more consumer classes."""
        flattened: list[Identifier] = []
        for consumer in consumers:
            if isinstance(consumer, (list, tuple, set, frozenset)):
                flattened.extend(consumer)
            else:
                flattened.append(consumer)
        return ContextualBindingBuilder(registry=self, consumers=flattened)

    def add_contextual(self, consumer: Identifier, type_id: Identifier, concrete: Concrete) -> None:
        self._contextual.setdefault(self._key(consumer), {})[self._key(type_id)] = concrete

    def keys(self) -> list[Identifier]:
        return list(self._bindings)

    def as_dict(self) -> dict[Identifier, Concrete]:
        return dict(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def _key(self, identifier: Identifier) -> Identifier:
        return self._descriptor.locate(identifier) or identifier


class ContextualBindingBuilder:
    """Fluent builder behind ``container.when(...).needs(...).give(...)``.

    Examples:
        .. code-block:: python

            container.when(UserController).needs(Logger).give(FileLogger)
            container.when(UserController, AdminController).needs(Logger).give(make_logger)

    """

    def __init__(self, *, registry: BindingRegistry, consumers: list[Identifier]) -> None:
        self._registry = registry
        self._consumers = consumers
        self._needs: Identifier | None = None

    def needs(self, type_id: Identifier) -> ContextualBindingBuilder:
        self._needs = type_id
        return self

    def give(self, concrete: Concrete) -> None:
        """Bind the needed identifier to ``concrete`` for every consumer.

        Raises:
            WireboxInvalidRegistrationError: If ``needs`` was not called first.

        """
        if self._needs is None:
            msg = "Must call needs() before give()."
            raise WireboxInvalidRegistrationError(msg)

        for consumer in self._consumers:
            self._registry.add_contextual(consumer, self._needs, concrete)
