from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Generator, Iterable, Mapping
from contextlib import contextmanager
from inspect import Parameter
from typing import Any

from wirebox._internal.descriptors import Identifier, type_name
from wirebox.exceptions import WireboxInstanceNotExtendableError

logger = logging.getLogger(__name__)

Decorator = Callable[..., Any]
"""A service callable ``(container)`` or an extension ``(value, container)``."""

_NOT_EXTENDABLE_TYPES: tuple[type[Any], ...] = (str, bytes, int, float, complex, bool, type(None))
_POSITIONAL_KINDS = (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)


def call_with(function: Callable[..., Any], *args: Any) -> Any:
    """Call ``function`` with as many leading ``args`` as it requires positionally.

    Service callables may be written as ``lambda: ...`` or ``lambda c: ...`` and
    extensions as ``lambda value: ...`` or ``lambda value, c: ...``. Positional
    parameters with a default are left to their default.
    """
    try:
        parameters = inspect.signature(function).parameters.values()
    except (TypeError, ValueError):
        return function(*args)

    accepted = 0
    for parameter in parameters:
        if parameter.kind is Parameter.VAR_POSITIONAL:
            return function(*args)
        if parameter.kind in _POSITIONAL_KINDS and parameter.default is Parameter.empty:
            accepted += 1
    return function(*args[:accepted])


def is_service_callable(value: object) -> bool:
    """Return true for callables the registry invokes lazily; classes are stored as values."""
    return callable(value) and not inspect.isclass(value)


class ExtensionManager:
    """Track factory/protected callables and extensions waiting for their service.

    Marks are keyed by object identity, so two equal-looking lambdas are
    distinct. Pending extensions are kept per identifier in the order they
    were queued.
    """

    def __init__(self, pending: Mapping[Identifier, Iterable[Decorator]] | None = None) -> None:
        self._factories: dict[int, Decorator] = {}
        self._protected: dict[int, Decorator] = {}
        self._pending: dict[Identifier, list[Decorator]] = {
            identifier: list(decorators) for identifier, decorators in (pending or {}).items()
        }
        self._currently_extending: Identifier | None = None

    def mark_as_factory(self, function: Decorator) -> None:
        self._factories[id(function)] = function

    def mark_as_protected(self, function: Decorator) -> None:
        self._protected[id(function)] = function

    def is_factory(self, value: object) -> bool:
        return self._factories.get(id(value)) is value

    def is_protected(self, value: object) -> bool:
        return self._protected.get(id(value)) is value

    def transfer_factory_status(self, source: object, target: object) -> None:
        """Move the factory mark from ``source`` to ``target`` when ``source`` had one."""
        if not self.is_factory(source):
            return
        del self._factories[id(source)]
        if is_service_callable(target):
            self.mark_as_factory(target)

    def schedule(self, identifier: Identifier, decorator: Decorator) -> None:
        """Queue ``decorator`` until ``identifier`` receives a value."""
        self._pending.setdefault(identifier, []).append(decorator)
        logger.debug("Queued extension for %s", type_name(identifier))

    def has_pending(self, identifier: Identifier) -> bool:
        return bool(self._pending.get(identifier))

    def pending(self, identifier: Identifier) -> list[Decorator]:
        return list(self._pending.get(identifier, ()))

    def clear_pending(self, identifier: Identifier) -> None:
        self._pending.pop(identifier, None)

    def is_currently_extending(self, identifier: Identifier) -> bool:
        return self._currently_extending is not None and self._currently_extending == identifier

    @contextmanager
    def extending(self, identifier: Identifier) -> Generator[None, None, None]:
        """Mark ``identifier`` as being extended, restoring the previous mark on exit."""
        previous = self._currently_extending
        self._currently_extending = identifier
        try:
            yield
        finally:
            self._currently_extending = previous

    def extend_value(
        self,
        identifier: Identifier,
        decorator: Decorator,
        current: object,
    ) -> Decorator:
        """Compose ``decorator`` over the current value of a service.

        The returned callable takes the container, computes the previous value
        (invoking it when it is a service callable) and passes it to
        ``decorator``. A ``None`` return keeps the previous value, which lets
        decorators mutate in place.

        Raises:
            WireboxInstanceNotExtendableError: If ``current`` is a scalar.

        """
        if is_service_callable(current):
            factory = current

            def extended(container: Any) -> Any:
                result = call_with(factory, container)
                decorated = call_with(decorator, result, container)
                return result if decorated is None else decorated

            return extended

        if isinstance(current, _NOT_EXTENDABLE_TYPES):
            raise WireboxInstanceNotExtendableError(type_name(identifier))

        def extended_value(container: Any) -> Any:
            decorated = call_with(decorator, current, container)
            return current if decorated is None else decorated

        return extended_value
