from __future__ import annotations

from typing import Any

from wirebox._internal.descriptors import Identifier, type_name
from wirebox._internal.extensions import ExtensionManager, call_with, is_service_callable
from wirebox.exceptions import WireboxFrozenInstanceOverrideError


class InstanceRegistry:
    """Store named service values and their frozen state.

    A service is frozen by its first read. Frozen services cannot be replaced
    until they are removed, which clears both the value and the flag.
    ``None`` is a valid stored value.
    """

    def __init__(self) -> None:
        self._instances: dict[Identifier, Any] = {}
        self._frozen: set[Identifier] = set()

    def has(self, identifier: Identifier) -> bool:
        return identifier in self._instances

    def set(self, identifier: Identifier, value: Any) -> None:
        """Store ``value`` under ``identifier``.

        Raises:
            WireboxFrozenInstanceOverrideError: If the service was already read.

        """
        if identifier in self._frozen:
            raise WireboxFrozenInstanceOverrideError(type_name(identifier))
        self._instances[identifier] = value

    def get(self, identifier: Identifier, extensions: ExtensionManager, container: Any) -> Any:
        """Read a registered service, freezing it.

        Plain values, classes and protected callables are returned as stored.
        Factory callables run on every read. Any other callable runs once and
        its result replaces the stored callable.

        Args:
            identifier: Registered service identifier.
            extensions: Source of the factory and protected marks.
            container: Passed to service callables that accept an argument.

        """
        self._frozen.add(identifier)
        value = self._instances[identifier]
        if not is_service_callable(value) or extensions.is_protected(value):
            return value

        if extensions.is_factory(value):
            return call_with(value, container)

        resolved = call_with(value, container)
        self._instances[identifier] = resolved
        return resolved

    def raw(self, identifier: Identifier) -> Any:
        """Return the stored value without invoking or freezing it."""
        return self._instances.get(identifier)

    def remove(self, identifier: Identifier) -> None:
        self._instances.pop(identifier, None)
        self._frozen.discard(identifier)

    def is_frozen(self, identifier: Identifier) -> bool:
        return identifier in self._frozen

    def ids(self) -> list[Identifier]:
        return list(self._instances)

    def frozen_ids(self) -> list[Identifier]:
        return [identifier for identifier in self._instances if identifier in self._frozen]

    def __len__(self) -> int:
        return len(self._instances)
