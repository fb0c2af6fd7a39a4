from __future__ import annotations

from wirebox._internal.descriptors import Identifier


class AliasRegistry:
    """Store one-hop identifier aliases with a memoized resolution cache.

    Aliases are not chained: resolving an alias returns its direct target even
    when that target is itself an alias. Adding an alias clears the cache.
    """

    def __init__(self) -> None:
        self._aliases: dict[Identifier, Identifier] = {}
        self._resolved: dict[Identifier, Identifier] = {}

    def add(self, alias: Identifier, identifier: Identifier) -> None:
        """Redirect ``alias`` to ``identifier``.

        Args:
            alias: Name callers will use.
            identifier: Identifier the alias points at.

        """
        self._aliases[alias] = identifier
        self._resolved.clear()

    def resolve(self, identifier: Identifier) -> Identifier:
        """Return the alias target for ``identifier``, or ``identifier`` itself."""
        try:
            return self._resolved[identifier]
        except KeyError:
            resolved = self._aliases.get(identifier, identifier)
            self._resolved[identifier] = resolved
            return resolved
