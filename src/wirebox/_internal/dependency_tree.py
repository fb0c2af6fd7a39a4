from __future__ import annotations

from typing import Any

from wirebox._internal.bindings import BindingRegistry
from wirebox._internal.descriptors import Identifier, TypeDescriptor, type_name
from wirebox._internal.integrations.pydantic_settings import is_pydantic_settings_subclass


class DependencyTreeAnalyzer:
    """Report the types a class transitively needs without building anything.

    Bound parameters are reported under the class they are bound to. Untyped
    and scalar parameters are not part of the tree.
    """

    def __init__(self, *, descriptor: TypeDescriptor, bindings: BindingRegistry) -> None:
        self._descriptor = descriptor
        self._bindings = bindings

    def analyze(self, type_id: Identifier) -> list[str]:
        """Return the dependency names of ``type_id`` in first-seen order.

        Args:
            type_id: Class or dotted class path to analyze.

        Returns:
            De-duplicated ``module.QualName`` strings, or an empty list when
            ``type_id`` does not name a class.

        """
        cls = self._descriptor.locate(type_id)
        if cls is None:
            return []

        seen: dict[str, None] = {}
        self._collect(cls, seen)
        return list(seen)

    def _collect(self, cls: type[Any], seen: dict[str, None]) -> None:
        for parameter in self._descriptor.parameters(cls):
            needed = parameter.inject
            if needed is None:
                if not parameter.has_annotation or parameter.is_scalar:
                    continue
                needed = self._bindings.resolve_type_name(parameter.annotation, cls)

            name = type_name(needed)
            if name in seen:
                continue
            seen[name] = None

            located = self._descriptor.locate(needed)
            if located is not None and not is_pydantic_settings_subclass(located):
                self._collect(located, seen)
