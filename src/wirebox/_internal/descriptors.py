from __future__ import annotations

import datetime
import decimal
import enum
import importlib
import inspect
import pathlib
import types
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Annotated, Any, TypeGuard, Union, get_args, get_origin, get_type_hints

from wirebox._internal.markers import LIFECYCLE_ATTR, Inject, Lifecycle

Identifier = Any
"""A class, a dotted import path naming a class, or an arbitrary service name."""

MISSING: Any = object()
"""Sentinel for parameters without an annotation or a default value."""

_SKIPPED_PARAMETER_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
_SCALAR_BASE_TYPES: tuple[type[Any], ...] = (
    enum.Enum,
    pathlib.PurePath,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    decimal.Decimal,
)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)


@dataclass(frozen=True, slots=True)
class TypeConfig:
    """Explicit per-type configuration supplied when the container is created.

    Values set here win over the ``@singleton``/``@transient`` markers and
    over ``Annotated[..., Inject(...)]`` parameter metadata.
    """

    lifecycle: Lifecycle | None = None
    inject: Mapping[str, Identifier] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe a single constructor or callable parameter."""

    name: str
    owner: str
    kind: Any
    annotation: Any = MISSING
    default: Any = MISSING
    inject: Identifier | None = None
    is_scalar: bool = False

    @property
    def has_annotation(self) -> bool:
        return self.annotation is not MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is Parameter.KEYWORD_ONLY


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def type_name(identifier: Identifier) -> str:
    """Return the textual name used for an identifier in reports and errors."""
    if isinstance(identifier, str):
        return identifier
    if is_runtime_class(identifier):
        return f"{identifier.__module__}.{identifier.__qualname__}"
    return getattr(identifier, "__qualname__", repr(identifier))


class TypeDescriptor:
    """Introspect classes and callables into ordered parameter descriptors.

    Results are cached per target: a class or callable is inspected once for
    the container lifetime. Dotted import paths are located with
    ``importlib`` on first use and cached, including failed lookups.
    """

    def __init__(self, type_configs: Mapping[Identifier, TypeConfig] | None = None) -> None:
        self._located: dict[str, type[Any] | None] = {}
        self._parameters: dict[Any, tuple[ParameterDescriptor, ...]] = {}
        self._type_configs: dict[type[Any], TypeConfig] = {}
        for identifier, config in (type_configs or {}).items():
            located = self.locate(identifier)
            if located is not None:
                self._type_configs[located] = config

    def locate(self, identifier: Identifier) -> type[Any] | None:
        """Return the class an identifier names, or ``None`` for service names.

        Any string containing a dot is treated as ``module.attribute`` and its
        module is imported, so a service name such as ``"app.config"`` triggers
        one import attempt. The outcome, a miss included, is cached per string.

        Args:
            identifier: Class or dotted import path to locate.

        """
        if is_runtime_class(identifier):
            return identifier
        if not isinstance(identifier, str) or "." not in identifier:
            return None
        if identifier not in self._located:
            self._located[identifier] = self._import_class(identifier)
        return self._located[identifier]

    def parameters(self, target: type[Any] | Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
        """Return the ordered injectable parameters of a class or callable.

        Args:
            target: Class whose constructor is inspected, or a callable.

        """
        cached = self._parameters.get(target)
        if cached is not None:
            return cached

        owner = type_name(target)
        overrides = self.config(target).inject if inspect.isclass(target) else {}
        annotations = self._resolved_type_hints(target)
        descriptors: list[ParameterDescriptor] = []
        for parameter in self._signature_parameters(target):
            if parameter.kind in _SKIPPED_PARAMETER_KINDS:
                continue
            annotation, inject = self._split_annotation(
                annotations.get(parameter.name, parameter.annotation),
            )
            if parameter.name in overrides:
                inject = overrides[parameter.name]
            descriptors.append(
                ParameterDescriptor(
                    name=parameter.name,
                    owner=owner,
                    kind=parameter.kind,
                    annotation=annotation,
                    default=MISSING if parameter.default is Parameter.empty else parameter.default,
                    inject=inject,
                    is_scalar=annotation is not MISSING and self.is_scalar(annotation),
                ),
            )

        result = tuple(descriptors)
        self._parameters[target] = result
        return result

    def config(self, cls: type[Any]) -> TypeConfig:
        """Return the explicit configuration of a class, falling back to its markers."""
        explicit = self._type_configs.get(cls)
        marker = cls.__dict__.get(LIFECYCLE_ATTR)
        if explicit is None:
            return TypeConfig(lifecycle=marker)
        if explicit.lifecycle is None and marker is not None:
            return TypeConfig(lifecycle=marker, inject=explicit.inject)
        return explicit

    def is_instantiable(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true for concrete classes the container can call."""
        if not is_runtime_class(candidate):
            return False
        if inspect.isabstract(candidate):
            return False
        return not getattr(candidate, "_is_protocol", False)

    def is_scalar(self, annotation: Any) -> bool:
        """Return true for builtin and value types that are never auto-wired."""
        if isinstance(annotation, str):
            return False
        if not is_runtime_class(annotation):
            return True
        if annotation.__module__ == "builtins":
            return True
        return issubclass(annotation, _SCALAR_BASE_TYPES)

    def _split_annotation(self, annotation: Any) -> tuple[Any, Identifier | None]:
        if annotation is Parameter.empty:
            return MISSING, None

        inject: Identifier | None = None
        if get_origin(annotation) is Annotated:
            annotation_args = get_args(annotation)
            annotation = annotation_args[0]
            for item in annotation_args[1:]:
                if isinstance(item, Inject) and item.implementation is not None:
                    inject = item.implementation

        if get_origin(annotation) in _UNION_ORIGINS:
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) == 1:
                annotation = members[0]

        if isinstance(annotation, str):
            annotation = self.locate(annotation) or annotation
        return annotation, inject

    def _signature_parameters(self, target: Callable[..., Any]) -> Sequence[Parameter]:
        try:
            return tuple(inspect.signature(target).parameters.values())
        except (TypeError, ValueError):
            return ()

    def _resolved_type_hints(self, target: Callable[..., Any]) -> dict[str, Any]:
        annotations: dict[str, Any] = {}
        members: list[Any] = [target]
        if inspect.isclass(target):
            members = [getattr(target, name) for name in ("__new__", "__init__")] + members

        for member in members:
            try:
                member_annotations = get_type_hints(member, include_extras=True)
            except (AttributeError, NameError, TypeError):
                continue
            for parameter_name, parameter_annotation in member_annotations.items():
                annotations.setdefault(parameter_name, parameter_annotation)
        return annotations

    def _import_class(self, dotted_path: str) -> type[Any] | None:
        module_name, _, attribute = dotted_path.rpartition(".")
        try:
            module = importlib.import_module(module_name)
        except (ImportError, ValueError):
            return None
        candidate = getattr(module, attribute, None)
        return candidate if is_runtime_class(candidate) else None


def split_arguments(
    parameters: Sequence[ParameterDescriptor],
    values: Sequence[Any],
) -> tuple[list[Any], dict[str, Any]]:
    """Split resolved values into positional and keyword-only call arguments."""
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for parameter, value in zip(parameters, values, strict=True):
        if parameter.is_keyword_only:
            kwargs[parameter.name] = value
        else:
            args.append(value)
    return args, kwargs
