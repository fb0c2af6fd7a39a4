from __future__ import annotations

import importlib
import warnings
from typing import Any

from wirebox._internal.descriptors import is_runtime_class

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    return base_settings if isinstance(base_settings, type) else None


def _discover_settings_bases() -> tuple[type[Any], ...]:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        candidates = (
            _load_base_settings("pydantic_settings"),
            _load_base_settings("pydantic.v1"),
        )
    return tuple(dict.fromkeys(base for base in candidates if base is not None))


SETTINGS_BASES: tuple[type[Any], ...] = _discover_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a Pydantic settings model.

    Settings models are built by the container with no arguments, so their
    fields are read from the environment, and the instance is cached for the
    container lifetime. Without Pydantic installed, this always returns
    ``False``.

    Args:
        candidate: Object to test.

    """
    if not is_runtime_class(candidate) or candidate in SETTINGS_BASES:
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
]
