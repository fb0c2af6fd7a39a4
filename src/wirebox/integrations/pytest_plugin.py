from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Iterator
from typing import Annotated, Any, cast, get_args, get_origin, get_type_hints

import pytest

from wirebox._internal.container import Container
from wirebox._internal.markers import Inject, is_injected_annotation, strip_injected_annotation

_WIREBOX_CONTAINER_ATTR = "_wirebox_container"
_WIREBOX_INJECTED_PARAMETERS_ATTR = "__wirebox_pytest_injected_parameters__"


@pytest.fixture()
def wirebox_container() -> Container:
    """Create a per-test container used by the plugin.

    Tests that use ``Injected[...]`` parameters resolve them from this container.
    Override the fixture to add bindings or registered services.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture(autouse=True)
def _wirebox_state(
    request: pytest.FixtureRequest,
    wirebox_container: Container,
) -> None:
    """Store plugin state on the test node for hook access."""
    node = cast("Any", request.node)
    setattr(node, _WIREBOX_CONTAINER_ATTR, wirebox_container)


def injected_parameters(function: Callable[..., Any]) -> dict[str, Any]:
    """Return the identifiers to resolve for each ``Injected[...]`` parameter.

    Args:
        function: Test function to inspect.

    """
    try:
        hints = get_type_hints(function, include_extras=True)
    except (NameError, TypeError):
        return {}

    identifiers: dict[str, Any] = {}
    for name, annotation in hints.items():
        if name == "return" or not is_injected_annotation(annotation):
            continue
        identifiers[name] = _identifier_for(strip_injected_annotation(annotation))
    return identifiers


def _identifier_for(annotation: Any) -> Any:
    if get_origin(annotation) is not Annotated:
        return annotation
    parameter_type, *metadata = get_args(annotation)
    for item in metadata:
        if isinstance(item, Inject) and item.implementation is not None:
            return item.implementation
    return parameter_type


def pytest_pycollect_makeitem(
    collector: Any,
    name: str,
    obj: object,
) -> Any | None:
    """Hide ``Injected[...]`` parameters from pytest fixture name matching.

    Pytest treats test function parameters as fixture names. This hook rewrites
    the signature of test functions that use ``Injected`` so those parameters
    are not reported as missing fixtures.

    Returns:
        ``None`` to continue default collection flow.

    """
    if not callable(obj) or not collector.istestfunction(obj, name):
        return None

    function = cast("Callable[..., Any]", obj)
    identifiers = injected_parameters(function)
    if not identifiers:
        return None

    signature = inspect.signature(function)
    function_as_any = cast("Any", function)
    function_as_any.__dict__[_WIREBOX_INJECTED_PARAMETERS_ATTR] = identifiers
    function_as_any.__signature__ = signature.replace(
        parameters=[
            parameter for parameter in signature.parameters.values() if parameter.name not in identifiers
        ],
    )
    return None


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Iterator[None]:
    """Wrap test execution to resolve ``Injected[...]`` parameters.

    Each injected parameter is fetched with ``wirebox_container.get`` right
    before the test body runs. Items without container state are left alone.

    Yields:
        Control back to pytest around test execution.

    """
    original_callable = cast("Callable[..., Any]", pyfuncitem.obj)
    original_as_any = cast("Any", original_callable)
    identifiers = cast(
        "dict[str, Any] | None",
        getattr(original_as_any, _WIREBOX_INJECTED_PARAMETERS_ATTR, None),
    )
    container = cast("Container | None", getattr(pyfuncitem, _WIREBOX_CONTAINER_ATTR, None))
    if not identifiers or container is None:
        yield
        return

    def _resolve_injected(kwargs: dict[str, Any]) -> dict[str, Any]:
        for parameter_name, identifier in identifiers.items():
            kwargs[parameter_name] = container.get(identifier)
        return kwargs

    if inspect.iscoroutinefunction(original_callable):

        @functools.wraps(original_callable)
        async def _invoke_with_container(*args: Any, **kwargs: Any) -> Any:
            return await original_callable(*args, **_resolve_injected(kwargs))

    else:

        @functools.wraps(original_callable)
        def _invoke_with_container(*args: Any, **kwargs: Any) -> Any:
            return original_callable(*args, **_resolve_injected(kwargs))

    pyfuncitem.obj = _invoke_with_container
    try:
        yield
    finally:
        pyfuncitem.obj = original_callable
