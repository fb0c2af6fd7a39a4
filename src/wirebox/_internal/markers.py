from enum import Enum, auto
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])
_ANNOTATED_MARKER_MIN_ARGS = 2

LIFECYCLE_ATTR = "__wirebox_lifecycle__"


class Lifecycle(Enum):
    """Define how often the container builds a class it auto-wires."""

    SINGLETON = auto()
    """Build once per container and reuse the instance for every request."""

    TRANSIENT = auto()
    """Build a new instance with freshly resolved dependencies on every request.

    Classes without a lifecycle are also rebuilt per request, but reuse the
    cached argument list of their constructor.
    """


class Inject(NamedTuple):
    """Request a specific implementation for a constructor parameter.

    Attach ``Inject`` metadata to ``typing.Annotated``. The implementation
    replaces the declared type before any binding lookup, so it wins over both
    global and contextual bindings. ``Inject()`` without an implementation
    keeps the declared type.

    Examples:
        .. code-block:: python

            class Service:
                def __init__(self, logger: Annotated[Logger, Inject(ConsoleLogger)]) -> None:
                    self.logger = logger

    """

    implementation: Any = None


class InjectedMarker:
    """A marker used to indicate a test parameter should be resolved by the container."""


if TYPE_CHECKING:
    Injected = Union[T, T]  # noqa: UP007,PYI016
    """Mark a pytest test parameter for container-driven injection.

    At runtime ``Injected[T]`` becomes ``Annotated[T, InjectedMarker()]``.
    """

else:

    class Injected:
        """Mark a pytest test parameter for container-driven injection.

        At runtime ``Injected[T]`` resolves to ``Annotated[T, InjectedMarker()]``.

        Examples:
            .. code-block:: python

                def test_service(service: Injected[Service]) -> None:
                    assert service.ready

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectedMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                return _build_annotated((args[0], *args[1:], InjectedMarker()))
            return _build_annotated((item, InjectedMarker()))


def singleton(cls: C) -> C:
    """Mark a class so the container builds it once and reuses the instance."""
    setattr(cls, LIFECYCLE_ATTR, Lifecycle.SINGLETON)
    return cls


def transient(cls: C) -> C:
    """Mark a class so every construction also resolves fresh dependencies."""
    setattr(cls, LIFECYCLE_ATTR, Lifecycle.TRANSIENT)
    return cls


def is_injected_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., InjectedMarker()]."""
    if get_origin(annotation) is not Annotated:
        return False
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return False
    return any(isinstance(item, InjectedMarker) for item in annotation_args[1:])


def strip_injected_annotation(annotation: Any) -> Any:
    """Strip Injected marker while preserving other Annotated metadata."""
    if not is_injected_annotation(annotation):
        return annotation

    annotation_args = get_args(annotation)
    parameter_type = annotation_args[0]
    metadata = tuple(item for item in annotation_args[1:] if not isinstance(item, InjectedMarker))
    if not metadata:
        return parameter_type
    return _build_annotated((parameter_type, *metadata))


def _build_annotated(params: tuple[object, ...]) -> Any:
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
