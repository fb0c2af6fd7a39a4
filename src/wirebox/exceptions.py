from __future__ import annotations

from collections.abc import Sequence

_CHAIN_SEPARATOR = " -> "


def _format_chain(chain: Sequence[str]) -> str:
    if not chain:
        return ""
    return f"\nResolution chain: {_CHAIN_SEPARATOR.join(chain)}"


class WireboxError(Exception):
    """Represent a base class for all wirebox-specific failures.

    Catch this type when you want to handle any wirebox error path without
    matching each concrete exception class individually.
    """


class WireboxInvalidRegistrationError(WireboxError):
    """Signal invalid use of a registration API.

    Raised by ``Container.factory``, ``Container.protect`` and
    ``Container.extend`` when they receive a non-callable, and by the
    contextual binding builder when ``give`` is called before ``needs``.

    These are programmer errors: fix the calling code rather than catching them.
    """


class WireboxInvalidArgumentError(WireboxError):
    """Signal a constructor or callable parameter that cannot be auto-wired.

    Raised by ``Container.get`` and ``Container.resolve`` when a required
    parameter has no type annotation, or is annotated with a scalar type
    (``str``, ``int``, ``list``...) and declares no default value.

    Typical fixes include annotating the parameter, giving the scalar a default
    value, or binding the consumer to a producer that builds it explicitly.
    """

    def __init__(
        self,
        *,
        parameter: str,
        owner: str,
        chain: Sequence[str] = (),
        annotation: str | None = None,
    ) -> None:
        self.parameter = parameter
        self.owner = owner
        self.chain = tuple(chain)
        self.annotation = annotation
        if annotation is None:
            msg = (
                f"No type hint found for parameter '{parameter}' in '{owner}'."
                f"{_format_chain(self.chain)}\n"
                "Type hints are required for dependency injection to work."
            )
        else:
            msg = (
                f"Unable to resolve parameter '{parameter}' of type '{annotation}' "
                f"in '{owner}'.{_format_chain(self.chain)}\n"
                "Scalar types cannot be auto-resolved; provide a default value."
            )
        super().__init__(msg)


class WireboxDependencyNotFoundError(WireboxError):
    """Signal that no concrete implementation exists for an identifier.

    Raised when an abstract class or protocol has no binding, when a dotted
    identifier cannot be imported, or when ``Container.get`` receives a
    service name that was never registered.

    The message lists up to three similarly named bindings or services, which
    usually points at a typo in the registration.
    """

    def __init__(self, *, identifier: str, suggestions: Sequence[str] = ()) -> None:
        self.identifier = identifier
        self.suggestions = tuple(suggestions)
        msg = (
            f'No concrete class was found that implements "{identifier}".\n'
            "Did you forget to bind it to a concrete class?"
        )
        if self.suggestions:
            msg += "\nDid you mean: " + ", ".join(f'"{name}"' for name in self.suggestions) + "?"
        super().__init__(msg)


class WireboxCircularDependencyError(WireboxError):
    """Signal a cycle in the constructor graph.

    The ``chain`` attribute holds the visited types in order, ending with the
    repeated one (``A -> B -> A``).

    Typical fixes include injecting a producer callable instead of the
    instance, or splitting the shared behaviour into a third class.
    """

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        msg = (
            f"Circular dependency detected: {_CHAIN_SEPARATOR.join(self.chain)}\n"
            "This happens when classes depend on each other in a loop."
        )
        super().__init__(msg)


class WireboxFrozenInstanceError(WireboxError):
    """Signal mutation of a service that has already been read.

    Services freeze on their first ``Container.get``. Call
    ``Container.remove`` to unfreeze an identifier before replacing it.
    """

    def __init__(self, identifier: str, msg: str) -> None:
        self.identifier = identifier
        super().__init__(msg)


class WireboxFrozenInstanceOverrideError(WireboxFrozenInstanceError):
    """Signal ``Container.set`` on a frozen service."""

    def __init__(self, identifier: str) -> None:
        msg = (
            f"The instance '{identifier}' is frozen and cannot be overridden.\n"
            f"Call remove({identifier!r}) before setting a new value."
        )
        super().__init__(identifier, msg)


class WireboxFrozenInstanceExtendError(WireboxFrozenInstanceError):
    """Signal ``Container.extend`` on a frozen service."""

    def __init__(self, identifier: str) -> None:
        msg = (
            f"The instance '{identifier}' is frozen and cannot be extended.\n"
            "Extend the service before reading it, or remove it first."
        )
        super().__init__(identifier, msg)


class WireboxInstanceProtectedError(WireboxError):
    """Signal ``Container.extend`` on a callable wrapped with ``protect``.

    Protected callables are stored as plain values and never invoked by the
    container, so there is no result to decorate.
    """

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        msg = (
            f"The instance '{identifier}' is protected and cannot be extended.\n"
            "Protected callables are treated as values, not as service factories."
        )
        super().__init__(msg)


class WireboxInstanceNotExtendableError(WireboxError):
    """Signal ``Container.extend`` on a scalar value.

    Only callables and objects (including lists, dicts and tuples) can be
    extended; ``None``, strings, bytes, numbers and booleans cannot.
    """

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        msg = (
            f"The instance '{identifier}' is not extendable.\n"
            "Only objects, containers and callables can be extended."
        )
        super().__init__(msg)
