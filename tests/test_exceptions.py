"""Tests for the exception hierarchy and its messages."""

import pytest

from wirebox import (
    WireboxCircularDependencyError,
    WireboxDependencyNotFoundError,
    WireboxError,
    WireboxFrozenInstanceError,
    WireboxFrozenInstanceExtendError,
    WireboxFrozenInstanceOverrideError,
    WireboxInstanceNotExtendableError,
    WireboxInstanceProtectedError,
    WireboxInvalidArgumentError,
    WireboxInvalidRegistrationError,
)


@pytest.mark.parametrize(
    "error_type",
    [
        WireboxCircularDependencyError,
        WireboxDependencyNotFoundError,
        WireboxFrozenInstanceError,
        WireboxInstanceNotExtendableError,
        WireboxInstanceProtectedError,
        WireboxInvalidArgumentError,
        WireboxInvalidRegistrationError,
    ],
)
def test_errors_share_a_base_class(error_type: type[Exception]) -> None:
    assert issubclass(error_type, WireboxError)


def test_frozen_errors_share_a_base_class() -> None:
    assert issubclass(WireboxFrozenInstanceOverrideError, WireboxFrozenInstanceError)
    assert issubclass(WireboxFrozenInstanceExtendError, WireboxFrozenInstanceError)


class TestWireboxInvalidArgumentError:
    def test_message_for_missing_type_hint(self) -> None:
        error = WireboxInvalidArgumentError(parameter="value", owner="app.Service")

        assert "No type hint found for parameter 'value' in 'app.Service'" in str(error)

    def test_message_for_scalar_includes_chain(self) -> None:
        error = WireboxInvalidArgumentError(
            parameter="api_key",
            owner="app.Client",
            chain=["app.Controller", "app.Client"],
            annotation="builtins.str",
        )

        message = str(error)
        assert "'api_key' of type 'builtins.str' in 'app.Client'" in message
        assert "Resolution chain: app.Controller -> app.Client" in message
        assert error.chain == ("app.Controller", "app.Client")


class TestWireboxDependencyNotFoundError:
    def test_message_lists_suggestions(self) -> None:
        error = WireboxDependencyNotFoundError(
            identifier="app.PersonInterface",
            suggestions=["app.PersonInterfce"],
        )

        assert 'implements "app.PersonInterface"' in str(error)
        assert 'Did you mean: "app.PersonInterfce"?' in str(error)

    def test_message_without_suggestions(self) -> None:
        error = WireboxDependencyNotFoundError(identifier="mailer")

        assert "Did you mean" not in str(error)
        assert error.suggestions == ()


def test_circular_dependency_message_shows_the_cycle() -> None:
    error = WireboxCircularDependencyError(["app.A", "app.B", "app.A"])

    assert "Circular dependency detected: app.A -> app.B -> app.A" in str(error)


@pytest.mark.parametrize(
    ("error", "fragment"),
    [
        (WireboxFrozenInstanceOverrideError("config"), "cannot be overridden"),
        (WireboxFrozenInstanceExtendError("config"), "cannot be extended"),
        (WireboxInstanceProtectedError("config"), "is protected"),
        (WireboxInstanceNotExtendableError("config"), "is not extendable"),
    ],
)
def test_service_errors_name_the_identifier(error: WireboxError, fragment: str) -> None:
    assert "'config'" in str(error)
    assert fragment in str(error)
