from typing import Annotated

import pytest

from tests.fakes import ConsoleLogger, FileLogger, LoggerInterface, Person, ServiceWithLogger
from wirebox import Container, Inject, Injected


@pytest.fixture()
def wirebox_container() -> Container:
    container = Container(bindings={LoggerInterface: ConsoleLogger})
    container.set("greeting", "hello")
    return container


@pytest.fixture()
def value() -> int:
    return 42


def test_injected_parameters_are_resolved_from_wirebox_container(
    value: int,
    service: Injected[ServiceWithLogger],
) -> None:
    assert value == 42
    assert isinstance(service.logger, ConsoleLogger)


def test_injected_classes_are_auto_wired(person: Injected[Person]) -> None:
    assert isinstance(person, Person)


def test_inject_metadata_selects_the_implementation(
    logger: Injected[Annotated[LoggerInterface, Inject(FileLogger)]],
) -> None:
    assert isinstance(logger, FileLogger)


def test_regular_fixture_resolution_still_works_without_injected_parameters(value: int) -> None:
    assert value == 42


def test_overridden_wirebox_container_fixture_is_used(wirebox_container: Container) -> None:
    assert wirebox_container.get("greeting") == "hello"


class TestInjectedMethods:
    def test_methods_support_injected_parameters(self, person: Injected[Person]) -> None:
        assert isinstance(person, Person)
