import pytest

pydantic_settings = pytest.importorskip("pydantic_settings")

from pydantic_settings import BaseSettings  # noqa: E402

from wirebox import Container  # noqa: E402
from wirebox._internal.integrations.pydantic_settings import (  # noqa: E402
    SETTINGS_BASES,
    is_pydantic_settings_subclass,
)


class AppSettings(BaseSettings):
    app_name: str = "wirebox"
    debug: bool = False


class ServiceWithSettings:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings


def test_base_settings_is_discovered() -> None:
    assert BaseSettings in SETTINGS_BASES


def test_subclasses_are_detected() -> None:
    assert is_pydantic_settings_subclass(AppSettings)
    assert not is_pydantic_settings_subclass(BaseSettings)
    assert not is_pydantic_settings_subclass(ServiceWithSettings)
    assert not is_pydantic_settings_subclass("AppSettings")


def test_settings_are_singletons(container: Container) -> None:
    assert container.get(AppSettings) is container.get(AppSettings)


def read_settings(settings: AppSettings) -> AppSettings:
    return settings


def test_settings_are_injected_once(container: Container) -> None:
    service = container.get(ServiceWithSettings)

    assert container.resolve(read_settings) is service.settings


def test_settings_read_the_environment(container: Container, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NAME", "from-env")

    assert container.get(AppSettings).app_name == "from-env"


def test_settings_fields_are_not_auto_wired(container: Container) -> None:
    container.warm_up([AppSettings])

    assert container.dependency_tree(ServiceWithSettings) == [f"{__name__}.AppSettings"]
