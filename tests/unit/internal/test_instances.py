import pytest

from wirebox import WireboxFrozenInstanceOverrideError
from wirebox._internal.extensions import ExtensionManager
from wirebox._internal.instances import InstanceRegistry


class _Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.calls


@pytest.fixture()
def registry() -> InstanceRegistry:
    return InstanceRegistry()


@pytest.fixture()
def extensions() -> ExtensionManager:
    return ExtensionManager()


def test_set_then_has(registry: InstanceRegistry) -> None:
    registry.set("config", {"debug": True})

    assert registry.has("config")
    assert not registry.is_frozen("config")


def test_none_is_a_registered_value(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    registry.set("nothing", None)

    assert registry.has("nothing")
    assert registry.get("nothing", extensions, container=None) is None


def test_get_freezes_the_service(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    registry.set("config", {"debug": True})

    registry.get("config", extensions, container=None)

    assert registry.is_frozen("config")
    assert registry.frozen_ids() == ["config"]
    with pytest.raises(WireboxFrozenInstanceOverrideError):
        registry.set("config", {})


def test_remove_clears_value_and_frozen_flag(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    registry.set("config", 1)
    registry.get("config", extensions, container=None)

    registry.remove("config")

    assert not registry.has("config")
    assert not registry.is_frozen("config")
    registry.set("config", 2)
    assert registry.raw("config") == 2


def test_removing_unknown_id_is_a_noop(registry: InstanceRegistry) -> None:
    registry.remove("missing")

    assert registry.ids() == []


def test_plain_callables_resolve_once(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    counter = _Counter()
    registry.set("counter", counter)

    assert registry.get("counter", extensions, container=None) == 1
    assert registry.get("counter", extensions, container=None) == 1
    assert counter.calls == 1
    assert registry.raw("counter") == 1


def test_factory_callables_run_on_every_read(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    counter = _Counter()
    extensions.mark_as_factory(counter)
    registry.set("counter", counter)

    assert registry.get("counter", extensions, container=None) == 1
    assert registry.get("counter", extensions, container=None) == 2
    assert registry.raw("counter") is counter


def test_protected_callables_are_returned_verbatim(
    registry: InstanceRegistry,
    extensions: ExtensionManager,
) -> None:
    counter = _Counter()
    extensions.mark_as_protected(counter)
    registry.set("counter", counter)

    assert registry.get("counter", extensions, container=None) is counter
    assert counter.calls == 0


def test_classes_are_stored_as_values(registry: InstanceRegistry, extensions: ExtensionManager) -> None:
    registry.set("cls", _Counter)

    assert registry.get("cls", extensions, container=None) is _Counter


def test_callables_receive_the_container_when_they_accept_it(
    registry: InstanceRegistry,
    extensions: ExtensionManager,
) -> None:
    container = object()
    registry.set("echo", lambda c: c)

    assert registry.get("echo", extensions, container) is container
