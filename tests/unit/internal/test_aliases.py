from wirebox._internal.aliases import AliasRegistry


def test_resolve_returns_identifier_when_no_alias_is_registered() -> None:
    registry = AliasRegistry()

    assert registry.resolve("service") == "service"


def test_resolve_returns_alias_target() -> None:
    registry = AliasRegistry()
    registry.add("x", "y")

    assert registry.resolve("x") == "y"
    assert registry.resolve("y") == "y"


def test_aliases_are_single_hop() -> None:
    registry = AliasRegistry()
    registry.add("a", "b")
    registry.add("b", "c")

    assert registry.resolve("a") == "b"
    assert registry.resolve("b") == "c"


def test_adding_an_alias_invalidates_memoized_resolutions() -> None:
    registry = AliasRegistry()
    assert registry.resolve("logger") == "logger"

    registry.add("logger", "file_logger")

    assert registry.resolve("logger") == "file_logger"


def test_redefining_an_alias_points_to_the_new_target() -> None:
    registry = AliasRegistry()
    registry.add("db", "sqlite")
    assert registry.resolve("db") == "sqlite"

    registry.add("db", "postgres")

    assert registry.resolve("db") == "postgres"
    assert registry.resolve("sqlite") == "sqlite"


def test_class_aliases_resolve_to_the_class() -> None:
    class Target:
        pass

    registry = AliasRegistry()
    registry.add("target", Target)

    assert registry.resolve("target") is Target
