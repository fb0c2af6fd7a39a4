import pytest

from tests.fakes import (
    ClassWithObjectDependencies,
    ClassWithoutDependencies,
    Person,
    PersonInterface,
    SingletonService,
    TransientService,
)
from wirebox._internal.bindings import BindingRegistry
from wirebox._internal.cache import DependencyCache
from wirebox._internal.descriptors import TypeDescriptor
from wirebox._internal.resolver import DependencyResolver


def greet(person: Person) -> str:
    return person.greet()


@pytest.fixture()
def cache() -> DependencyCache:
    descriptor = TypeDescriptor()
    resolver = DependencyResolver(descriptor=descriptor, bindings=BindingRegistry(descriptor))
    return DependencyCache(descriptor=descriptor, resolver=resolver)


class TestGet:
    def test_arguments_are_computed_once(self, cache: DependencyCache) -> None:
        first = cache.get(ClassWithObjectDependencies)
        second = cache.get(ClassWithObjectDependencies)

        assert first is second
        assert len(cache) == 1

    def test_dotted_paths_share_the_class_entry(self, cache: DependencyCache) -> None:
        assert cache.get("tests.fakes.ClassWithObjectDependencies") is cache.get(ClassWithObjectDependencies)

    def test_distinct_closures_get_distinct_entries(self, cache: DependencyCache) -> None:
        def make_handler() -> object:
            def handler(person: Person) -> Person:
                return person

            return handler

        first, second = make_handler(), make_handler()

        assert cache.get(first)[0] is not cache.get(second)[0]
        assert len(cache) == 2

    def test_module_functions_key_by_dotted_name(self, cache: DependencyCache) -> None:
        assert cache.key_for(greet) == f"{__name__}.greet"

    def test_lambdas_key_by_value(self, cache: DependencyCache) -> None:
        handler = lambda person: person  # noqa: E731

        assert cache.key_for(handler) is handler


class TestInstantiate:
    def test_constructions_share_cached_arguments(self, cache: DependencyCache) -> None:
        first = cache.instantiate(ClassWithObjectDependencies)
        second = cache.instantiate(ClassWithObjectDependencies)

        assert first is not second
        assert first.person is second.person

    def test_transient_classes_get_fresh_arguments(self, cache: DependencyCache) -> None:
        first = cache.instantiate(TransientService)
        second = cache.instantiate(TransientService)

        assert first.dependency is not second.dependency
        assert len(cache) == 0

    def test_singletons_return_the_same_instance(self, cache: DependencyCache) -> None:
        assert cache.instantiate(SingletonService) is cache.instantiate(SingletonService)


class TestWarmUp:
    def test_populates_entries_for_known_classes(self, cache: DependencyCache) -> None:
        cache.warm_up([ClassWithObjectDependencies, "tests.fakes.ClassWithoutDependencies"])

        assert len(cache) == 2
        assert cache.get(ClassWithoutDependencies) == []

    def test_skips_identifiers_that_do_not_name_instantiable_classes(self, cache: DependencyCache) -> None:
        cache.warm_up(["mailer", "tests.fakes.Missing", PersonInterface, Person])

        assert len(cache) == 1


def test_invoke_calls_the_function_with_resolved_arguments(cache: DependencyCache) -> None:
    assert cache.invoke(greet) == "Hello, "
