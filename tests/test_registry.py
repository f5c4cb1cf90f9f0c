"""Tests for the selection strategy registry.

Each test starts from an empty registry; the built-in registrations are
restored afterwards.
"""

import pytest

from evoselect.registry import SelectionRegistry, list_selections


@pytest.fixture(autouse=True)
def isolate_registry():
    """Save and restore the registry to ensure test isolation."""
    saved = SelectionRegistry._registry.copy()
    SelectionRegistry._registry = {}
    yield saved
    SelectionRegistry._registry = saved


def first_org(world, random):
    return [0]


class TestSelectionRegistry:
    """Tests for SelectionRegistry class."""

    def test_register_adds_factory_to_registry(self) -> None:
        SelectionRegistry.register("test", lambda: first_org)
        assert "test" in SelectionRegistry.list()

    def test_register_overwrites_existing_strategy(self) -> None:
        """Registering with the same name replaces the previous factory."""

        def last_org(world, random):
            return [world.get_size() - 1]

        SelectionRegistry.register("test", lambda: first_org)
        SelectionRegistry.register("test", lambda: last_org)

        assert SelectionRegistry.list() == ["test"]
        assert SelectionRegistry.get("test") is last_org

    def test_get_returns_configured_selector(self, fitness_world, random) -> None:
        """Factory kwargs configure the returned selector."""

        def factory(count: int = 1):
            def selector(world, random):
                ids = [world.get_random_org_id() for _ in range(count)]
                for id in ids:
                    world.do_birth(world.get_genome_at(id), id)
                return ids

            return selector

        SelectionRegistry.register("random", factory)
        selector = SelectionRegistry.get("random", count=3)

        assert len(selector(fitness_world, random)) == 3
        assert fitness_world.get_next_size() == 3

    def test_get_raises_keyerror_for_unknown_strategy(self) -> None:
        with pytest.raises(KeyError, match="Selection strategy 'unknown' not found"):
            SelectionRegistry.get("unknown")

    def test_keyerror_message_lists_available_strategies(self) -> None:
        SelectionRegistry.register("strategy1", lambda: first_org)
        SelectionRegistry.register("strategy2", lambda: first_org)

        with pytest.raises(KeyError, match="Available strategies: strategy1, strategy2"):
            SelectionRegistry.get("unknown")

    def test_keyerror_message_shows_none_when_empty(self) -> None:
        with pytest.raises(KeyError, match="Available strategies: none"):
            SelectionRegistry.get("unknown")

    def test_list_returns_sorted_strategy_names(self) -> None:
        SelectionRegistry.register("zebra", lambda: first_org)
        SelectionRegistry.register("alpha", lambda: first_org)

        assert SelectionRegistry.list() == ["alpha", "zebra"]
        assert list_selections() == ["alpha", "zebra"]

    def test_factory_receives_all_kwargs(self) -> None:
        received_kwargs = {}

        def factory(**kwargs):
            received_kwargs.update(kwargs)
            return first_org

        SelectionRegistry.register("test", factory)
        SelectionRegistry.get("test", t_size=5, pool_sizes=0.5, custom=True)

        assert received_kwargs == {"t_size": 5, "pool_sizes": 0.5, "custom": True}

    def test_convenience_function_empty_without_registrations(self) -> None:
        assert list_selections() == []


class TestBuiltinStrategies:
    """Tests for the strategies registered on import."""

    def test_builtins_are_registered(self, isolate_registry) -> None:
        """Importing evoselect registers every built-in strategy."""
        assert sorted(isolate_registry) == ["eco", "elite", "lexicase", "map_elites", "roulette", "tournament"]
