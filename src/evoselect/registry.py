"""Registry system for selection strategies.

Instead of hardcoding a selection scheme, callers can register factories that
create configured selectors and retrieve them by name. This lets experiment
scripts pick a strategy from a string and a set of keyword arguments.

Basic usage:
    ```python
    from evoselect.registry import SelectionRegistry, list_selections

    def random_factory(count: int = 1):
        def selector(world, random):
            ids = [world.get_random_org_id() for _ in range(count)]
            for id in ids:
                world.do_birth(world.get_genome_at(id), id)
            return ids
        return selector

    SelectionRegistry.register("random", random_factory)

    selector = SelectionRegistry.get("random", count=10)
    available = list_selections()  # ["eco", "elite", ..., "random", ...]
    ```
"""

from collections.abc import Callable

from evoselect.protocols import Selector


class SelectionRegistry:
    """Registry for selection strategy factories.

    Factories accept keyword arguments and return Selector callables, so a
    strategy is configured at retrieval time.

    Class Attributes:
        _registry: Dictionary mapping strategy names to factory functions.
    """

    _registry: dict[str, Callable[..., Selector]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., Selector]) -> None:
        """Register a selection strategy factory.

        Args:
            name: Unique name for the strategy. Will overwrite if already exists.
            factory: Callable that returns a Selector. Should accept keyword
                arguments for configuration.
        """
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> Selector:
        """Get a configured selector by name.

        Args:
            name: Name of the registered strategy.
            **kwargs: Configuration parameters passed to the factory function.

        Returns:
            A configured Selector callable.

        Raises:
            KeyError: If the strategy name is not registered. Error message
                includes list of available strategies.

        Example:
            ```python
            selector = SelectionRegistry.get("tournament", t_size=4, tourny_count=100)
            winners = selector(world, random)
            ```
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"Selection strategy '{name}' not found. Available strategies: {available}")
        factory = cls._registry[name]
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Return sorted list of registered strategy names."""
        return sorted(cls._registry.keys())


def list_selections() -> list[str]:
    """List all registered selection strategies.

    Convenience function that returns SelectionRegistry.list().
    """
    return SelectionRegistry.list()
