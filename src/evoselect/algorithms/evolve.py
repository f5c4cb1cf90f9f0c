"""Generational driver with pluggable selection strategies.

evolve() repeatedly applies one selection strategy to a World and closes
each generation with world.update(). The strategy is given either as a
registry name plus keyword arguments, or as a Selector callable.

Example:
    >>> from evoselect import RandomEngine, World, evolve
    >>>
    >>> random = RandomEngine(42)
    >>>
    >>> def mutate(genome, random):
    ...     bits = list(genome)
    ...     pos = random.get_uint(len(bits))
    ...     bits[pos] = 1 - bits[pos]
    ...     return tuple(bits)
    >>>
    >>> world = World(random, fit_fun=sum, synchronous=True, mutate=mutate)
    >>> _ = world.inject((0,) * 16, copy_count=50)
    >>>
    >>> # Using a registered strategy by name
    >>> result = evolve(world, random, "tournament", n_generations=20, t_size=4, tourny_count=50)
    >>> result.generations
    20
    >>>
    >>> # Using a configured selector directly
    >>> from evoselect.selection import elite_selector
    >>> result = evolve(world, random, elite_selector(e_count=5, copy_count=10), n_generations=5)
"""

import logging
from collections.abc import Callable

import numpy as np

# Import selection module to trigger strategy registration
import evoselect.selection  # noqa: F401
from evoselect.population import World
from evoselect.protocols import Selector
from evoselect.random_engine import RandomEngine
from evoselect.registry import SelectionRegistry
from evoselect.results import EvolveResult

logger = logging.getLogger(__name__)


def _fitness_snapshot(world: World) -> tuple[np.ndarray, np.ndarray]:
    ids = np.array([id for id in range(world.get_size()) if world.is_occupied(id)], dtype=np.intp)
    fitness = np.array([world.calc_fitness_id(int(id)) for id in ids], dtype=np.float64)
    return ids, fitness


def evolve(
    world: World,
    random: RandomEngine,
    select: str | Selector = "tournament",
    n_generations: int = 1,
    callback: Callable[[World, int], bool] | None = None,
    **select_kwargs,
) -> EvolveResult:
    """Run n_generations rounds of selection on world.

    Args:
        world: Population to evolve, with a base fitness function.
        random: Engine passed to the selector.
        select: Selection strategy. Can be:
            - String: Name of a registered strategy (e.g., "tournament", "lexicase")
            - Selector: Direct callable following the Selector protocol
        n_generations: Number of generations to run.
        callback: Optional callback called at the start of each generation.
            Signature: (world, generation) -> bool
            If callback returns True, the run stops early.
        **select_kwargs: Factory arguments when select is a registry name.

    Returns:
        EvolveResult with per-generation best and mean fitness and the
        fittest organism of the final population.

    Raises:
        ValueError: If n_generations is negative, the world has no fitness
            function, or select_kwargs are given with a Selector callable.
        KeyError: If the strategy name is not registered.
    """
    if n_generations < 0:
        raise ValueError(f"n_generations must be non-negative, got {n_generations}")
    if world.get_fit_fun() is None:
        raise ValueError("evolve requires a world with a fitness function")
    if isinstance(select, str):
        selector = SelectionRegistry.get(select, **select_kwargs)
    elif select_kwargs:
        raise ValueError("select_kwargs are only used with a registered strategy name")
    else:
        selector = select

    best_history: list[float] = []
    mean_history: list[float] = []

    for gen in range(n_generations):
        if callback is not None and callback(world, gen):
            logger.info("Stopping early at generation %d", gen)
            break

        selector(world, random)
        world.update()

        _, fitness = _fitness_snapshot(world)
        best = float(fitness.max()) if fitness.size else float("nan")
        mean = float(fitness.mean()) if fitness.size else float("nan")
        best_history.append(best)
        mean_history.append(mean)
        logger.debug("Generation %d: best=%.4f mean=%.4f orgs=%d", gen, best, mean, fitness.size)

    ids, fitness = _fitness_snapshot(world)
    if fitness.size:
        best_id = int(ids[int(np.argmax(fitness))])
        best_genome = world.get_genome_at(best_id)
    else:
        best_id, best_genome = -1, None

    return EvolveResult(
        generations=len(best_history),
        best_fitness=np.array(best_history, dtype=np.float64),
        mean_fitness=np.array(mean_history, dtype=np.float64),
        best_genome=best_genome,
        best_id=best_id,
    )
