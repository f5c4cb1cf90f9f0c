"""Roulette wheel (fitness-proportionate) selection."""

import logging

import numpy as np

from evoselect.protocols import PopulationView
from evoselect.random_engine import RandomEngine
from evoselect.weighted_index import WeightedIndex

logger = logging.getLogger(__name__)


def roulette_select(world: PopulationView, random: RandomEngine, count: int = 1) -> list[int]:
    """Reproduce count parents drawn with probability proportional to fitness.

    The selection probability of occupied slot i is
        p_i = f_i / Σ(f_j)
    where f are the current fitness values (empty slots weigh 0). Each draw
    takes one uniform position in [0, Σf) and resolves it through a
    WeightedIndex.

    In an asynchronous world the offspring overwrites a slot immediately, so
    its fitness is written into the index before the next draw and it may be
    chosen as a parent later in the same call. In a synchronous world the
    offspring waits for the next generation and the index is left alone.

    Args:
        world: Population to select from.
        random: Engine supplying the wheel positions.
        count: Number of parents to draw (with replacement).

    Returns:
        Parent slot ids in draw order.

    Raises:
        ValueError: If count is not positive, any fitness (including that of
            an asynchronous offspring) is negative, or the total fitness is
            zero.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    size = world.get_size()
    fitness = np.zeros(size, dtype=np.float64)
    for id in range(size):
        if world.is_occupied(id):
            fitness[id] = world.calc_fitness_id(id)

    if np.any(fitness < 0):
        raise ValueError("roulette selection requires non-negative fitness values")
    fitness_index = WeightedIndex(size, weights=fitness)

    parents = []
    for _ in range(count):
        # Async offspring can drive the total to zero mid-call.
        if fitness_index.get_weight() <= 0:
            raise ValueError("roulette selection requires a positive total fitness")
        fit_pos = random.get_double(fitness_index.get_weight())
        parent_id = fitness_index.index(fit_pos)
        offspring_ids = world.do_birth(world.get_genome_at(parent_id), parent_id)
        if not world.is_synchronous():
            for offspring_id in offspring_ids:
                offspring_fit = world.calc_fitness_id(offspring_id)
                if offspring_fit < 0:
                    raise ValueError("roulette selection requires non-negative fitness values")
                fitness_index.adjust(offspring_id, offspring_fit)
        parents.append(parent_id)

    logger.debug("Roulette selection drew %d parents", count)
    return parents


def roulette_selector(count: int = 1):
    """Create a roulette wheel (fitness-proportionate) selector.

    Args:
        count: Parents drawn per call.

    Returns:
        A Selector callable.

    Example:
        >>> selector = roulette_selector(count=50)
        >>> parents = selector(world, random)
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    def selector(world: PopulationView, random: RandomEngine) -> list[int]:
        return roulette_select(world, random, count)

    return selector
