"""Eco (resource pool) selection.

Eco selection is tournament selection on a fitness landscape that changes
with the population. Every extra ("resource") function owns a pool; the
organisms with the best score on that function share the pool evenly as a
bonus on top of their base fitness:

    bonus_r = pool_r / k_r   for each of the k_r best scorers on resource r

Only non-negative scores compete for a resource, so a resource nobody scores
at least 0 on is not handed out.
"""

import logging
from collections.abc import Sequence

import numpy as np

from evoselect.protocols import FitnessFunction, PopulationView
from evoselect.random_engine import RandomEngine
from evoselect.selection.tournament import run_tournaments

logger = logging.getLogger(__name__)


def resource_bonuses(extra_fitnesses: np.ndarray, pool_sizes: np.ndarray) -> np.ndarray:
    """Split each resource pool among the organisms tied for its best score.

    Args:
        extra_fitnesses: Scores, shape (n_resources, n_orgs).
        pool_sizes: Pool per resource, shape (n_resources,).

    Returns:
        Total bonus per organism, shape (n_orgs,).
    """
    n_resources, n_orgs = extra_fitnesses.shape
    bonus = np.zeros(n_orgs, dtype=np.float64)
    for ex_id in range(n_resources):
        scores = extra_fitnesses[ex_id]
        max_fit = max(0.0, float(scores.max())) if n_orgs else 0.0
        winners = scores == max_fit
        max_count = int(winners.sum())
        if max_count == 0:
            continue
        bonus[winners] += pool_sizes[ex_id] / max_count
    return bonus


def eco_select(
    world: PopulationView,
    random: RandomEngine,
    extra_funs: Sequence[FitnessFunction],
    pool_sizes: Sequence[float] | float,
    t_size: int,
    tourny_count: int = 1,
) -> list[int]:
    """Run tournaments on base fitness plus shared resource bonuses.

    Fitness depends on the rest of the population, so any fitness cache on
    the world is cleared before evaluating. Bonuses are computed once for the
    organisms present at the start of the call. In an asynchronous world an
    offspring born into a previously empty slot can enter later tournaments
    with its base fitness and no bonus.

    Args:
        world: Population with a base fitness function.
        random: Engine behind the population's random slot draws.
        extra_funs: Resource functions, each mapping a genome to a score.
        pool_sizes: One pool per resource, or a single pool used for all.
        t_size: Entrants per tournament.
        tourny_count: Number of tournaments, one offspring each.

    Returns:
        Winning slot ids in tournament order.

    Raises:
        ValueError: If the world has no fitness function or no organisms,
            t_size is out of range, tourny_count is not positive, or the pool
            sizes are negative or do not match extra_funs.
    """
    if world.get_fit_fun() is None:
        raise ValueError("eco selection requires a base fitness function")
    size = world.get_size()
    if size == 0 or world.get_num_orgs() == 0:
        raise ValueError("eco selection requires a non-empty population")
    if t_size <= 0 or t_size > size:
        raise ValueError(f"t_size must be in [1, {size}], got {t_size}")
    if tourny_count <= 0:
        raise ValueError(f"tourny_count must be positive, got {tourny_count}")

    if np.ndim(pool_sizes) == 0:
        pools = np.full(len(extra_funs), float(pool_sizes), dtype=np.float64)
    else:
        pools = np.asarray(pool_sizes, dtype=np.float64)
    if pools.shape != (len(extra_funs),):
        raise ValueError(f"expected {len(extra_funs)} pool sizes, got {pools.shape[0]}")
    if np.any(pools < 0):
        raise ValueError("pool sizes must be non-negative")

    if world.is_cache_on():
        world.clear_cache()

    org_ids = [id for id in range(size) if world.is_occupied(id)]
    base_fitness = np.array([world.calc_fitness_id(id) for id in org_ids], dtype=np.float64)
    extra_fitnesses = np.array(
        [[extra_fun(world.get_genome_at(id)) for id in org_ids] for extra_fun in extra_funs],
        dtype=np.float64,
    ).reshape(len(extra_funs), len(org_ids))

    # NaN marks slots that were empty when the bonuses were handed out.
    adjusted = np.full(size, np.nan, dtype=np.float64)
    adjusted[org_ids] = base_fitness + resource_bonuses(extra_fitnesses, pools)
    logger.debug("Eco selection: %d resources over %d organisms", len(extra_funs), len(org_ids))

    def fitness_of(id: int) -> float:
        # Async births can fill an empty slot mid-call; it competes on base fitness.
        fitness = adjusted[id]
        if np.isnan(fitness):
            return world.calc_fitness_id(id)
        return float(fitness)

    return run_tournaments(world, fitness_of, t_size, tourny_count)


def eco_selector(
    extra_funs: Sequence[FitnessFunction],
    pool_sizes: Sequence[float] | float,
    t_size: int = 2,
    tourny_count: int = 1,
):
    """Create an eco (resource pool) selector.

    Args:
        extra_funs: Resource functions.
        pool_sizes: One pool per resource, or a single pool for all.
        t_size: Entrants per tournament.
        tourny_count: Tournaments per call.

    Returns:
        A Selector callable.

    Example:
        >>> selector = eco_selector([task_a, task_b], pool_sizes=10.0, t_size=4, tourny_count=50)
        >>> winners = selector(world, random)
    """
    extra_funs = list(extra_funs)

    def selector(world: PopulationView, random: RandomEngine) -> list[int]:
        return eco_select(world, random, extra_funs, pool_sizes, t_size, tourny_count)

    return selector
