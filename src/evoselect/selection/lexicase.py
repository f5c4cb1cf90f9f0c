"""Lexicase selection over multiple fitness functions.

Each reproduction event walks the fitness functions in a fresh random order.
At every function only the candidates that share the best score survive,
until one candidate is left or the order runs out. Organisms with identical
genomes score identically on every function, so they are grouped into
genotype buckets and each function is evaluated once per bucket:

    evaluations = n_functions × n_genotypes   (instead of × n_organisms)
"""

import logging
from collections.abc import Hashable, Sequence

import numpy as np

from evoselect.protocols import FitnessFunction, Genome, PopulationView
from evoselect.random_engine import RandomEngine
from evoselect.random_utils import get_permutation

logger = logging.getLogger(__name__)


def genome_key(genome: Genome) -> Hashable:
    """Return a hashable key with the same equality as genome.

    numpy arrays are keyed by dtype, shape and raw bytes; lists by their
    tuple; everything else must already be hashable.
    """
    if isinstance(genome, np.ndarray):
        return (genome.dtype.str, genome.shape, genome.tobytes())
    if isinstance(genome, list):
        return tuple(genome_key(item) for item in genome)
    return genome


def group_genotypes(world: PopulationView) -> list[list[int]]:
    """Group occupied slot ids by genome, in order of first appearance."""
    buckets: dict[Hashable, int] = {}
    genotype_lists: list[list[int]] = []
    for org_id in range(world.get_size()):
        if not world.is_occupied(org_id):
            continue
        key = genome_key(world.get_genome_at(org_id))
        if key in buckets:
            genotype_lists[buckets[key]].append(org_id)
        else:
            buckets[key] = len(genotype_lists)
            genotype_lists.append([org_id])
    return genotype_lists


def genotype_fitness_matrix(
    world: PopulationView,
    fit_funs: Sequence[FitnessFunction],
    genotype_lists: Sequence[Sequence[int]],
) -> np.ndarray:
    """Evaluate every function on one representative genome per bucket.

    Returns:
        Array of shape (n_functions, n_genotypes).
    """
    fitnesses = np.empty((len(fit_funs), len(genotype_lists)), dtype=np.float64)
    for fit_id, fit_fun in enumerate(fit_funs):
        for gen_id, org_ids in enumerate(genotype_lists):
            fitnesses[fit_id, gen_id] = fit_fun(world.get_genome_at(org_ids[0]))
    return fitnesses


def lexicase_select(
    world: PopulationView,
    random: RandomEngine,
    fit_funs: Sequence[FitnessFunction],
    repro_count: int = 1,
    max_funs: int = 0,
) -> list[int]:
    """Reproduce repro_count organisms chosen by lexicase filtering.

    For each reproduction event the function order is a full random
    permutation when max_funs equals the number of functions; otherwise it is
    max_funs independent uniform draws, which may repeat a function. Filtering
    keeps only genotypes whose score exactly equals the current maximum and
    stops early once a single genotype remains. The winner is drawn uniformly
    over the organisms of the surviving genotypes, so larger buckets are
    proportionally more likely.

    If world.on_lexicase_select is set it is called with the function ids
    actually consulted and the chosen slot id before the birth.

    Args:
        world: Population to select from.
        random: Engine for the function orders and the final draw.
        fit_funs: Fitness functions, each mapping a genome to a float.
        repro_count: Number of reproduction events.
        max_funs: Functions consulted per event; 0 means all of them.

    Returns:
        Chosen slot ids in reproduction order.

    Raises:
        ValueError: If the world is empty, fit_funs is empty, repro_count is
            not positive or max_funs is negative.
    """
    if world.get_size() == 0 or world.get_num_orgs() == 0:
        raise ValueError("lexicase selection requires a non-empty population")
    if len(fit_funs) == 0:
        raise ValueError("lexicase selection requires at least one fitness function")
    if repro_count <= 0:
        raise ValueError(f"repro_count must be positive, got {repro_count}")
    if max_funs < 0:
        raise ValueError(f"max_funs must be non-negative, got {max_funs}")

    n_funs = len(fit_funs)
    if max_funs == 0:
        max_funs = n_funs

    genotype_lists = group_genotypes(world)
    bucket_sizes = np.array([len(org_ids) for org_ids in genotype_lists], dtype=np.intp)
    fitnesses = genotype_fitness_matrix(world, fit_funs, genotype_lists)
    all_gens = np.arange(len(genotype_lists), dtype=np.intp)
    logger.debug(
        "Lexicase: %d organisms in %d genotypes, %d functions",
        world.get_num_orgs(),
        len(genotype_lists),
        n_funs,
    )

    chosen = []
    for _ in range(repro_count):
        if max_funs == n_funs:
            order = get_permutation(random, n_funs)
        else:
            order = [random.get_uint(n_funs) for _ in range(max_funs)]

        cur_gens = all_gens
        depth = -1
        for fit_id in order:
            depth += 1
            scores = fitnesses[fit_id, cur_gens]
            cur_gens = cur_gens[scores == scores.max()]
            if len(cur_gens) == 1:
                break

        options = int(bucket_sizes[cur_gens].sum())
        winner = random.get_uint(options)
        repro_id = -1
        for gen in cur_gens:
            if winner < bucket_sizes[gen]:
                repro_id = genotype_lists[gen][winner]
                break
            winner -= int(bucket_sizes[gen])

        if world.on_lexicase_select is not None:
            world.on_lexicase_select(list(order[: depth + 1]), repro_id)
        world.do_birth(world.get_genome_at(repro_id), repro_id)
        chosen.append(repro_id)

    return chosen


def lexicase_selector(fit_funs: Sequence[FitnessFunction], repro_count: int = 1, max_funs: int = 0):
    """Create a lexicase selector.

    Args:
        fit_funs: Fitness functions consulted in random order.
        repro_count: Reproduction events per call.
        max_funs: Functions consulted per event; 0 means all.

    Returns:
        A Selector callable.

    Example:
        >>> selector = lexicase_selector([count_ones, count_leading], repro_count=100)
        >>> chosen = selector(world, random)
    """
    fit_funs = list(fit_funs)
    if len(fit_funs) == 0:
        raise ValueError("lexicase selection requires at least one fitness function")

    def selector(world: PopulationView, random: RandomEngine) -> list[int]:
        return lexicase_select(world, random, fit_funs, repro_count, max_funs)

    return selector
